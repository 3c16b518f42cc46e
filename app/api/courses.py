"""Catalog, enrollment and the learn view.

GET  /api/courses                 public, filtered and paginated
GET  /api/courses/{id}            public course detail
POST /api/courses/{id}/enroll     enroll the caller
GET  /api/courses/{id}/learn      lessons with the caller's completion flags
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from app.api.dependencies import CurrentUser, RequestRepos
from app.models.course import Course, CourseSummary, Lesson
from app.models.progress import Enrollment
from app.services import catalog_service, enrollment_service, learner_service
from app.services.errors import ServiceError

router = APIRouter(prefix="/api/courses", tags=["courses"])


# --- Response schemas -----------------------------------------------------


class CourseOut(BaseModel):
    id: int
    title: str
    description: str | None
    image: str | None
    duration: int | None
    level: str | None
    format: str | None
    price: float | None
    rating: float
    categoryId: int | None
    institutionId: int | None
    instructorId: int | None
    createdAt: datetime | None


class CourseListItem(CourseOut):
    categoryName: str | None
    institutionName: str | None
    instructorName: str | None
    enrollmentsCount: int


class CoursePageOut(BaseModel):
    courses: list[CourseListItem]
    total: int
    page: int
    totalPages: int


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None


class InstitutionOut(BaseModel):
    id: int
    name: str
    description: str | None
    website: str | None
    rating: float


class InstructorOut(BaseModel):
    id: int
    name: str
    email: str | None
    bio: str | None
    institutionId: int | None


class LessonOut(BaseModel):
    id: int
    courseId: int
    title: str
    order: int
    content: str | None
    videoUrl: str | None


class ReviewOut(BaseModel):
    id: int
    userId: int
    userName: str | None
    userEmail: str | None
    rating: int
    comment: str | None
    createdAt: datetime | None


class CourseDetailOut(BaseModel):
    course: CourseOut
    category: CategoryOut | None
    institution: InstitutionOut | None
    instructor: InstructorOut | None
    lessons: list[LessonOut]
    reviews: list[ReviewOut]


class EnrollmentOut(BaseModel):
    id: int
    userId: int
    courseId: int
    status: str
    progress: int
    enrolledAt: datetime | None
    completedAt: datetime | None


class LearnLessonOut(LessonOut):
    completed: bool


class LearnOut(BaseModel):
    course: CourseOut
    enrollment: EnrollmentOut
    lessons: list[LearnLessonOut]


# --- Mapping helpers ------------------------------------------------------


def _num(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def course_out(course: Course) -> CourseOut:
    return CourseOut(
        id=course.id,
        title=course.title,
        description=course.description,
        image=course.image,
        duration=course.duration,
        level=course.level,
        format=course.format,
        price=_num(course.price),
        rating=float(course.rating),
        categoryId=course.category_id,
        institutionId=course.institution_id,
        instructorId=course.instructor_id,
        createdAt=course.created_at,
    )


def course_list_item(item: CourseSummary) -> CourseListItem:
    return CourseListItem(
        **course_out(item.course).model_dump(),
        categoryName=item.category_name,
        institutionName=item.institution_name,
        instructorName=item.instructor_name,
        enrollmentsCount=item.enrollments_count,
    )


def enrollment_out(enrollment: Enrollment) -> EnrollmentOut:
    return EnrollmentOut(
        id=enrollment.id,
        userId=enrollment.user_id,
        courseId=enrollment.course_id,
        status=enrollment.status,
        progress=enrollment.progress,
        enrolledAt=enrollment.enrolled_at,
        completedAt=enrollment.completed_at,
    )


def _lesson_fields(lesson: Lesson) -> dict:
    return {
        "id": lesson.id,
        "courseId": lesson.course_id,
        "title": lesson.title,
        "order": lesson.order,
        "content": lesson.content,
        "videoUrl": lesson.video_url,
    }


# --- Endpoints ------------------------------------------------------------


@router.get("", response_model=CoursePageOut)
async def list_courses(
    repos: RequestRepos,
    page: int = Query(1, ge=1),
    category: str | None = None,
    level: str | None = None,
    format: str | None = None,
    search: str | None = None,
) -> CoursePageOut:
    result = await catalog_service.list_courses(
        repos,
        page=page,
        category=category,
        level=level,
        format=format,
        search=search,
    )
    return CoursePageOut(
        courses=[course_list_item(item) for item in result.items],
        total=result.total,
        page=result.page,
        totalPages=result.total_pages,
    )


@router.get("/{course_id}", response_model=CourseDetailOut)
async def get_course(course_id: int, repos: RequestRepos) -> CourseDetailOut:
    try:
        detail = await catalog_service.get_course_detail(repos, course_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None

    category, institution, instructor = (
        detail.category,
        detail.institution,
        detail.instructor,
    )
    return CourseDetailOut(
        course=course_out(detail.course),
        category=(
            CategoryOut(
                id=category.id,
                name=category.name,
                slug=category.slug,
                description=category.description,
            )
            if category
            else None
        ),
        institution=(
            InstitutionOut(
                id=institution.id,
                name=institution.name,
                description=institution.description,
                website=institution.website,
                rating=float(institution.rating),
            )
            if institution
            else None
        ),
        instructor=(
            InstructorOut(
                id=instructor.id,
                name=instructor.name,
                email=instructor.email,
                bio=instructor.bio,
                institutionId=instructor.institution_id,
            )
            if instructor
            else None
        ),
        lessons=[LessonOut(**_lesson_fields(lesson)) for lesson in detail.lessons],
        reviews=[
            ReviewOut(
                id=r.review.id,
                userId=r.review.user_id,
                userName=r.user_name,
                userEmail=r.user_email,
                rating=r.review.rating,
                comment=r.review.comment,
                createdAt=r.review.created_at,
            )
            for r in detail.reviews
        ],
    )


@router.post(
    "/{course_id}/enroll",
    response_model=EnrollmentOut,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_in_course(
    course_id: int,
    principal: CurrentUser,
    repos: RequestRepos,
) -> EnrollmentOut:
    try:
        enrollment = await enrollment_service.enroll(
            repos, principal.user_id, course_id
        )
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None
    return enrollment_out(enrollment)


@router.get("/{course_id}/learn", response_model=LearnOut)
async def learn_course(
    course_id: int,
    principal: CurrentUser,
    repos: RequestRepos,
) -> LearnOut:
    try:
        view = await learner_service.learn_view(repos, principal.user_id, course_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from None

    return LearnOut(
        course=course_out(view.course),
        enrollment=enrollment_out(view.enrollment),
        lessons=[
            LearnLessonOut(**_lesson_fields(lesson), completed=done)
            for lesson, done in view.lessons
        ],
    )
