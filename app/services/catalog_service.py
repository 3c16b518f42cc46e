"""Course catalog: filtered listing and course detail."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from app.models.course import (
    FORMATS,
    LEVELS,
    Category,
    Course,
    CourseQuery,
    CourseSummary,
    Institution,
    Instructor,
    Lesson,
)
from app.models.review import Review
from app.repos.registry import Repos
from app.services.errors import CourseNotFoundError

logger = logging.getLogger(__name__)

PAGE_SIZE = 12
REVIEWS_SHOWN = 10


@dataclass(frozen=True, slots=True)
class CoursePage:
    items: list[CourseSummary]
    total: int
    page: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class CourseReview:
    review: Review
    user_name: str | None
    user_email: str | None


@dataclass(frozen=True, slots=True)
class CourseDetail:
    course: Course
    category: Category | None
    institution: Institution | None
    instructor: Instructor | None
    lessons: list[Lesson]
    reviews: list[CourseReview]


def build_query(
    *,
    category: str | None = None,
    level: str | None = None,
    format: str | None = None,
    search: str | None = None,
) -> CourseQuery:
    """Normalize raw filter values; unknown levels and formats are dropped."""
    level = level.upper() if level else None
    format = format.upper() if format else None
    search = search.strip() if search else None
    return CourseQuery(
        category_slug=category or None,
        level=level if level in LEVELS else None,
        format=format if format in FORMATS else None,
        search=search or None,
    )


async def with_enrollment_counts(
    repos: Repos, items: list[CourseSummary]
) -> list[CourseSummary]:
    counts = await repos.enrollments.count_by_course([i.course.id for i in items])
    return [
        replace(item, enrollments_count=counts.get(item.course.id, 0))
        for item in items
    ]


async def list_courses(
    repos: Repos,
    *,
    page: int = 1,
    category: str | None = None,
    level: str | None = None,
    format: str | None = None,
    search: str | None = None,
) -> CoursePage:
    page = max(page, 1)
    query = build_query(category=category, level=level, format=format, search=search)
    items, total = await repos.courses.search(
        query, limit=PAGE_SIZE, offset=(page - 1) * PAGE_SIZE
    )
    logger.debug("Catalog page=%d total=%d query=%s", page, total, query)
    return CoursePage(
        items=await with_enrollment_counts(repos, items),
        total=total,
        page=page,
        total_pages=math.ceil(total / PAGE_SIZE),
    )


async def get_course(repos: Repos, course_id: int) -> Course:
    course = await repos.courses.get(course_id)
    if course is None:
        raise CourseNotFoundError()
    return course


async def get_course_detail(repos: Repos, course_id: int) -> CourseDetail:
    course = await get_course(repos, course_id)
    courses = repos.courses
    return CourseDetail(
        course=course,
        category=(
            await courses.get_category(course.category_id)
            if course.category_id is not None
            else None
        ),
        institution=(
            await courses.get_institution(course.institution_id)
            if course.institution_id is not None
            else None
        ),
        instructor=(
            await courses.get_instructor(course.instructor_id)
            if course.instructor_id is not None
            else None
        ),
        lessons=await courses.list_lessons(course_id),
        reviews=await _recent_reviews(repos, course_id),
    )


async def _recent_reviews(repos: Repos, course_id: int) -> list[CourseReview]:
    reviews = await repos.reviews.list_for_course(course_id, limit=REVIEWS_SHOWN)
    authors = await repos.users.get_many(sorted({r.user_id for r in reviews}))
    result = []
    for r in reviews:
        author = authors.get(r.user_id)
        result.append(
            CourseReview(
                review=r,
                user_name=author.name if author else None,
                user_email=author.email if author else None,
            )
        )
    return result
