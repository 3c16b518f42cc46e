"""Read models for a signed-in learner: the dashboard and the learn view."""

from __future__ import annotations

from dataclasses import dataclass

from app.models.certificate import Certificate
from app.models.course import Course, Lesson
from app.models.progress import COMPLETED, ENROLLED, Enrollment
from app.repos.registry import Repos
from app.services.catalog_service import get_course
from app.services.errors import NotEnrolledError


@dataclass(frozen=True, slots=True)
class DashboardStats:
    total: int
    completed: int
    in_progress: int


@dataclass(frozen=True, slots=True)
class Dashboard:
    enrollments: list[tuple[Enrollment, str]]  # (enrollment, course title)
    certificates: list[tuple[Certificate, str]]
    stats: DashboardStats


@dataclass(frozen=True, slots=True)
class LearnView:
    course: Course
    enrollment: Enrollment
    lessons: list[tuple[Lesson, bool]]  # (lesson, completed by this user)


async def _course_title(repos: Repos, course_id: int, cache: dict[int, str]) -> str:
    if course_id not in cache:
        course = await repos.courses.get(course_id)
        cache[course_id] = course.title if course is not None else ""
    return cache[course_id]


async def dashboard(repos: Repos, user_id: int) -> Dashboard:
    titles: dict[int, str] = {}
    enrollments = await repos.enrollments.list_for_user(user_id)
    certificates = await repos.certificates.list_for_user(user_id)

    return Dashboard(
        enrollments=[
            (e, await _course_title(repos, e.course_id, titles)) for e in enrollments
        ],
        certificates=[
            (c, await _course_title(repos, c.course_id, titles)) for c in certificates
        ],
        stats=DashboardStats(
            total=len(enrollments),
            completed=sum(1 for e in enrollments if e.status == COMPLETED),
            in_progress=sum(1 for e in enrollments if e.status == ENROLLED),
        ),
    )


async def learn_view(repos: Repos, user_id: int, course_id: int) -> LearnView:
    course = await get_course(repos, course_id)
    enrollment = await repos.enrollments.get(user_id, course_id)
    if enrollment is None:
        raise NotEnrolledError()

    lessons = await repos.courses.list_lessons(course_id)
    done = {
        p.lesson_id
        for p in await repos.progress.list_for_lessons(
            user_id, [lesson.id for lesson in lessons]
        )
        if p.completed
    }
    return LearnView(
        course=course,
        enrollment=enrollment,
        lessons=[(lesson, lesson.id in done) for lesson in lessons],
    )
