from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.dialects import postgresql

from app.models.course import Category, Course, Institution, Instructor
from app.models.review import Review
from app.repos.pg_course_repo import search_condition
from app.repos.registry import Repos
from app.services import catalog_service, enrollment_service, review_service
from app.services.errors import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    ReviewValidationError,
)
from tests.conftest import seed_course, seed_enrollment, seed_user


def _add_courses(repos: Repos, n: int, **fields) -> list[Course]:
    start = datetime(2026, 1, 1, tzinfo=UTC)

    async def _seed() -> list[Course]:
        return [
            await repos.courses.add(
                Course.new(
                    title=f"Course {i}",
                    created_at=start + timedelta(days=i),
                    **fields,
                )
            )
            for i in range(n)
        ]

    return asyncio.run(_seed())


# ---- build_query ----


def test_build_query_drops_unknown_enums_and_blank_search() -> None:
    q = catalog_service.build_query(level="expert", format="ONLINE", search="   ")
    assert q.level is None
    assert q.format == "ONLINE"
    assert q.search is None


def test_build_query_uppercases_enum_values() -> None:
    q = catalog_service.build_query(level="beginner", format="hybrid")
    assert (q.level, q.format) == ("BEGINNER", "HYBRID")


# ---- list_courses ----


def test_list_courses_paginates_newest_first(repos: Repos) -> None:
    _add_courses(repos, 13)

    page1 = asyncio.run(catalog_service.list_courses(repos))
    assert page1.total == 13
    assert page1.total_pages == 2
    assert len(page1.items) == catalog_service.PAGE_SIZE
    assert page1.items[0].course.title == "Course 12"

    page2 = asyncio.run(catalog_service.list_courses(repos, page=2))
    assert [s.course.title for s in page2.items] == ["Course 0"]


def test_list_courses_empty_catalog(repos: Repos) -> None:
    page = asyncio.run(catalog_service.list_courses(repos))
    assert (page.total, page.total_pages, page.items) == (0, 0, [])


def test_list_courses_filters(repos: Repos) -> None:
    category = asyncio.run(
        repos.courses.add_category(Category.new(name="Data", slug="data"))
    )
    seed_course(repos, "Pandas in depth", category_id=category.id, level="ADVANCED")
    seed_course(repos, "Intro to SQL", description="Querying DATA", level="BEGINNER")
    seed_course(repos, "Watercolour", format="OFFLINE")

    by_category = asyncio.run(catalog_service.list_courses(repos, category="data"))
    assert [s.course.title for s in by_category.items] == ["Pandas in depth"]
    assert by_category.items[0].category_name == "Data"

    by_level = asyncio.run(catalog_service.list_courses(repos, level="BEGINNER"))
    assert [s.course.title for s in by_level.items] == ["Intro to SQL"]

    by_search = asyncio.run(catalog_service.list_courses(repos, search="data"))
    assert [s.course.title for s in by_search.items] == ["Intro to SQL"]

    ignored = asyncio.run(catalog_service.list_courses(repos, format="ONSITE"))
    assert ignored.total == 3


def test_list_courses_carries_reference_names_and_enrollments(repos: Repos) -> None:
    institution = asyncio.run(
        repos.courses.add_institution(Institution.new(name="Open Univ"))
    )
    instructor = asyncio.run(repos.courses.add_instructor(Instructor.new(name="Ada")))
    course, _ = seed_course(
        repos, institution_id=institution.id, instructor_id=instructor.id
    )
    seed_course(repos, "Unattached")
    for n in range(3):
        learner = seed_user(repos, f"learner{n}@example.com")
        seed_enrollment(repos, learner.id, course.id)

    page = asyncio.run(catalog_service.list_courses(repos))
    by_title = {s.course.title: s for s in page.items}
    assert by_title["Python Basics"].institution_name == "Open Univ"
    assert by_title["Python Basics"].instructor_name == "Ada"
    assert by_title["Python Basics"].enrollments_count == 3
    assert by_title["Unattached"].institution_name is None
    assert by_title["Unattached"].enrollments_count == 0


def test_search_treats_like_wildcards_literally(repos: Repos) -> None:
    seed_course(repos, "50% off pricing")
    seed_course(repos, "Fifty percent")
    seed_course(repos, "snake_case naming")
    seed_course(repos, "snakeXcase")

    percent = asyncio.run(catalog_service.list_courses(repos, search="50%"))
    assert [s.course.title for s in percent.items] == ["50% off pricing"]

    underscore = asyncio.run(catalog_service.list_courses(repos, search="e_c"))
    assert [s.course.title for s in underscore.items] == ["snake_case naming"]


def test_search_condition_escapes_like_wildcards_in_sql() -> None:
    compiled = search_condition("50%_off").compile(dialect=postgresql.dialect())
    assert "ESCAPE '/'" in str(compiled)
    assert "50/%/_off" in compiled.params.values()


# ---- detail ----


def test_course_detail_orders_lessons(repos: Repos) -> None:
    course, _ = seed_course(repos, lessons=3)
    detail = asyncio.run(catalog_service.get_course_detail(repos, course.id))
    assert [lesson.order for lesson in detail.lessons] == [1, 2, 3]
    assert detail.category is None
    assert detail.reviews == []


def test_course_detail_reviews_show_author_and_newest_ten(repos: Repos) -> None:
    course, _ = seed_course(repos)
    start = datetime(2026, 3, 1, tzinfo=UTC)
    for n in range(12):
        author = seed_user(repos, f"r{n}@example.com", name=f"Reviewer {n}")
        asyncio.run(
            repos.reviews.add(
                Review.new(
                    user_id=author.id,
                    course_id=course.id,
                    rating=4,
                    comment=None,
                    created_at=start + timedelta(hours=n),
                )
            )
        )

    detail = asyncio.run(catalog_service.get_course_detail(repos, course.id))
    assert len(detail.reviews) == catalog_service.REVIEWS_SHOWN
    assert detail.reviews[0].user_name == "Reviewer 11"
    assert detail.reviews[0].user_email == "r11@example.com"
    assert detail.reviews[-1].user_name == "Reviewer 2"


def test_course_detail_missing(repos: Repos) -> None:
    with pytest.raises(CourseNotFoundError):
        asyncio.run(catalog_service.get_course_detail(repos, 42))


# ---- enroll ----


def test_enroll_creates_enrollment_once(repos: Repos) -> None:
    user = seed_user(repos)
    course, _ = seed_course(repos)

    enrollment = asyncio.run(enrollment_service.enroll(repos, user.id, course.id))
    assert enrollment.status == "ENROLLED"
    assert enrollment.progress == 0

    with pytest.raises(AlreadyEnrolledError, match="Already enrolled"):
        asyncio.run(enrollment_service.enroll(repos, user.id, course.id))


def test_enroll_unknown_course(repos: Repos) -> None:
    user = seed_user(repos)
    with pytest.raises(CourseNotFoundError):
        asyncio.run(enrollment_service.enroll(repos, user.id, 99))


# ---- reviews ----


def test_submit_review_creates_then_updates(repos: Repos) -> None:
    user = seed_user(repos)
    course, _ = seed_course(repos)

    review, created = asyncio.run(
        review_service.submit_review(repos, user.id, course.id, 4, "Solid")
    )
    assert created is True
    assert review.comment == "Solid"

    updated, created = asyncio.run(
        review_service.submit_review(repos, user.id, course.id, 5, "")
    )
    assert created is False
    assert updated.id == review.id
    assert updated.rating == 5
    assert updated.comment is None
    assert updated.updated_at >= review.updated_at


@pytest.mark.parametrize("rating", [0, 6, -1])
def test_submit_review_rejects_out_of_range_rating(repos: Repos, rating: int) -> None:
    user = seed_user(repos)
    course, _ = seed_course(repos)
    with pytest.raises(ReviewValidationError):
        asyncio.run(review_service.submit_review(repos, user.id, course.id, rating))


def test_submit_review_unknown_course(repos: Repos) -> None:
    user = seed_user(repos)
    with pytest.raises(CourseNotFoundError):
        asyncio.run(review_service.submit_review(repos, user.id, 77, 3))
