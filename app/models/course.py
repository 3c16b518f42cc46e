from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

LEVELS = ("BEGINNER", "INTERMEDIATE", "ADVANCED")
FORMATS = ("ONLINE", "OFFLINE", "HYBRID")


@dataclass(frozen=True, slots=True)
class Category:
    id: int
    name: str
    slug: str
    description: str | None = None

    @staticmethod
    def new(*, name: str, slug: str, description: str | None = None) -> Category:
        return Category(id=0, name=name, slug=slug, description=description)


@dataclass(frozen=True, slots=True)
class Institution:
    id: int
    name: str
    description: str | None = None
    website: str | None = None
    rating: Decimal = Decimal("0.00")

    @staticmethod
    def new(*, name: str, website: str | None = None) -> Institution:
        return Institution(id=0, name=name, website=website)


@dataclass(frozen=True, slots=True)
class Instructor:
    id: int
    name: str
    email: str | None = None
    bio: str | None = None
    institution_id: int | None = None

    @staticmethod
    def new(
        *, name: str, email: str | None = None, institution_id: int | None = None
    ) -> Instructor:
        return Instructor(id=0, name=name, email=email, institution_id=institution_id)


@dataclass(frozen=True, slots=True)
class Course:
    id: int
    title: str
    description: str | None = None
    image: str | None = None
    duration: int | None = None  # hours
    level: str | None = None  # BEGINNER|INTERMEDIATE|ADVANCED
    format: str | None = None  # ONLINE|OFFLINE|HYBRID
    price: Decimal | None = None
    category_id: int | None = None
    institution_id: int | None = None
    instructor_id: int | None = None
    rating: Decimal = Decimal("0.00")
    created_at: datetime | None = None

    @staticmethod
    def new(
        *,
        title: str,
        description: str | None = None,
        level: str | None = None,
        format: str | None = None,
        price: Decimal | None = None,
        category_id: int | None = None,
        institution_id: int | None = None,
        instructor_id: int | None = None,
        created_at: datetime | None = None,
    ) -> Course:
        return Course(
            id=0,
            title=title,
            description=description,
            level=level,
            format=format,
            price=price,
            category_id=category_id,
            institution_id=institution_id,
            instructor_id=instructor_id,
            created_at=created_at or datetime.now(UTC),
        )


@dataclass(frozen=True, slots=True)
class Lesson:
    """A lesson belongs to one course; (course_id, order) is unique."""

    id: int
    course_id: int
    title: str
    order: int
    content: str | None = None
    video_url: str | None = None

    @staticmethod
    def new(
        *,
        course_id: int,
        title: str,
        order: int,
        content: str | None = None,
        video_url: str | None = None,
    ) -> Lesson:
        return Lesson(
            id=0,
            course_id=course_id,
            title=title,
            order=order,
            content=content,
            video_url=video_url,
        )


@dataclass(frozen=True, slots=True)
class CourseQuery:
    """Catalog filters.  Unknown level/format values are ignored upstream."""

    category_slug: str | None = None
    level: str | None = None
    format: str | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class CourseSummary:
    """A course with the display names of its references, for list views."""

    course: Course
    category_name: str | None = None
    institution_name: str | None = None
    instructor_name: str | None = None
    enrollments_count: int = 0
