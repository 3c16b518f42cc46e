from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Review:
    """A 1-5 star rating of a course.  One per (user, course)."""

    id: int
    user_id: int
    course_id: int
    rating: int
    comment: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def new(
        *,
        user_id: int,
        course_id: int,
        rating: int,
        comment: str | None,
        created_at: datetime,
    ) -> Review:
        return Review(
            id=0,
            user_id=user_id,
            course_id=course_id,
            rating=rating,
            comment=comment,
            created_at=created_at,
            updated_at=created_at,
        )
