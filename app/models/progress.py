from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ENROLLED = "ENROLLED"
COMPLETED = "COMPLETED"
DROPPED = "DROPPED"
ENROLLMENT_STATUSES = (ENROLLED, COMPLETED, DROPPED)


@dataclass(frozen=True, slots=True)
class Enrollment:
    """A user's membership in a course.  (user_id, course_id) is unique.

    ``progress`` is the percentage of the course's lessons the user has
    completed (0-100).  Only the completion aggregator moves it.
    """

    id: int
    user_id: int
    course_id: int
    status: str = ENROLLED  # ENROLLED|COMPLETED|DROPPED
    progress: int = 0
    enrolled_at: datetime | None = None
    completed_at: datetime | None = None

    @staticmethod
    def new(*, user_id: int, course_id: int, enrolled_at: datetime) -> Enrollment:
        return Enrollment(
            id=0,
            user_id=user_id,
            course_id=course_id,
            status=ENROLLED,
            progress=0,
            enrolled_at=enrolled_at,
        )


@dataclass(frozen=True, slots=True)
class Progress:
    """Per-lesson completion flag.  (user_id, lesson_id) is unique."""

    id: int
    user_id: int
    lesson_id: int
    completed: bool = False
    completed_at: datetime | None = None

    @staticmethod
    def new(
        *, user_id: int, lesson_id: int, completed: bool, completed_at: datetime | None
    ) -> Progress:
        return Progress(
            id=0,
            user_id=user_id,
            lesson_id=lesson_id,
            completed=completed,
            completed_at=completed_at,
        )


@dataclass(frozen=True, slots=True)
class CourseCompletion:
    """Result of recomputing a user's completion for one course."""

    course_id: int
    total_lessons: int
    completed_lessons: int
    percentage: int
    enrollment: Enrollment | None = None
    newly_completed: bool = False
