"""Lesson progress and course completion.

One submission runs three steps in order, all inside the caller's request:

  1. set_lesson_progress         upsert the (user, lesson) Progress row
  2. recompute_course_completion  percentage -> enrollment status/progress
  3. issue_certificate_if_needed  only when step 2 reports the transition

Retrying a submission is safe: every step converges to the same state.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from app.core.metrics import COURSE_COMPLETIONS, LESSON_PROGRESS_UPDATES
from app.models.progress import ENROLLED, CourseCompletion, Progress
from app.repos.registry import Repos
from app.services import certificate_service
from app.services.errors import LessonNotFoundError

logger = logging.getLogger(__name__)


def completion_percentage(completed: int, total: int) -> int:
    """completed/total as a whole percentage, rounding halves up.

    A course without lessons is 0%, so it can never complete.
    """
    if total <= 0:
        return 0
    # floor(x + 0.5) in integer arithmetic; round() would round 12.5 to 12
    return (completed * 200 + total) // (total * 2)


async def set_lesson_progress(
    repos: Repos,
    user_id: int,
    lesson_id: int,
    completed: bool,
    *,
    now: datetime | None = None,
) -> tuple[Progress, int]:
    """Record the lesson flag for this user.  Returns (progress, course_id)."""
    lesson = await repos.courses.get_lesson(lesson_id)
    if lesson is None:
        logger.warning("Progress rejected: lesson=%d not found", lesson_id)
        raise LessonNotFoundError()

    now = now or datetime.now(UTC)
    existing = await repos.progress.get(user_id, lesson_id)

    if existing is None:
        progress = await repos.progress.add(
            Progress.new(
                user_id=user_id,
                lesson_id=lesson_id,
                completed=completed,
                completed_at=now if completed else None,
            )
        )
    else:
        if completed and existing.completed:
            completed_at = existing.completed_at
        else:
            completed_at = now if completed else None
        progress = await repos.progress.update(
            existing.id, completed=completed, completed_at=completed_at
        )

    LESSON_PROGRESS_UPDATES.labels(completed=str(completed).lower()).inc()
    logger.debug(
        "Lesson progress set  user=%d lesson=%d completed=%s",
        user_id,
        lesson_id,
        completed,
    )
    return progress, lesson.course_id


async def recompute_course_completion(
    repos: Repos,
    user_id: int,
    course_id: int,
    *,
    now: datetime | None = None,
) -> CourseCompletion:
    """Recompute the user's course percentage and update their enrollment.

    At 100% the enrollment is moved to COMPLETED with a conditional update;
    ``newly_completed`` is True only for the call that made that move.
    Below 100% the enrollment goes back to ENROLLED with completed_at
    cleared.  A user without an enrollment gets no update and no error.
    """
    now = now or datetime.now(UTC)
    lesson_ids = await repos.courses.lesson_ids(course_id)
    total = len(lesson_ids)
    done = await repos.progress.count_completed(user_id, lesson_ids) if total else 0
    percentage = completion_percentage(done, total)

    newly_completed = False
    if percentage == 100:
        newly_completed = await repos.enrollments.mark_completed(
            user_id, course_id, now
        )
    else:
        await repos.enrollments.set_progress(
            user_id,
            course_id,
            progress=percentage,
            status=ENROLLED,
            completed_at=None,
        )

    enrollment = await repos.enrollments.get(user_id, course_id)
    if enrollment is None:
        logger.info(
            "No enrollment to update  user=%d course=%d percentage=%d",
            user_id,
            course_id,
            percentage,
        )
    if newly_completed:
        COURSE_COMPLETIONS.inc()
        logger.info("Course completed  user=%d course=%d", user_id, course_id)

    return CourseCompletion(
        course_id=course_id,
        total_lessons=total,
        completed_lessons=done,
        percentage=percentage,
        enrollment=enrollment,
        newly_completed=newly_completed,
    )


async def submit_lesson_progress(
    repos: Repos, user_id: int, lesson_id: int, completed: bool
) -> Progress:
    """Record a lesson flag, then aggregate and certify as needed."""
    now = datetime.now(UTC)
    progress, course_id = await set_lesson_progress(
        repos, user_id, lesson_id, completed, now=now
    )
    completion = await recompute_course_completion(repos, user_id, course_id, now=now)
    await certificate_service.issue_certificate_if_needed(
        repos, user_id, course_id, completion.newly_completed, now=now
    )
    logger.info(
        "Progress submitted  user=%d lesson=%d completed=%s course=%d percentage=%d",
        user_id,
        lesson_id,
        completed,
        course_id,
        completion.percentage,
    )
    return progress
