from __future__ import annotations

import logging
from datetime import UTC, datetime

from app.core.metrics import ENROLLMENTS_CREATED
from app.models.progress import Enrollment
from app.repos.registry import Repos
from app.services.errors import AlreadyEnrolledError, CourseNotFoundError

logger = logging.getLogger(__name__)


async def enroll(repos: Repos, user_id: int, course_id: int) -> Enrollment:
    if await repos.courses.get(course_id) is None:
        raise CourseNotFoundError()

    if await repos.enrollments.get(user_id, course_id) is not None:
        logger.info("Enroll rejected: user=%d already in course=%d", user_id, course_id)
        raise AlreadyEnrolledError()

    try:
        enrollment = await repos.enrollments.add(
            Enrollment.new(
                user_id=user_id, course_id=course_id, enrolled_at=datetime.now(UTC)
            )
        )
    except ValueError:
        raise AlreadyEnrolledError() from None

    ENROLLMENTS_CREATED.inc()
    logger.info("Enrolled  user=%d course=%d", user_id, course_id)
    return enrollment
