from __future__ import annotations

import logging
from datetime import UTC, datetime

from app.models.review import Review
from app.repos.registry import Repos
from app.services.errors import CourseNotFoundError, ReviewValidationError

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


async def submit_review(
    repos: Repos,
    user_id: int,
    course_id: int,
    rating: int,
    comment: str | None = None,
) -> tuple[Review, bool]:
    """Create or update the user's review of a course.

    Returns (review, created).  A blank comment is stored as null.
    """
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ReviewValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )
    if await repos.courses.get(course_id) is None:
        raise CourseNotFoundError()

    comment = comment.strip() if comment else None
    comment = comment or None
    now = datetime.now(UTC)

    existing = await repos.reviews.get(user_id, course_id)
    if existing is not None:
        review = await repos.reviews.update(
            existing.id, rating=rating, comment=comment, updated_at=now
        )
        logger.info(
            "Review updated  user=%d course=%d rating=%d", user_id, course_id, rating
        )
        return review, False

    review = await repos.reviews.add(
        Review.new(
            user_id=user_id,
            course_id=course_id,
            rating=rating,
            comment=comment,
            created_at=now,
        )
    )
    logger.info(
        "Review created  user=%d course=%d rating=%d", user_id, course_id, rating
    )
    return review, True
