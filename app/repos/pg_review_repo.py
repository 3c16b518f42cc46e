"""PostgreSQL implementation of ReviewRepo."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import ReviewRow
from app.models.review import Review


class PgReviewRepo:
    """Satisfies the ReviewRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int, course_id: int) -> Review | None:
        stmt = select(ReviewRow).where(
            ReviewRow.user_id == user_id, ReviewRow.course_id == course_id
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_review(row) if row is not None else None

    async def add(self, review: Review) -> Review:
        row = ReviewRow(
            user_id=review.user_id,
            course_id=review.course_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError:
            raise ValueError("review already exists") from None
        return _row_to_review(row)

    async def update(
        self,
        review_id: int,
        *,
        rating: int,
        comment: str | None,
        updated_at: datetime,
    ) -> Review:
        stmt = (
            update(ReviewRow)
            .where(ReviewRow.id == review_id)
            .values(rating=rating, comment=comment, updated_at=updated_at)
            .returning(ReviewRow)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            raise KeyError("review not found")
        return _row_to_review(row)

    async def list_for_course(
        self, course_id: int, *, limit: int | None = None
    ) -> list[Review]:
        stmt = (
            select(ReviewRow)
            .where(ReviewRow.course_id == course_id)
            .order_by(ReviewRow.created_at.desc(), ReviewRow.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_review(r) for r in rows]


def _row_to_review(row: ReviewRow) -> Review:
    return Review(
        id=row.id,
        user_id=row.user_id,
        course_id=row.course_id,
        rating=row.rating,
        comment=row.comment,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
