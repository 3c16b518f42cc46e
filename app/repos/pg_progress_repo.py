"""PostgreSQL implementation of ProgressRepo."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import ProgressRow
from app.models.progress import Progress


class PgProgressRepo:
    """Satisfies the ProgressRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int, lesson_id: int) -> Progress | None:
        stmt = select(ProgressRow).where(
            ProgressRow.user_id == user_id, ProgressRow.lesson_id == lesson_id
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_progress(row) if row is not None else None

    async def add(self, progress: Progress) -> Progress:
        row = ProgressRow(
            user_id=progress.user_id,
            lesson_id=progress.lesson_id,
            completed=progress.completed,
            completed_at=progress.completed_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError:
            raise ValueError("progress already recorded for this lesson") from None
        return _row_to_progress(row)

    async def update(
        self, progress_id: int, *, completed: bool, completed_at: datetime | None
    ) -> Progress:
        stmt = (
            update(ProgressRow)
            .where(ProgressRow.id == progress_id)
            .values(completed=completed, completed_at=completed_at)
            .returning(ProgressRow)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            raise KeyError("progress not found")
        return _row_to_progress(row)

    async def count_completed(self, user_id: int, lesson_ids: Collection[int]) -> int:
        if not lesson_ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(ProgressRow)
            .where(
                ProgressRow.user_id == user_id,
                ProgressRow.completed.is_(True),
                ProgressRow.lesson_id.in_(list(lesson_ids)),
            )
        )
        return (await self._session.execute(stmt)).scalar_one()

    async def list_for_lessons(
        self, user_id: int, lesson_ids: Collection[int]
    ) -> list[Progress]:
        if not lesson_ids:
            return []
        stmt = select(ProgressRow).where(
            ProgressRow.user_id == user_id,
            ProgressRow.lesson_id.in_(list(lesson_ids)),
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_progress(r) for r in rows]


def _row_to_progress(row: ProgressRow) -> Progress:
    return Progress(
        id=row.id,
        user_id=row.user_id,
        lesson_id=row.lesson_id,
        completed=row.completed,
        completed_at=row.completed_at,
    )
