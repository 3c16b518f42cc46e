"""PostgreSQL implementation of EnrollmentRepo."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import EnrollmentRow
from app.models.progress import COMPLETED, Enrollment


class PgEnrollmentRepo:
    """Satisfies the EnrollmentRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int, course_id: int) -> Enrollment | None:
        stmt = select(EnrollmentRow).where(
            EnrollmentRow.user_id == user_id, EnrollmentRow.course_id == course_id
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_enrollment(row) if row is not None else None

    async def add(self, enrollment: Enrollment) -> Enrollment:
        row = EnrollmentRow(
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            status=enrollment.status,
            progress=enrollment.progress,
            enrolled_at=enrollment.enrolled_at,
            completed_at=enrollment.completed_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError:
            raise ValueError("enrollment already exists") from None
        return _row_to_enrollment(row)

    async def list_for_user(self, user_id: int) -> list[Enrollment]:
        stmt = (
            select(EnrollmentRow)
            .where(EnrollmentRow.user_id == user_id)
            .order_by(EnrollmentRow.enrolled_at.desc(), EnrollmentRow.id.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_enrollment(r) for r in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(EnrollmentRow)
        return (await self._session.execute(stmt)).scalar_one()

    async def count_by_course(self, course_ids: list[int]) -> dict[int, int]:
        counts = dict.fromkeys(course_ids, 0)
        if not course_ids:
            return counts
        stmt = (
            select(EnrollmentRow.course_id, func.count())
            .where(EnrollmentRow.course_id.in_(course_ids))
            .group_by(EnrollmentRow.course_id)
        )
        for course_id, n in (await self._session.execute(stmt)).all():
            counts[course_id] = n
        return counts

    async def mark_completed(
        self, user_id: int, course_id: int, completed_at: datetime
    ) -> bool:
        # The status predicate makes the transition happen in exactly one
        # request even when two completions race.
        stmt = (
            update(EnrollmentRow)
            .where(
                EnrollmentRow.user_id == user_id,
                EnrollmentRow.course_id == course_id,
                EnrollmentRow.status != COMPLETED,
            )
            .values(progress=100, status=COMPLETED, completed_at=completed_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def set_progress(
        self,
        user_id: int,
        course_id: int,
        *,
        progress: int,
        status: str,
        completed_at: datetime | None,
    ) -> bool:
        stmt = (
            update(EnrollmentRow)
            .where(
                EnrollmentRow.user_id == user_id,
                EnrollmentRow.course_id == course_id,
            )
            .values(progress=progress, status=status, completed_at=completed_at)
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0


def _row_to_enrollment(row: EnrollmentRow) -> Enrollment:
    return Enrollment(
        id=row.id,
        user_id=row.user_id,
        course_id=row.course_id,
        status=row.status,
        progress=row.progress,
        enrolled_at=row.enrolled_at,
        completed_at=row.completed_at,
    )
