"""PostgreSQL implementation of CertificateRepo."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import CertificateRow
from app.models.certificate import Certificate


class PgCertificateRepo:
    """Satisfies the CertificateRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, certificate: Certificate) -> Certificate:
        row = CertificateRow(
            user_id=certificate.user_id,
            course_id=certificate.course_id,
            certificate_number=certificate.certificate_number,
            issued_at=certificate.issued_at,
        )
        # SAVEPOINT: a failed insert rolls back only itself, never the
        # enrollment update made earlier in the same request.
        async with self._session.begin_nested():
            self._session.add(row)
        return _row_to_certificate(row)

    async def get_for(self, user_id: int, course_id: int) -> Certificate | None:
        stmt = select(CertificateRow).where(
            CertificateRow.user_id == user_id, CertificateRow.course_id == course_id
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_certificate(row) if row is not None else None

    async def list_for_user(self, user_id: int) -> list[Certificate]:
        stmt = (
            select(CertificateRow)
            .where(CertificateRow.user_id == user_id)
            .order_by(CertificateRow.issued_at.desc(), CertificateRow.id.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_certificate(r) for r in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(CertificateRow)
        return (await self._session.execute(stmt)).scalar_one()


def _row_to_certificate(row: CertificateRow) -> Certificate:
    return Certificate(
        id=row.id,
        user_id=row.user_id,
        course_id=row.course_id,
        certificate_number=row.certificate_number,
        issued_at=row.issued_at,
    )
