"""PostgreSQL implementation of UserRepo."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.tables import UserRow
from app.models.user import User


class PgUserRepo:
    """Satisfies the UserRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        stmt = select(UserRow).where(UserRow.id == user_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_user(row)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserRow).where(UserRow.email == email.strip().lower())
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return _row_to_user(row)

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        stmt = select(UserRow).where(UserRow.id.in_(user_ids))
        rows = (await self._session.execute(stmt)).scalars().all()
        return {row.id: _row_to_user(row) for row in rows}

    async def add(self, user: User) -> User:
        row = UserRow(
            email=user.email,
            password=user.password_hash,
            name=user.name,
            role=user.role,
            avatar=user.avatar,
            created_at=user.created_at or datetime.now(UTC),
            updated_at=user.updated_at or datetime.now(UTC),
        )
        self._session.add(row)
        await self._session.flush()
        return _row_to_user(row)

    async def update_name(self, user_id: int, name: str | None) -> User | None:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(name=name, updated_at=datetime.now(UTC))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.get_by_id(user_id)

    async def update_password_hash(self, user_id: int, password_hash: str) -> None:
        stmt = (
            update(UserRow)
            .where(UserRow.id == user_id)
            .values(password=password_hash, updated_at=datetime.now(UTC))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise KeyError("user not found")

    async def count(self) -> int:
        stmt = select(func.count()).select_from(UserRow)
        return (await self._session.execute(stmt)).scalar_one()


def _row_to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password,
        name=row.name,
        role=row.role or "STUDENT",
        avatar=row.avatar,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
