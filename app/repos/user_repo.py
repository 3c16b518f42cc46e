from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import UTC, datetime
from typing import Protocol

from app.models.user import User


class UserRepo(Protocol):
    async def get_by_id(self, user_id: int) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def get_many(self, user_ids: list[int]) -> dict[int, User]: ...
    async def add(self, user: User) -> User: ...
    async def update_name(self, user_id: int, name: str | None) -> User | None: ...
    async def update_password_hash(self, user_id: int, password_hash: str) -> None: ...
    async def count(self) -> int: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_email: dict[str, User] = {}
        self._by_id: dict[int, User] = {}
        self._ids = itertools.count(1)

    async def get_by_id(self, user_id: int) -> User | None:
        return self._by_id.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return self._by_email.get(email.strip().lower())

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        return {uid: self._by_id[uid] for uid in user_ids if uid in self._by_id}

    async def add(self, user: User) -> User:
        if user.email in self._by_email:
            raise ValueError("email already exists")
        stored = replace(user, id=next(self._ids))
        self._by_email[stored.email] = stored
        self._by_id[stored.id] = stored
        return stored

    async def update_name(self, user_id: int, name: str | None) -> User | None:
        u = self._by_id.get(user_id)
        if u is None:
            return None
        return self._store(replace(u, name=name, updated_at=datetime.now(UTC)))

    async def update_password_hash(self, user_id: int, password_hash: str) -> None:
        u = self._by_id.get(user_id)
        if u is None:
            raise KeyError("user not found")
        self._store(
            replace(u, password_hash=password_hash, updated_at=datetime.now(UTC))
        )

    async def count(self) -> int:
        return len(self._by_id)

    def _store(self, user: User) -> User:
        self._by_id[user.id] = user
        self._by_email[user.email] = user
        return user
