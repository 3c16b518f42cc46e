from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

ROLE_STUDENT = "STUDENT"
ROLE_ADMIN = "ADMIN"


@dataclass(frozen=True, slots=True)
class User:
    id: int  # 0 until persisted; repos assign the real id
    email: str
    password_hash: str | None
    name: str | None = None
    role: str = ROLE_STUDENT  # STUDENT|ADMIN
    avatar: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def new(
        *,
        email: str,
        password_hash: str | None,
        name: str | None = None,
        role: str = ROLE_STUDENT,
    ) -> User:
        now = datetime.now(UTC)
        return User(
            id=0,
            email=email.strip().lower(),
            password_hash=password_hash,
            name=name,
            role=role,
            created_at=now,
            updated_at=now,
        )
