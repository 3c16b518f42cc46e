from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Protocol

from app.models.certificate import Certificate


class CertificateRepo(Protocol):
    async def add(self, certificate: Certificate) -> Certificate:
        """Insert a certificate.  Raises on a duplicate number or (user, course)."""
        ...

    async def get_for(self, user_id: int, course_id: int) -> Certificate | None: ...
    async def list_for_user(self, user_id: int) -> list[Certificate]: ...
    async def count(self) -> int: ...


class InMemoryCertificateRepo:
    def __init__(self) -> None:
        self._by_id: dict[int, Certificate] = {}
        self._ids = itertools.count(1)

    async def add(self, certificate: Certificate) -> Certificate:
        for existing in self._by_id.values():
            if existing.certificate_number == certificate.certificate_number:
                raise ValueError("certificate number already exists")
            if (existing.user_id, existing.course_id) == (
                certificate.user_id,
                certificate.course_id,
            ):
                raise ValueError("certificate already issued for this course")
        stored = replace(certificate, id=next(self._ids))
        self._by_id[stored.id] = stored
        return stored

    async def get_for(self, user_id: int, course_id: int) -> Certificate | None:
        for c in self._by_id.values():
            if c.user_id == user_id and c.course_id == course_id:
                return c
        return None

    async def list_for_user(self, user_id: int) -> list[Certificate]:
        return sorted(
            (c for c in self._by_id.values() if c.user_id == user_id),
            key=lambda c: (c.issued_at, c.id),
            reverse=True,
        )

    async def count(self) -> int:
        return len(self._by_id)
