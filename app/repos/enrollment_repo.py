from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from app.models.progress import COMPLETED, Enrollment


class EnrollmentRepo(Protocol):
    async def get(self, user_id: int, course_id: int) -> Enrollment | None: ...
    async def add(self, enrollment: Enrollment) -> Enrollment: ...
    async def list_for_user(self, user_id: int) -> list[Enrollment]: ...
    async def count(self) -> int: ...
    async def count_by_course(self, course_ids: list[int]) -> dict[int, int]: ...

    async def mark_completed(
        self, user_id: int, course_id: int, completed_at: datetime
    ) -> bool:
        """Move a not-yet-COMPLETED enrollment to COMPLETED at 100%.

        Returns True only for the call that performed the transition.
        """
        ...

    async def set_progress(
        self,
        user_id: int,
        course_id: int,
        *,
        progress: int,
        status: str,
        completed_at: datetime | None,
    ) -> bool:
        """Unconditional update.  Returns False when no enrollment exists."""
        ...


class InMemoryEnrollmentRepo:
    def __init__(self) -> None:
        self._store: dict[tuple[int, int], Enrollment] = {}
        self._ids = itertools.count(1)

    async def get(self, user_id: int, course_id: int) -> Enrollment | None:
        return self._store.get((user_id, course_id))

    async def add(self, enrollment: Enrollment) -> Enrollment:
        key = (enrollment.user_id, enrollment.course_id)
        if key in self._store:
            raise ValueError("enrollment already exists")
        stored = replace(enrollment, id=next(self._ids))
        self._store[key] = stored
        return stored

    async def list_for_user(self, user_id: int) -> list[Enrollment]:
        return sorted(
            (e for e in self._store.values() if e.user_id == user_id),
            key=lambda e: (e.enrolled_at, e.id),
            reverse=True,
        )

    async def count(self) -> int:
        return len(self._store)

    async def count_by_course(self, course_ids: list[int]) -> dict[int, int]:
        wanted = set(course_ids)
        counts = dict.fromkeys(course_ids, 0)
        for e in self._store.values():
            if e.course_id in wanted:
                counts[e.course_id] += 1
        return counts

    async def mark_completed(
        self, user_id: int, course_id: int, completed_at: datetime
    ) -> bool:
        current = self._store.get((user_id, course_id))
        if current is None or current.status == COMPLETED:
            return False
        self._store[(user_id, course_id)] = replace(
            current, progress=100, status=COMPLETED, completed_at=completed_at
        )
        return True

    async def set_progress(
        self,
        user_id: int,
        course_id: int,
        *,
        progress: int,
        status: str,
        completed_at: datetime | None,
    ) -> bool:
        current = self._store.get((user_id, course_id))
        if current is None:
            return False
        self._store[(user_id, course_id)] = replace(
            current, progress=progress, status=status, completed_at=completed_at
        )
        return True
