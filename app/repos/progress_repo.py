from __future__ import annotations

import itertools
from collections.abc import Collection
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from app.models.progress import Progress


class ProgressRepo(Protocol):
    async def get(self, user_id: int, lesson_id: int) -> Progress | None: ...
    async def add(self, progress: Progress) -> Progress: ...
    async def update(
        self, progress_id: int, *, completed: bool, completed_at: datetime | None
    ) -> Progress: ...
    async def count_completed(self, user_id: int, lesson_ids: Collection[int]) -> int: ...
    async def list_for_lessons(
        self, user_id: int, lesson_ids: Collection[int]
    ) -> list[Progress]: ...


class InMemoryProgressRepo:
    def __init__(self) -> None:
        self._store: dict[tuple[int, int], Progress] = {}
        self._ids = itertools.count(1)

    async def get(self, user_id: int, lesson_id: int) -> Progress | None:
        return self._store.get((user_id, lesson_id))

    async def add(self, progress: Progress) -> Progress:
        key = (progress.user_id, progress.lesson_id)
        if key in self._store:
            raise ValueError("progress already recorded for this lesson")
        stored = replace(progress, id=next(self._ids))
        self._store[key] = stored
        return stored

    async def update(
        self, progress_id: int, *, completed: bool, completed_at: datetime | None
    ) -> Progress:
        for key, existing in self._store.items():
            if existing.id == progress_id:
                updated = replace(
                    existing, completed=completed, completed_at=completed_at
                )
                self._store[key] = updated
                return updated
        raise KeyError("progress not found")

    async def count_completed(self, user_id: int, lesson_ids: Collection[int]) -> int:
        wanted = set(lesson_ids)
        return sum(
            1
            for (uid, lid), p in self._store.items()
            if uid == user_id and lid in wanted and p.completed
        )

    async def list_for_lessons(
        self, user_id: int, lesson_ids: Collection[int]
    ) -> list[Progress]:
        wanted = set(lesson_ids)
        return [
            p
            for (uid, lid), p in self._store.items()
            if uid == user_id and lid in wanted
        ]
