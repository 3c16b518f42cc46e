from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from app.models.review import Review


class ReviewRepo(Protocol):
    async def get(self, user_id: int, course_id: int) -> Review | None: ...
    async def add(self, review: Review) -> Review: ...
    async def update(
        self,
        review_id: int,
        *,
        rating: int,
        comment: str | None,
        updated_at: datetime,
    ) -> Review: ...
    async def list_for_course(
        self, course_id: int, *, limit: int | None = None
    ) -> list[Review]:
        """Newest first, at most ``limit`` when given."""
        ...


class InMemoryReviewRepo:
    def __init__(self) -> None:
        self._store: dict[tuple[int, int], Review] = {}
        self._ids = itertools.count(1)

    async def get(self, user_id: int, course_id: int) -> Review | None:
        return self._store.get((user_id, course_id))

    async def add(self, review: Review) -> Review:
        key = (review.user_id, review.course_id)
        if key in self._store:
            raise ValueError("review already exists")
        stored = replace(review, id=next(self._ids))
        self._store[key] = stored
        return stored

    async def update(
        self,
        review_id: int,
        *,
        rating: int,
        comment: str | None,
        updated_at: datetime,
    ) -> Review:
        for key, existing in self._store.items():
            if existing.id == review_id:
                updated = replace(
                    existing, rating=rating, comment=comment, updated_at=updated_at
                )
                self._store[key] = updated
                return updated
        raise KeyError("review not found")

    async def list_for_course(
        self, course_id: int, *, limit: int | None = None
    ) -> list[Review]:
        newest = sorted(
            (r for r in self._store.values() if r.course_id == course_id),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )
        return newest[:limit] if limit is not None else newest
