from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Certificate:
    """Proof of course completion.  Issued once per (user, course), never updated."""

    id: int
    user_id: int
    course_id: int
    certificate_number: str
    issued_at: datetime

    @staticmethod
    def new(
        *, user_id: int, course_id: int, certificate_number: str, issued_at: datetime
    ) -> Certificate:
        return Certificate(
            id=0,
            user_id=user_id,
            course_id=course_id,
            certificate_number=certificate_number,
            issued_at=issued_at,
        )
