from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity extracted from a validated JWT.

    Carried through the request via FastAPI's dependency system.
    Endpoints receive this instead of a raw token.

        user_id: numeric subject from the JWT ``sub`` claim
        roles: platform roles (STUDENT, ADMIN)
    """

    user_id: int
    roles: frozenset[str]

    def has_role(self, role: str) -> bool:
        return role in self.roles
