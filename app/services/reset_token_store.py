"""Single-use password reset tokens.

A token maps to a user id for RESET_TOKEN_TTL_SECONDS.  Consuming a token
removes it, so a link from the reset e-mail works at most once.
"""

from __future__ import annotations

import secrets
import time
from typing import Protocol, runtime_checkable

from app.db.redis import redis_pool

RESET_TOKEN_TTL_SECONDS = 60 * 60


def _new_token() -> str:
    return secrets.token_urlsafe(32)


@runtime_checkable
class ResetTokenStore(Protocol):
    async def issue(self, user_id: int) -> str:
        """Create a token for user_id that expires after the TTL."""
        ...

    async def consume(self, token: str) -> int | None:
        """Return the user id and invalidate the token; None if unknown or expired."""
        ...


class InMemoryResetTokenStore:
    """Per-process store for tests and local dev."""

    def __init__(self, ttl_seconds: int = RESET_TOKEN_TTL_SECONDS) -> None:
        self._ttl = ttl_seconds
        # token -> (user_id, expiry as Unix seconds)
        self._tokens: dict[str, tuple[int, float]] = {}

    async def issue(self, user_id: int) -> str:
        token = _new_token()
        self._tokens[token] = (user_id, time.time() + self._ttl)
        return token

    async def consume(self, token: str) -> int | None:
        entry = self._tokens.pop(token, None)
        if entry is None:
            return None
        user_id, expires_at = entry
        if expires_at < time.time():
            return None
        return user_id

    def clear(self) -> None:
        self._tokens.clear()


class RedisResetTokenStore:
    """Redis-backed store shared by all API instances; Redis TTL does the expiry."""

    _PREFIX = "password-reset:"

    def __init__(self, redis_client, ttl_seconds: int = RESET_TOKEN_TTL_SECONDS) -> None:
        self._redis = redis_client
        self._ttl = ttl_seconds

    async def issue(self, user_id: int) -> str:
        token = _new_token()
        await self._redis.setex(f"{self._PREFIX}{token}", self._ttl, str(user_id))
        return token

    async def consume(self, token: str) -> int | None:
        # GETDEL reads and deletes atomically; two racing resets cannot both win
        value = await self._redis.getdel(f"{self._PREFIX}{token}")
        if value is None:
            return None
        return int(value)


# ---------------------------------------------------------------------------
# Module-level singleton, conditional on Redis availability
# ---------------------------------------------------------------------------

if redis_pool is not None:
    reset_token_store: ResetTokenStore = RedisResetTokenStore(redis_pool)
else:
    reset_token_store = InMemoryResetTokenStore()
