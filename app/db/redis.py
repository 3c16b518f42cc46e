"""Redis connection management.

Mirrors engine.py: with REDIS_URL set a shared async client is created at
import time; without it ``redis_pool`` is None and the features that would
use Redis (password reset tokens) fall back to in-memory stores.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

from app.core.config import SETTINGS

logger = logging.getLogger(__name__)

if SETTINGS.redis_url:
    redis_pool: aioredis.Redis | None = aioredis.from_url(  # type: ignore[type-arg]
        SETTINGS.redis_url,
        decode_responses=True,
        max_connections=20,
    )
else:
    redis_pool = None


async def ping_redis() -> bool:
    """True when Redis answers PING; False when unreachable or not configured."""
    if redis_pool is None:
        return False
    try:
        await redis_pool.ping()  # type: ignore[misc]
    except Exception:
        logger.warning("Redis ping failed", exc_info=True)
        return False
    return True


@asynccontextmanager
async def lifespan_redis():
    """Verify the connection on startup and close the pool on shutdown.

    A failed ping is logged but does not stop the app from starting.
    """
    if redis_pool is None:
        logger.info("No REDIS_URL configured; reset tokens are kept in memory")
        yield
        return

    if await ping_redis():
        logger.info("Redis connected")
    else:
        logger.error("Redis unreachable on startup")

    yield

    await redis_pool.aclose()
    logger.info("Redis connection pool closed")
