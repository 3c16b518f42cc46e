"""Liveness and readiness endpoints.

/health answers 200 while the process is up and reports each backing
service; ``status`` is "degraded" when a configured one is unreachable.
/ready always answers 200: without a database or Redis the app runs on
its in-memory fallbacks.
"""

from __future__ import annotations

from fastapi import APIRouter, Response

from app.db import engine as db_engine
from app.db import redis as db_redis

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    checks: dict[str, str] = {}
    overall = "ok"

    if db_engine.engine is None:
        checks["database"] = "not_configured"
    elif await db_engine.ping_database():
        checks["database"] = "ok"
    else:
        checks["database"] = "degraded"
        overall = "degraded"

    if db_redis.redis_pool is None:
        checks["redis"] = "not_configured"
    elif await db_redis.ping_redis():
        checks["redis"] = "ok"
    else:
        checks["redis"] = "degraded"
        overall = "degraded"

    return {"status": overall, "checks": checks}


@router.get("/ready")
async def ready() -> Response:
    return Response(status_code=200)
