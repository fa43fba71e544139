from __future__ import annotations

from fastapi import APIRouter, Response, status

from bizcard.infrastructure.cache.redis_client import ping_redis
from bizcard.infrastructure.db.session import ping_database

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready")
def ready(response: Response) -> dict[str, object]:
    # The menu cache is optional for serving, so only the database gates readiness.
    checks = {
        "database": ping_database(timeout_seconds=1.0),
        "cache": ping_redis(timeout_seconds=1.0),
    }
    if not checks["database"]:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable", "checks": checks}
    return {"status": "ok" if checks["cache"] else "degraded", "checks": checks}
