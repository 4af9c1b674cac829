"""
Health check endpoint.

GET /health — checks the challenge store.
Rules:
- store ping ok → "healthy" (200)
- store ping fails → "unhealthy" (503), since no captcha can be created or verified.
The active backend is reported as "redis", "memory" or "custom".
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from infrastructure.cache.challenge_store import RedisChallengeStore
from infrastructure.cache.memory_store import MemoryChallengeStore
from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    store = request.app.state.challenge_store
    checks["backend"] = _backend_name(store)
    try:
        ok = await store.ping()
    except Exception:
        ok = False
    checks["store"] = "ok" if ok else "error"
    if not ok:
        overall = "unhealthy"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )


def _backend_name(store) -> str:
    if isinstance(store, RedisChallengeStore):
        return "redis"
    if isinstance(store, MemoryChallengeStore):
        return "memory"
    return "custom"
