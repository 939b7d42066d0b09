"""
WellBloom Backend: Health Check Route
======================================

What:  Readiness check for orchestrators and load balancers. Not under /api
       and not access-logged (see middleware/logging.py).

    200  {"status": "healthy",   "database": "connected",    "database_latency_ms": 1.8, ...}
    503  {"status": "unhealthy", "database": "disconnected", "database_latency_ms": null, ...}
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Response, status
from sqlalchemy import text

from wellbloom import __version__
from wellbloom.config import settings
from wellbloom.database import engine
from wellbloom.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


async def check_database() -> Optional[float]:
    """Round-trip time of SELECT 1 in milliseconds, or None when unreachable."""
    started = time.perf_counter()
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check failed: %s: %s", type(e).__name__, e)
        return None
    return round((time.perf_counter() - started) * 1000, 2)


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    latency_ms = await check_database()
    if latency_ms is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if latency_ms is not None else "unhealthy",
        version=__version__,
        database="connected" if latency_ms is not None else "disconnected",
        database_latency_ms=latency_ms,
        environment=settings.environment,
        uptime_seconds=round(time.monotonic() - _started_at, 2),
    )
