"""
WellBloom Backend: Access Log Middleware
=========================================

What:  One `wellbloom.access` line per HTTP request.
When:  Runs inside RequestIDMiddleware, so RequestIdLogFilter has already
       stamped the request ID on the record.

Example line:
    2026-10-17T09:12:44 [INFO] wellbloom.access [a1b2c3d4]: POST /api/journal -> 201 in 12.4ms (10.0.0.7)

Levels:
    ERROR    5xx responses
    WARNING  4xx responses, and any request slower than SLOW_REQUEST_MS
    INFO     everything else

Privacy: bodies (emails, passwords, journal notes) and the Authorization
header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from wellbloom.config import settings

logger = logging.getLogger("wellbloom.access")

# Polled every few seconds by orchestrators
_QUIET_PATHS = frozenset({"/health"})


def access_level(status_code: int, elapsed_ms: float) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400 or elapsed_ms >= settings.slow_request_ms:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        # Route template groups /api/emotions/3 and /api/emotions/7 together
        route = request.scope.get("route")
        template = getattr(route, "path", request.url.path)
        peer = request.client.host if request.client else "-"

        logger.log(
            access_level(response.status_code, elapsed_ms),
            "%s %s -> %d in %.1fms (%s)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            peer,
            extra={"route": template, "status_code": response.status_code, "elapsed_ms": round(elapsed_ms, 2)},
        )
        return response
