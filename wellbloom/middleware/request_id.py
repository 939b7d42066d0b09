"""
WellBloom Backend: Request ID Middleware
=========================================

What:  Gives each request a correlation ID, returns it in X-Request-ID and
       stamps it on every log record.
How:   The ID lives in a ContextVar, so concurrent requests on one event
       loop each see their own value. RequestIdLogFilter copies it onto log
       records as %(request_id)s; main.py's error handlers put it in every
       error body so a client can quote it in a bug report.

Client-supplied IDs are reused only when they look like an ID (up to 64
letters, digits, '-', '_' or '.'); anything else is replaced, so a header
cannot inject text into log lines.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_SAFE_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    if supplied and _SAFE_ID.match(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIdLogFilter(logging.Filter):
    """Adds the current request ID ("-" outside a request) to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid

        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
