"""
WellBloom Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn wellbloom.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌──────────┐ ┌───────────┐ ┌──────┐ ┌──────┐            │
    │  │  Req ID  │→│ Access log│→│ GZip │→│ CORS │            │
    │  └──────────┘ └───────────┘ └──────┘ └──────┘            │
    │                                                          │
    │  Routers (/api): activities, exercises, meditations,     │
    │  emotions, phrases, emotion-records, journal, reports,   │
    │  admins, users   +   GET /health                         │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ Dependency→400 │ Unauthorized→401 │    │
    │  Forbidden→403 │ NotFound→404 │ Conflict→409 │           │
    │  StorageUnavailable→503 │ anything else→500              │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, warn about insecure configuration
    Shutdown: dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from wellbloom import __version__
from wellbloom.config import settings
from wellbloom.database import dispose_engine
from wellbloom.exceptions import (
    ConflictError,
    DependencyConflictError,
    ForbiddenError,
    NotFoundError,
    OwnershipError,
    StorageUnavailableError,
    UnauthorizedError,
    ValidationError,
    WellBloomError,
)
from wellbloom.middleware.logging import RequestLoggingMiddleware
from wellbloom.middleware.request_id import RequestIdLogFilter, RequestIDMiddleware, request_id_var
from wellbloom.routes import (
    activities,
    admins,
    emotion_records,
    emotions,
    exercises,
    health,
    journal,
    meditations,
    phrases,
    reports,
    users,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s

    The request ID comes from RequestIdLogFilter, attached to the handler
    so records from every logger (ours and third-party) carry it.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # Third-party loggers that are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("WellBloom Backend %s starting up...", __version__)

    # Raises in production, so the process exits before accepting traffic
    settings.validate_required_for_production()
    for problem in settings.production_problems():
        logger.warning("Configuration (%s): %s", settings.environment, problem)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("WellBloom Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(
    error: str, message: str, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def _field_name(loc: Any) -> str:
    """("body", "email") -> "email"; ("query", "limit") -> "limit"."""
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Every error body has the same shape:
        {"error": <code>, "message": <text>, "details": {...}?, "request_id": <id>}

    Starlette resolves handlers along the exception's MRO, so
    OwnershipError uses its own handler while other ForbiddenErrors fall
    back to the ForbiddenError one.

    Storage faults and unexpected errors never expose driver messages,
    SQL or stack traces; those are logged server-side only.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
            for err in exc.errors()
        ]
        logger.warning("Request validation failed: %s", [e["field"] for e in errors])
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Validation failed", {"errors": errors}),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s", exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, {"errors": exc.errors}),
        )

    @app.exception_handler(DependencyConflictError)
    async def handle_dependency_conflict(request: Request, exc: DependencyConflictError):
        logger.info("Delete blocked: %s", exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "dependency_conflict",
                exc.message,
                {"dependents": exc.context.get("dependents", [])},
            ),
        )

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthorized", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        logger.warning("Forbidden: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=403, content=_error_body("forbidden", exc.message))

    @app.exception_handler(OwnershipError)
    async def handle_ownership(request: Request, exc: OwnershipError):
        return JSONResponse(status_code=403, content=_error_body("ownership_error", exc.message))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("Conflict: %s", exc.message)
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message))

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage_unavailable(request: Request, exc: StorageUnavailableError):
        logger.error("Storage unavailable | Context: %s", exc.context)
        return JSONResponse(
            status_code=503,
            content=_error_body("storage_unavailable", exc.message),
        )

    @app.exception_handler(WellBloomError)
    async def handle_application_error(request: Request, exc: WellBloomError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a new app."""
    app = FastAPI(
        title="WellBloom API",
        description=(
            "Emotional wellbeing tracking: emotion logging, journal, activities, "
            "exercises and meditations, plus back-office administration and reports."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for module in (
        activities,
        exercises,
        meditations,
        emotions,
        phrases,
        emotion_records,
        journal,
        reports,
        admins,
        users,
        health,
    ):
        app.include_router(module.router)

    return app


# uvicorn imports `wellbloom.main:app`
app = create_app()
