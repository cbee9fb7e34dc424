"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events (storage selection and
shutdown), error mapping and router registration.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from jobtracker.core.config import settings
from jobtracker.core.errors import (
    BackendUnavailable,
    DuplicateApplication,
    DuplicateEmail,
    HasDependents,
    NotFound,
    PermissionDenied,
    TrackerError,
)
from jobtracker.core.logging import setup_logging
from jobtracker.db.selector import selector
from jobtracker.routers import admin, applications, health, jobs, users
from jobtracker.services.tracker import close_tracker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: pick the storage backend, release it on exit.

    A backend that fails to initialize does not block startup; the service
    comes up degraded and ``/health`` reports it.
    """
    setup_logging()
    logger.info("Application starting up")
    adapter = await selector.get_adapter()
    logger.info(
        "storage_ready",
        extra={"backend": adapter.backend, "degraded": selector.degraded},
    )
    yield
    await close_tracker()
    logger.info("Application shutting down")


app = FastAPI(
    title="Job Tracker API",
    description="Job-application tracking with candidate, recruiter and admin roles",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
_STATUS_CODES: list[tuple[type[TrackerError], int]] = [
    (NotFound, 404),
    (PermissionDenied, 403),
    (DuplicateApplication, 409),
    (DuplicateEmail, 409),
    (HasDependents, 409),
    (BackendUnavailable, 503),
]


@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    """Translate the tracker error taxonomy into HTTP responses."""
    status_code = next(
        (code for cls, code in _STATUS_CODES if isinstance(exc, cls)), 500
    )
    if status_code >= 500:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "error": str(exc)},
        )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(jobs.router, prefix="/api/v1/jobs", tags=["Jobs"])
app.include_router(
    applications.router, prefix="/api/v1/applications", tags=["Applications"]
)
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])
