"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from flowaborate.core.config import settings
from flowaborate.core.errors import (
    CollaborationError,
    InvalidTransitionError,
    InviteAlreadyClaimedError,
    SchedulingError,
    StaleDataConflictError,
    TaskNotPermittedError,
    TransitionNotPermittedError,
    UnknownStatusError,
)
from flowaborate.db.session import engine

logger = logging.getLogger(__name__)

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Flowaborate API",
    description="Host-guest content collaboration workflow API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["X-Request-ID"],
)

# ============================================================================
# Domain error mapping
# ============================================================================


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(
        status_code=409,
        content={
            "detail": str(exc),
            "current_status": exc.from_status,
            "allowed_transitions": exc.allowed,
        },
    )


async def stale_data_handler(request: Request, exc: StaleDataConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "retryable": True})


async def collaboration_error_handler(request: Request, exc: CollaborationError):
    if isinstance(exc, (TransitionNotPermittedError, TaskNotPermittedError)):
        status_code = 403
    elif isinstance(exc, InviteAlreadyClaimedError):
        status_code = 409
    elif isinstance(exc, (SchedulingError, UnknownStatusError)):
        status_code = 422
    else:
        logger.warning("Unmapped collaboration error on %s: %s", request.url.path, exc)
        status_code = 400
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
app.add_exception_handler(StaleDataConflictError, stale_data_handler)
app.add_exception_handler(CollaborationError, collaboration_error_handler)

# ============================================================================
# Routers
# ============================================================================

from flowaborate.routers import collaborations, dashboard, internal, invites, tasks

app.include_router(collaborations.router, prefix="/collaborations", tags=["collaborations"])
app.include_router(tasks.router, prefix="/collaborations", tags=["tasks"])
app.include_router(dashboard.router)
app.include_router(invites.router, tags=["invites"])
app.include_router(internal.router)


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
