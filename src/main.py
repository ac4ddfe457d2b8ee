"""skillswap - skill-swap marketplace backend."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.db_client import DatabaseError, close_connection, init_db
from src.core.errors import ServiceError, classify_error_with_response, http_status_for
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.admin_router import router as admin_router
from src.interface.feedback_router import router as feedback_router
from src.interface.skills_router import router as skills_router
from src.interface.swap_router import router as swap_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Fail fast when a required credential is missing.

    Raises:
        SystemExit: If validation fails
    """
    logger.info("startup_validation_begin")

    try:
        settings.require_credential("secret_key", "Access token")
        logger.info("startup_validation", extra={"stage": "credentials", "status": "ok"})
    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\nStartup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()

    validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    yield

    await close_connection()


app = FastAPI(
    title="skillswap",
    description="Skill-swap marketplace: swap requests, feedback and moderation",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(skills_router)
app.include_router(swap_router)
app.include_router(feedback_router)
app.include_router(admin_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a rejected service operation as a structured error."""
    error = classify_error_with_response(exc)
    logger.info(
        "service_error",
        extra={"path": request.url.path, "kind": error.kind, "code": error.code},
    )
    return JSONResponse(
        content={"error": error.model_dump(mode="json")},
        status_code=http_status_for(exc),
    )


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Render a storage failure as a structured error without leaking its details."""
    logger.error("database_error", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        content={"error": classify_error_with_response(exc).model_dump(mode="json")},
        status_code=http_status_for(exc),
    )


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
