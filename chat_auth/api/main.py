"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from chat_auth.adapters.repository.postgres import run_migrations
from chat_auth.api.errors import register_exception_handlers
from chat_auth.api.models import ErrorResponse
from chat_auth.api.v1 import router as v1_router
from chat_auth.config.log_config import configure_logging
from chat_auth.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE_MESSAGE = "Database unavailable."

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "user",
        "description": "Account registration and email verification",
    },
]


def create_pool(settings: Settings) -> ConnectionPool:
    """
    Create the shared connection pool.

    request_timeout_seconds bounds both the wait for a free connection
    and each SQL statement run on it.
    """
    statement_timeout_ms = int(settings.request_timeout_seconds * 1000)
    return ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.request_timeout_seconds,
        kwargs={"options": f"-c statement_timeout={statement_timeout_ms}"},
        open=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build process-wide state before the first request is served.

    Startup order: settings (a missing TOKEN_ISS or ACCESS_TOKEN_SECRET
    stops the process here), logging, connection pool, migrations.
    The pool is closed again on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)
    logger.info("chat-auth starting (pool %d-%d)", settings.pool_min_size, settings.pool_max_size)

    pool = create_pool(settings)
    run_migrations(pool)

    app.state.settings = settings
    app.state.pool = pool
    logger.info("Ready to serve requests")

    try:
        yield
    finally:
        pool.close()
        logger.info("Connection pool closed")


app = FastAPI(
    title="chat-auth",
    description="Account registration and email verification API",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(v1_router, prefix="/api/v1")


@app.get(
    "/health",
    response_model=None,
    responses={503: {"model": ErrorResponse, "description": "Database unreachable"}},
)
def health_check(request: Request) -> dict[str, bool] | JSONResponse:
    """Liveness probe that also borrows a pooled connection and runs SELECT 1."""
    try:
        with request.app.state.pool.connection() as conn:
            conn.execute("SELECT 1")
    except psycopg.Error as e:
        logger.error("Health check failed: %s", type(e).__name__)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ErrorResponse(error=DATABASE_UNAVAILABLE_MESSAGE).model_dump(),
        )

    return {"success": True}
