"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests pass their own Settings and Database

2. Lifespan Events
   - startup: build the connection pool and verify the database answers;
     if it doesn't, startup fails and the process exits
   - shutdown: close pooled connections

3. Exception Handlers
   - Request validation failures -> 400
   - Missing books -> 404
   - Database errors -> 500, details only in the server log
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from anyio import to_thread
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from app import __version__
from app.config import Settings, get_settings
from app.database import Database
from app.dependencies import DatabaseDep
from app.errors import APIError, InternalError, ValidationError
from app.routers import books_router

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=settings.log_level_value,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    app_settings: Settings = app.state.settings

    # ----- STARTUP -----
    logger.info(f"Starting {app_settings.app_name}...")

    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database.from_settings(app_settings)
    database: Database = app.state.database

    try:
        await run_in_threadpool(database.ping)
    except SQLAlchemyError as exc:
        logger.critical(f"Cannot connect to the database: {exc}")
        raise
    logger.info("Database connection verified")

    # Blocking queries run on this pool of worker threads
    to_thread.current_default_thread_limiter().total_tokens = app_settings.worker_threads

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {app_settings.app_name}...")
    if owns_database:
        database.dispose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    app_settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to get_settings())
        database: Ready-made Database; when omitted one is built from
            app_settings at startup and disposed at shutdown

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or get_settings()

    app = FastAPI(
        title=app_settings.app_name,
        description="A RESTful API for managing a book library.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Turn ValidationError / NotFoundError / InternalError into JSON."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Handle malformed path parameters and request bodies.

        FastAPI answers these with 422 by default; this API uses 400.
        """
        logger.warning(
            f"Parameter validation failed: {request.method} {request.url.path} "
            f"{exc.errors()}"
        )
        error = ValidationError()
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all exception handler."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        error = InternalError()
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.detail},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(books_router, prefix="/api")

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the database answers.",
    )
    async def health_check(database: DatabaseDep) -> JSONResponse:
        """
        Health check endpoint.

        Returns 503 when the database cannot be reached.
        """
        healthy = await run_in_threadpool(database.is_healthy)
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "healthy" if healthy else "unhealthy",
                "app": app_settings.app_name,
                "database": "ok" if healthy else "unavailable",
            },
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app(settings)


# =============================================================================
# Development Server
# =============================================================================
# python -m app.main
# In production: uvicorn app.main:app --host 127.0.0.1 --port 8080 --workers 4

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
