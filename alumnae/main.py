"""Alumnae Backend - FastAPI Application Factory."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alumnae.api import api_router
from alumnae.api.errors import register_exception_handlers
from alumnae.api.health import router as health_router
from alumnae.core import async_session_maker, init_db, settings, setup_logging
from alumnae.core.logging import RequestContextMiddleware, get_logger

# Import all models to ensure they're registered with Base before create_all
from alumnae.models import Alumna, BatchYear, Event, TokenBlacklist, User  # noqa: F401
from alumnae.services.token_blacklist import TokenBlacklistService

logger = get_logger("main")


def task_done_callback(task: asyncio.Task[None]) -> None:
    """Log unhandled exceptions from background tasks."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


async def _token_blacklist_cleanup_loop() -> None:
    """Periodically remove expired entries from the token blacklist."""
    while True:
        await asyncio.sleep(settings.blacklist_cleanup_interval_seconds)
        try:
            async with async_session_maker() as db:
                removed = await TokenBlacklistService(db).purge_expired()
                if removed > 0:
                    logger.info(f"Cleaned up {removed} expired token blacklist entries")
        except Exception:
            logger.exception("Error cleaning up token blacklist")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    setup_logging(
        level=settings.log_level,
        format_type="structured" if not settings.debug else "dev",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    await init_db()

    blacklist_task = asyncio.create_task(_token_blacklist_cleanup_loop())
    blacklist_task.add_done_callback(task_done_callback)

    yield

    logger.info("Shutting down...")
    blacklist_task.cancel()
    try:
        await blacklist_task
    except asyncio.CancelledError:
        pass


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Alumnae association backend",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)  # Health at root level
    app.include_router(api_router)  # API at /api

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "message": "SSA Alumnae API is running!",
        }

    return app


# Application instance
app = create_app()
