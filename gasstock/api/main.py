"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gasstock.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from gasstock.api.middleware.error_handler import setup_exception_handlers
from gasstock.api.routes import (
    categories_router,
    category_movements_router,
    cylinder_movements_router,
    cylinder_types_router,
    cylinders_router,
    health_router,
)
from gasstock.application.services import build_container
from gasstock.config import Settings, configure_logging, get_logger, get_settings
from gasstock.infrastructure.storage.sqlite.migrations.migrator import run_migrations

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and builds the service container on startup,
    closes the connection pool on shutdown. A container already present on
    ``app.state`` is used as is.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    try:
        await run_migrations(settings.storage.db_path)
        logger.info("database_initialized")
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    if getattr(app.state, "container", None) is None:
        app.state.container = build_container(settings)
    await app.state.container.pool.initialize()
    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await app.state.container.close()
    logger.info("application_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Optional settings override (defaults to environment settings)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Gas Cylinder Inventory API",
        description="Category stock counts and serialized cylinder tracking",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(categories_router)
    app.include_router(category_movements_router)
    app.include_router(cylinder_types_router)
    app.include_router(cylinders_router)
    app.include_router(cylinder_movements_router)

    return app


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gasstock.api.main:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
