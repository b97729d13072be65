"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk import __version__
from orderdesk.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from orderdesk.api.middleware.error_handler import setup_exception_handlers
from orderdesk.api.routes import (
    health_router,
    invoices_router,
    ledger_router,
    orders_router,
    proforma_router,
)
from orderdesk.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Initializes resources on startup and cleans up on shutdown.
    """
    settings = get_settings()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        debug=settings.api.debug,
    )

    # Initialize database
    try:
        from orderdesk.infrastructure.storage.sqlite import get_connection_pool
        from orderdesk.infrastructure.storage.sqlite.migrations import run_migrations

        await run_migrations()
        logger.info("database_initialized")

        await get_connection_pool()
        logger.info("connection_pool_ready")

    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started")

    yield

    logger.info("application_stopping")

    try:
        from orderdesk.infrastructure.storage.sqlite import close_connection_pool

        await close_connection_pool()
        logger.info("connection_pool_closed")

    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))

    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title="OrderDesk API",
        description="Order quotation, GST tax split and fulfillment across buyer and seller ledgers",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    # Add middleware
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(orders_router)
    app.include_router(ledger_router)
    app.include_router(proforma_router)
    app.include_router(invoices_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """API info."""
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs",
        }

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        """Simple health check at root level."""
        return {"status": "healthy", "version": __version__}

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "orderdesk.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
