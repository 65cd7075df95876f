"""
Main application module.

This module initializes and configures the FastAPI application:
- Logging configuration
- Database migrations applied before the app serves traffic
- Error handlers
- Customer routes
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI

from src.middleware.error_handler import add_error_handlers
from src.routes.customers import router as customers_router
from src.utils.config import get_settings
from src.utils.database import close_db, run_migrations
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply migrations on startup and release connections on shutdown."""
    settings = get_settings()
    try:
        logger.info("Starting up application...")
        if settings.RUN_MIGRATIONS:
            run_migrations()
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise

    yield

    logger.info("Shutting down application...")
    await close_db()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    setup_logging()

    # Interactive docs only outside production
    docs_enabled = settings.is_development

    app = FastAPI(
        title="Customers API",
        description="CRUD access to customer records through the repository pattern",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None
    )

    add_error_handlers(app)
    app.include_router(customers_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
