"""
User Manual Catalog - FastAPI Application

This is the entry point for the backend. It:
1. Creates the FastAPI app instance
2. Configures logging and CORS
3. Registers route handlers and the error envelope handlers
4. Sets up startup/shutdown lifecycle events

Run with:
    uvicorn manual_api.main:app --reload --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manual_api.config import settings
from manual_api.database import init_db
from manual_api.logging_config import setup_logging
from manual_api.responses import register_exception_handlers
from manual_api.routers import manuals

# Import models so SQLAlchemy registers them with Base.metadata
# before init_db() calls create_all().
import manual_api.models  # noqa: F401

logger = logging.getLogger(__name__)

SERVICE_NAME = "User Manual Catalog"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic.

    Code before 'yield' runs on startup, code after it on shutdown.
    """
    logger.info("Starting %s API...", SERVICE_NAME)
    await init_db()  # Create tables if they don't exist
    logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=f"{SERVICE_NAME} API",
        description="Catalogue of user manuals with an authenticated write path",
        version=VERSION,
        lifespan=lifespan,
    )

    # Without this, a browser frontend on another origin can't call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(manuals.public_router)
    app.include_router(manuals.admin_router)

    app.add_api_route("/", root, methods=["GET"], tags=["health"])
    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])

    return app


# --- Health Check Endpoints ---

async def root():
    """Root endpoint - confirms the API is alive."""
    return {
        "service": SERVICE_NAME,
        "status": "running",
        "version": VERSION,
    }


async def health_check():
    """Detailed health check - verifies database connectivity."""
    from sqlalchemy import text

    from manual_api.database import AsyncSessionLocal

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.warning("Health check could not reach the database: %s", e)
        db_status = f"error: {str(e)}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": settings.APP_ENV,
    }


app = create_app()
