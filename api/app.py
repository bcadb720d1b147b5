"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from shared.logging_config import configure_logging

from .dependencies import get_container
from .errors import register_exception_handlers
from .routes import auth, health, usage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Configures logging on startup and waits for in-flight usage writes
    on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level, json_format=settings.log_json)
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    yield
    await get_container().drain_usage_recorder()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication, role management and module usage tracking API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(usage.router, prefix="/api/auth/usage", tags=["usage"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])

    return app


# Application instance for uvicorn
app = create_app()
