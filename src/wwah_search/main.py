"""
Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures global exception handling, and provides a test-friendly
application factory.

The database is not touched at startup: the first search or stats request
opens the shared connection.
"""

from __future__ import annotations

import logging
from fastapi import FastAPI

from .config import settings
from .core.errors import (
    UnknownDomainError,
    unhandled_exception_handler,
    unknown_domain_handler,
)
from .db.session import database

from .api import (
    search_routes,
    stats_routes,
    health_routes,
)


logger = logging.getLogger("wwah.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="wwah-search-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(UnknownDomainError, unknown_domain_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(search_routes.router)
    app.include_router(stats_routes.router)

    # --------------------------------------------------------------
    # Lifecycle Hooks
    # --------------------------------------------------------------

    @app.on_event("startup")
    async def _startup_validation() -> None:
        logger.info("Starting wwah-search-server")

        if not settings.openai_api_key.get_secret_value():
            logger.warning("OPENAI_API_KEY is not set; searches will return no results")
        if settings.admin_api_key is None:
            logger.warning("ADMIN_API_KEY is not set; stats endpoints are disabled")

    @app.on_event("shutdown")
    async def _shutdown_cleanup() -> None:
        logger.info("Shutting down wwah-search-server")
        await database.dispose()

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
