"""
Main entrypoint for the Profile API.

This module assembles the FastAPI application, sets up logging,
registers the error handlers and includes versioned routers.  The
application is instantiated at module import time as ``app``, so it
can be served directly::

    uvicorn profile_api.app.main:app --reload
"""

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import close_client, init_db
from .core.exception_handlers import register_exception_handlers
from .core.logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that startup can log
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Indexes must exist before the first upsert by username.
        await init_db()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        close_client()

    return app


app = create_app()
