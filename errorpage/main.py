"""
Application entry point.

Creates the FastAPI application and wires together:
- Logging configuration
- The fallback error handler (content-negotiated 500 responses)
- Routers

No rendering logic belongs here.
"""

from typing import Optional

from fastapi import FastAPI

from errorpage.core.config import Settings, settings as default_settings
from errorpage.interfaces.status import router as status_router
from errorpage.shared.errors.handlers import ErrorHandler, register_error_handlers
from errorpage.shared.logging import configure_logging


def create_app(
    settings: Optional[Settings] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root of the application.

    Args:
        settings: Settings to build from. Defaults to the environment.
        error_handler: Handler to register. Defaults to one built from
            ``settings.display_error_details``.

    Returns:
        A fully configured FastAPI application instance.
    """
    settings = settings or default_settings
    configure_logging(level=settings.log_level, error_log_path=settings.error_log_path)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # --- Error Handlers ---
    if error_handler is None:
        error_handler = ErrorHandler(
            display_error_details=settings.display_error_details
        )
    register_error_handlers(app, error_handler)
    app.state.settings = settings
    app.state.error_handler = error_handler

    # --- Routers ---
    app.include_router(status_router, prefix="/api/v1")

    return app


app = create_app()
