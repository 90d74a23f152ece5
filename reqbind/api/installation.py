"""Installation — one call wires binding error handling (and optionally logging) into an app.

Invariants:
    - Error handlers are always registered; logging is configured only when configure_logging=True
"""

from fastapi import FastAPI

from reqbind.api.error_handlers import register_error_handlers
from reqbind.config import Settings, get_settings
from reqbind.infrastructure.observability import setup_logging


def install(
    app: FastAPI, settings: Settings | None = None, configure_logging: bool = False,
) -> None:
    """Register BindError handlers on app; configure logging from settings if requested."""
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.log_level, settings.log_format)
    register_error_handlers(app)
