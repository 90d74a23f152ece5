"""Error Handlers — global exception handlers for apps that bind requests.

Invariants:
    - BindError → structured JSON with error code, message, severity and its own status (400/415)
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Two-layer handler: binding (BindError), catch-all (Exception)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from reqbind.core.errors import BindError, ErrorSeverity
from reqbind.infrastructure.observability import bind_error_fields

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_bind_error_handler(app)
    _register_generic_error_handler(app)


def _register_bind_error_handler(app: FastAPI) -> None:
    """Register binding error handler."""

    @app.exception_handler(BindError)
    async def bind_error_handler(request: Request, exc: BindError):
        """Handle all binding errors."""
        logger.warning(
            f"BindError: {exc.message}",
            extra={**bind_error_fields(exc), "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
