"""
Global error handling middleware for the FastAPI application.

Catches TranscriptChatError subclasses, request validation errors, and
unhandled exceptions, converting them into a consistent ``{"error": ...}``
JSON envelope.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import TranscriptChatError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str, code: str, timestamp: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "timestamp": timestamp or datetime.now(UTC).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``TranscriptChatError`` — maps relay errors to their status and message.
    2. ``RequestValidationError`` — malformed body/params (400).
    3. ``Exception`` — catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(TranscriptChatError)
    async def transcriptchat_error_handler(
        _request: Request, exc: TranscriptChatError
    ) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors (malformed body/params)."""
        return _envelope(400, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler — prevents stack traces from leaking to clients."""
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
