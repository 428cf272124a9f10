"""
TranscriptChat exception hierarchy.

All application-specific exceptions inherit from TranscriptChatError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class TranscriptChatError(Exception):
    """Base exception for all TranscriptChat errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "TRANSCRIPTCHAT_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class ValidationError(TranscriptChatError):
    """Raised for missing or malformed client input."""

    def __init__(self, detail: str = "Invalid request") -> None:
        super().__init__(detail=detail, code="VALIDATION_ERROR", status_code=400)


class UpstreamTimeoutError(TranscriptChatError):
    """Raised when an external AI service does not answer in time."""

    def __init__(self, detail: str = "Request timeout") -> None:
        super().__init__(detail=detail, code="UPSTREAM_TIMEOUT", status_code=408)


class UpstreamError(TranscriptChatError):
    """Raised when an external AI service answers with a non-2xx status.

    ``message`` is the human-readable text extracted from the upstream body,
    or None when the body carried none.
    """

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.message = message
        super().__init__(
            detail=message or f"Upstream service returned {status_code}",
            code="UPSTREAM_ERROR",
            status_code=status_code,
        )


class InternalError(TranscriptChatError):
    """Raised for failures that are neither client nor upstream errors."""

    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(detail=detail, code="INTERNAL_ERROR", status_code=500)
