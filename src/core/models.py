"""
Pydantic v2 request / response models used across the API and UI layers.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /api/health response."""

    status: str = "OK"
    message: str = "Server is running!"


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionResponse(BaseModel):
    """POST /api/transcribe response."""

    transcription: str
    filename: str
    mock: bool = False


class TranscriptionResult(BaseModel):
    """The transcript currently shown in the UI."""

    text: str
    filename: str
    is_mock: bool = False


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    """POST /api/chat request body.

    ``message`` is optional at the schema level so that a missing message
    surfaces as a 400 from the relay rather than a schema error.
    """

    message: str | None = None
    context: str | None = None


class ChatResponse(BaseModel):
    """POST /api/chat response."""

    response: str
    mock: bool = False


class Sender(StrEnum):
    """Author of a chat message."""

    user = "user"
    assistant = "assistant"


class ChatMessage(BaseModel):
    """A single entry of the in-memory conversation."""

    content: str
    sender: Sender


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class FileHistoryEntry(BaseModel):
    """One past transcription kept in the client-side history."""

    id: int = Field(description="Creation timestamp in milliseconds")
    name: str
    transcript: str
    timestamp: str = Field(description="Human-readable creation time")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    code: str
    timestamp: str
