"""Shared utility functions for TranscriptChat."""

from pathlib import PurePath

from src.core.exceptions import ValidationError

ALLOWED_MIME_TYPES = frozenset({"audio/wav", "audio/mpeg", "audio/mp3"})
ALLOWED_EXTENSIONS = (".wav", ".mp3")


def is_allowed_audio(filename: str, content_type: str | None) -> bool:
    """Return True when the MIME type or the file extension is wav/mp3."""
    if content_type in ALLOWED_MIME_TYPES:
        return True
    return (filename or "").lower().endswith(ALLOWED_EXTENSIONS)


def validate_audio_upload(
    filename: str,
    content_type: str | None,
    size: int,
    max_bytes: int,
) -> None:
    """Check an upload against the type and size rules.

    Shared by the UI (before any network call) and the server.

    Raises:
        ValidationError: If the type is not wav/mp3 or the size exceeds
            ``max_bytes``.
    """
    if not is_allowed_audio(filename, content_type):
        raise ValidationError("Only .wav and .mp3 files are allowed")
    if size > max_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )


def safe_filename(filename: str) -> str:
    """Strip any directory components from a client-supplied filename."""
    name = PurePath(filename.replace("\\", "/")).name
    return name or "upload"


def format_size_mb(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"
