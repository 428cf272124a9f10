"""Transcription and chat relays.

Each relay validates one request, forwards it to the configured AI provider,
and translates provider failures into the API error taxonomy with
endpoint-specific messages. No state is shared between requests; the only
resource a transcription call owns is its spooled upload, which is removed
on every exit path.

Usage::

    relay = TranscriptionRelay(stt)
    result = await relay.transcribe(upload)

    reply = await ChatRelay(llm).chat(ChatRequest(message="...", context="..."))
"""

import asyncio
import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import UploadFile

from src.core.config import Settings, get_settings
from src.core.exceptions import (
    InternalError,
    UpstreamError,
    UpstreamTimeoutError,
    ValidationError,
)
from src.core.models import ChatRequest, ChatResponse, TranscriptionResponse
from src.core.utils import is_allowed_audio, safe_filename
from src.services.llm import BaseLLM, create_llm
from src.services.transcription import BaseSTT, create_stt

logger = logging.getLogger(__name__)

_SPOOL_CHUNK_SIZE = 1024 * 1024

NO_FILE_MESSAGE = "No audio file uploaded"
BAD_TYPE_MESSAGE = "Only .wav and .mp3 files are allowed"
TRANSCRIBE_TIMEOUT_MESSAGE = "Request timeout. Please try with a smaller file."
TRANSCRIBE_FAILED_MESSAGE = "Transcription failed"
TRANSCRIBE_INTERNAL_MESSAGE = "Internal server error during transcription"

NO_MESSAGE_MESSAGE = "No message provided"
CHAT_TIMEOUT_MESSAGE = "Chat request timeout. Please try again."
CHAT_FAILED_MESSAGE = "Chat service error"
CHAT_INTERNAL_MESSAGE = "Internal server error during chat"

# ---------------------------------------------------------------------------
# Upload spooling
# ---------------------------------------------------------------------------


@asynccontextmanager
async def spooled_upload(
    upload: UploadFile,
    upload_dir: str | Path,
    max_bytes: int,
) -> AsyncIterator[Path]:
    """Write ``upload`` to a unique file under ``upload_dir`` and yield its path.

    Bytes are counted while spooling, so the size limit holds even when the
    client skipped its own check. The file is deleted when the block exits,
    whether it exits normally or by exception.

    Raises:
        ValidationError: If the upload exceeds ``max_bytes``.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    name = safe_filename(upload.filename or "upload")
    path = directory / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{name}"

    try:
        written = 0
        out = await asyncio.to_thread(path.open, "wb")
        try:
            while chunk := await upload.read(_SPOOL_CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise ValidationError(
                        f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
                    )
                await asyncio.to_thread(out.write, chunk)
        finally:
            await asyncio.to_thread(out.close)
        logger.debug("Spooled %d bytes to %s", written, path)
        yield path
    finally:
        path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionRelay:
    """Forwards one uploaded audio file to the speech-to-text provider.

    Args:
        stt: Provider to use (defaults to ``create_stt(settings.stt_provider)``).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(self, stt: BaseSTT | None = None, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._stt = stt or create_stt(provider=self._settings.stt_provider)

    async def transcribe(self, upload: UploadFile | None) -> TranscriptionResponse:
        """Validate, spool, transcribe and clean up a single upload.

        Raises:
            ValidationError: No file, wrong type, or over the size limit (400).
            UpstreamTimeoutError: The provider timed out (408).
            UpstreamError: The provider returned an error status (passthrough).
            InternalError: Anything else (500).
        """
        if upload is None or not upload.filename:
            raise ValidationError(NO_FILE_MESSAGE)
        if not is_allowed_audio(upload.filename, upload.content_type):
            raise ValidationError(BAD_TYPE_MESSAGE)

        try:
            async with spooled_upload(
                upload, self._settings.upload_dir, self._settings.max_upload_bytes
            ) as path:
                text = await self._stt.transcribe(
                    str(path),
                    filename=upload.filename,
                    content_type=upload.content_type,
                )
        except ValidationError:
            raise
        except UpstreamTimeoutError as exc:
            logger.warning("Transcription of %s timed out", upload.filename)
            raise UpstreamTimeoutError(TRANSCRIBE_TIMEOUT_MESSAGE) from exc
        except UpstreamError as exc:
            raise UpstreamError(exc.status_code, exc.message or TRANSCRIBE_FAILED_MESSAGE) from exc
        except Exception as exc:
            logger.error("Transcription error for %s: %s", upload.filename, exc)
            raise InternalError(TRANSCRIBE_INTERNAL_MESSAGE) from exc

        logger.info("Transcribed %s (%d chars)", upload.filename, len(text))
        return TranscriptionResponse(transcription=text, filename=upload.filename, mock=False)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


def build_system_prompt(context: str | None) -> str:
    """Return the system instruction for a chat turn.

    With a context the assistant is told to answer from the transcribed
    content only; without one it is told to ask for a transcription first.
    """
    if context:
        return (
            "You are a helpful AI assistant. The user has provided an audio "
            "transcription, and you should answer questions about it. Here is the "
            f'transcribed content:\n\n"{context}"\n\n'
            "Please answer the user's questions based on this transcribed content. "
            "If the question is not related to the transcription, politely mention "
            "that you're designed to help with questions about the transcribed audio "
            "content."
        )
    return (
        "You are a helpful AI assistant. The user has not provided any transcribed "
        "audio content yet. Please ask them to upload and transcribe an audio file "
        "first before asking questions."
    )


def build_messages(message: str, context: str | None) -> list[dict[str, str]]:
    """Build the two-message (system + user) exchange sent upstream."""
    return [
        {"role": "system", "content": build_system_prompt(context)},
        {"role": "user", "content": message},
    ]


class ChatRelay:
    """Answers one user message against the supplied transcript context.

    Args:
        llm: Provider to use (defaults to ``create_llm(settings.llm_provider)``).
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(self, llm: BaseLLM | None = None, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._llm = llm or create_llm(provider=self._settings.llm_provider)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Run one chat exchange.

        Raises:
            ValidationError: Missing or empty message (400).
            UpstreamTimeoutError: The provider timed out (408).
            UpstreamError: The provider returned an error status (passthrough).
            InternalError: Anything else (500).
        """
        if not request.message:
            raise ValidationError(NO_MESSAGE_MESSAGE)

        messages = build_messages(request.message, request.context)
        try:
            reply = await self._llm.chat(
                messages,
                max_tokens=self._settings.chat_max_tokens,
                temperature=self._settings.chat_temperature,
            )
            return ChatResponse(response=reply, mock=False)
        except UpstreamTimeoutError as exc:
            raise UpstreamTimeoutError(CHAT_TIMEOUT_MESSAGE) from exc
        except UpstreamError as exc:
            raise UpstreamError(exc.status_code, exc.message or CHAT_FAILED_MESSAGE) from exc
        except Exception as exc:
            logger.error("Chat error: %s", exc)
            raise InternalError(CHAT_INTERNAL_MESSAGE) from exc
