"""
Application state and the controller that owns it.

All UI interactions are dispatched as ``UIEvent`` commands to handlers
registered on ``AppController``. The controller is the only writer of
``AppState``; history persistence happens as a side effect of its handlers.

Upload flow: empty -> file_selected -> uploading -> transcript_ready
(or upload_failed, which keeps the selected file so the user can retry).
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from src.core.exceptions import ValidationError
from src.core.models import ChatMessage, FileHistoryEntry, Sender, TranscriptionResult
from src.core.utils import validate_audio_upload
from src.ui.api_client import APIError
from src.ui.history import HistoryStore

logger = logging.getLogger(__name__)

CHAT_NETWORK_ERROR = "Network error. Please try again."


class UploadPhase(StrEnum):
    """States of the upload/playback panel."""

    empty = "empty"
    file_selected = "file_selected"
    uploading = "uploading"
    transcript_ready = "transcript_ready"
    upload_failed = "upload_failed"


class UIEvent(StrEnum):
    """Commands the UI can dispatch to the controller."""

    select_file = "select_file"
    transcribe = "transcribe"
    clear_transcript = "clear_transcript"
    select_history = "select_history"
    clear_history = "clear_history"
    change_search = "change_search"
    send_message = "send_message"


class RelayClient(Protocol):
    def transcribe(self, filename: str, data: bytes, mime_type: str | None = None) -> dict: ...

    def chat(self, message: str, context: str | None = None) -> dict: ...


@dataclass
class SelectedAudio:
    """The file currently loaded in the player."""

    name: str
    data: bytes
    mime_type: str | None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class StatusBanner:
    message: str
    kind: str = "info"  # "success" | "error" | "info"


@dataclass
class AppState:
    phase: UploadPhase = UploadPhase.empty
    audio: SelectedAudio | None = None
    current: TranscriptionResult | None = None
    selected_history_id: int | None = None
    search_term: str = ""
    messages: list[ChatMessage] = field(default_factory=list)
    status: StatusBanner | None = None
    chat_enabled: bool = False
    chat_busy: bool = False


class AppController:
    """Root controller for the Streamlit UI.

    Args:
        client: Backend client used for the transcription and chat relays.
        history: Client-side transcription history.
        max_upload_bytes: Upload size limit enforced before any network call.
    """

    def __init__(self, client: RelayClient, history: HistoryStore, max_upload_bytes: int) -> None:
        self.client = client
        self.history = history
        self._max_upload_bytes = max_upload_bytes
        self.state = AppState(chat_enabled=len(history) > 0)
        self._handlers: dict[UIEvent, Callable[..., Any]] = {}

        self.register(UIEvent.select_file, self._on_select_file)
        self.register(UIEvent.transcribe, self._on_transcribe)
        self.register(UIEvent.clear_transcript, self._on_clear_transcript)
        self.register(UIEvent.select_history, self._on_select_history)
        self.register(UIEvent.clear_history, self._on_clear_history)
        self.register(UIEvent.change_search, self._on_change_search)
        self.register(UIEvent.send_message, self._on_send_message)

    # -- dispatch --

    def register(self, event: UIEvent, handler: Callable[..., Any]) -> None:
        self._handlers[event] = handler

    def dispatch(self, event: UIEvent, **payload) -> Any:
        """Run the handler registered for ``event`` and return its result."""
        handler = self._handlers.get(event)
        if handler is None:
            raise KeyError(f"No handler registered for {event}")
        logger.debug("Dispatching %s", event)
        return handler(**payload)

    # -- derived state --

    @property
    def has_transcripts(self) -> bool:
        return self.state.current is not None or len(self.history) > 0

    @property
    def can_chat(self) -> bool:
        return self.state.chat_enabled and self.has_transcripts and not self.state.chat_busy

    def chat_context(self) -> str:
        """All history entries as context, falling back to the current transcript."""
        context = self.history.as_context()
        if context:
            return context
        return self.state.current.text if self.state.current else ""

    # -- handlers --

    def _on_select_file(self, name: str, data: bytes, mime_type: str | None = None) -> bool:
        """Validate and load a file. Returns False if it was rejected."""
        try:
            validate_audio_upload(name, mime_type, len(data), self._max_upload_bytes)
        except ValidationError as exc:
            self.state.status = StatusBanner(exc.detail, "error")
            return False

        self.state.audio = SelectedAudio(name=name, data=data, mime_type=mime_type)
        self.state.phase = UploadPhase.file_selected
        self.state.status = StatusBanner(f"Audio file loaded: {name}", "success")
        return True

    def _on_transcribe(self) -> TranscriptionResult | None:
        audio = self.state.audio
        if audio is None:
            return None

        self.state.phase = UploadPhase.uploading
        try:
            result = self.client.transcribe(audio.name, audio.data, audio.mime_type)
        except APIError as exc:
            logger.warning("Transcription of %s failed: %s", audio.name, exc.message)
            self.state.phase = UploadPhase.upload_failed
            if exc.category == "http":
                self.state.status = StatusBanner(f"Error: {exc.message}", "error")
            else:
                self.state.status = StatusBanner(f"Network error: {exc.message}", "error")
            return None

        transcript = TranscriptionResult(
            text=result["transcription"],
            filename=result["filename"],
            is_mock=bool(result.get("mock", False)),
        )
        self.state.current = transcript
        self.state.selected_history_id = None
        self.state.phase = UploadPhase.transcript_ready
        self.state.status = StatusBanner(f"Successfully transcribed: {transcript.filename}", "success")
        self.history.add(transcript.filename, transcript.text)
        self.state.chat_enabled = True
        return transcript

    def _on_clear_transcript(self) -> None:
        # The conversation log is kept on purpose.
        self.state.current = None
        self.state.audio = None
        self.state.selected_history_id = None
        self.state.phase = UploadPhase.empty
        self.state.status = None
        self.state.chat_enabled = False

    def _on_select_history(self, entry_id: int) -> FileHistoryEntry | None:
        entry = self.history.get(entry_id)
        if entry is None:
            return None
        # Switching files keeps the conversation going.
        self.state.current = TranscriptionResult(text=entry.transcript, filename=entry.name)
        self.state.audio = None
        self.state.selected_history_id = entry.id
        self.state.phase = UploadPhase.transcript_ready
        self.state.status = StatusBanner(f"Loaded: {entry.name}", "success")
        self.state.chat_enabled = True
        return entry

    def _on_clear_history(self) -> None:
        self.history.clear()
        self.state.selected_history_id = None
        if self.state.current is None:
            self.state.chat_enabled = False

    def _on_change_search(self, term: str) -> None:
        self.state.search_term = term.strip()

    def _on_send_message(self, message: str) -> ChatMessage | None:
        """Send one chat message. Returns None when sending is not allowed."""
        message = message.strip()
        if not message or not self.can_chat:
            return None

        self.state.messages.append(ChatMessage(content=message, sender=Sender.user))
        self.state.chat_busy = True
        try:
            result = self.client.chat(message, self.chat_context())
            reply = ChatMessage(content=result["response"], sender=Sender.assistant)
        except APIError as exc:
            logger.warning("Chat request failed: %s", exc.message)
            if exc.category == "http":
                content = f"Sorry, there was an error: {exc.message or 'Please try again.'}"
            else:
                content = CHAT_NETWORK_ERROR
            reply = ChatMessage(content=content, sender=Sender.assistant)
        finally:
            self.state.chat_busy = False

        self.state.messages.append(reply)
        return reply
