"""Shared pytest fixtures for TranscriptChat test suite.

Provides settings pointed at a temporary upload directory, mock STT/LLM
providers, an in-memory history store, and an async client for the app
with the relays wired to the mocks.
"""

import struct
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.api.routes.chat import get_chat_relay
from src.api.routes.transcribe import get_transcription_relay
from src.core.config import Settings
from src.services.llm.base import BaseLLM
from src.services.relay import ChatRelay, TranscriptionRelay
from src.services.transcription.base import BaseSTT
from src.ui.history import HistoryStore, InMemoryHistoryRepository

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def upload_dir(tmp_path):
    """Temporary spool directory for uploads."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def settings(upload_dir):
    """Settings instance isolated from the environment defaults."""
    return Settings(
        upload_dir=str(upload_dir),
        max_upload_mb=1,
        transcription_endpoint="https://stt.test/transcribe",
        transcription_api_key="stt-key",
        chat_endpoint="https://chat.test/completions",
        chat_api_key="chat-key",
    )


# ---------------------------------------------------------------------------
# Provider Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider returning a fixed transcript.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface.
    """
    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = "Hello world"
    return stt


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider returning a fixed reply.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface.
    """
    llm = AsyncMock(spec=BaseLLM)
    llm.chat.return_value = "The meeting covered the quarterly roadmap."
    return llm


# ---------------------------------------------------------------------------
# App Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(settings, mock_stt, mock_llm):
    """FastAPI app whose relays use the mock providers and test settings."""
    application = create_app()
    application.dependency_overrides[get_transcription_relay] = lambda: TranscriptionRelay(
        stt=mock_stt, settings=settings
    )
    application.dependency_overrides[get_chat_relay] = lambda: ChatRelay(
        llm=mock_llm, settings=settings
    )
    return application


@pytest.fixture
async def client(app):
    """AsyncClient talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# History Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def history_repo():
    return InMemoryHistoryRepository()


@pytest.fixture
def history(history_repo):
    return HistoryStore(history_repo, limit=10)


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_wav_bytes():
    """A short valid WAV file (0.1s of silence, 16kHz, 16-bit, mono).

    Returns:
        bytes: The complete WAV file contents.
    """
    sample_rate = 16000
    frames = b"\x00\x00" * (sample_rate // 10)
    header = b"RIFF" + struct.pack("<I", 36 + len(frames)) + b"WAVE"
    fmt = b"fmt " + struct.pack("<IHHIIHH", 16, 1, 1, sample_rate, sample_rate * 2, 2, 16)
    data = b"data" + struct.pack("<I", len(frames)) + frames
    return header + fmt + data
