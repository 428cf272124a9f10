"""Azure OpenAI Whisper STT implementation.

Posts the spooled audio file as multipart form data to a Whisper
``audio/transcriptions`` or ``audio/translations`` deployment and returns the
plain-text result.
"""

import asyncio
import logging
from pathlib import Path

import httpx

from src.core.config import get_settings
from src.core.exceptions import UpstreamTimeoutError
from src.services.transcription.base import BaseSTT
from src.services.upstream import raise_for_upstream

logger = logging.getLogger(__name__)


class AzureWhisperSTT(BaseSTT):
    """Speech-to-text provider backed by a hosted Whisper endpoint.

    Args:
        endpoint: Full deployment URL including ``api-version``.
        api_key: Key sent in the ``api-key`` header.
        timeout: Request timeout in seconds.
        settings: Optional Settings instance (defaults to get_settings()).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        settings=None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._endpoint = endpoint or self._settings.transcription_endpoint
        self._api_key = api_key or self._settings.transcription_api_key
        self._timeout = timeout if timeout is not None else self._settings.request_timeout
        self._transport = transport

    async def transcribe(self, audio_path: str, **kwargs) -> str:
        """Send the audio file to the Whisper deployment.

        Args:
            audio_path: Path to the spooled upload.
            **kwargs: Optional keys: filename, content_type.

        Returns:
            The transcription text as returned by the service.
        """
        filename = kwargs.get("filename") or Path(audio_path).name
        content_type = kwargs.get("content_type") or "application/octet-stream"

        audio = await asyncio.to_thread(Path(audio_path).read_bytes)

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self._endpoint,
                    headers={"api-key": self._api_key},
                    files={"file": (filename, audio, content_type)},
                    data={"response_format": "text"},
                )
            except httpx.TimeoutException as exc:
                logger.warning("Whisper request timed out after %ss: %s", self._timeout, exc)
                raise UpstreamTimeoutError(f"Whisper request timed out: {exc}") from exc

        raise_for_upstream(response, "transcription")
        return response.text.strip()
