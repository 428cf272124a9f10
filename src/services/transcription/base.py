"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the relay layer.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio_path: str, **kwargs) -> str:
        """Transcribe an audio file to text.

        Args:
            audio_path: Path to the spooled audio file (WAV or MP3).
            **kwargs: Provider-specific options (filename, content_type, etc.).

        Returns:
            The transcribed text.

        Raises:
            UpstreamTimeoutError: The provider did not answer in time.
            UpstreamError: The provider answered with a non-2xx status.
        """
