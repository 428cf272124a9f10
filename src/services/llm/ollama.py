"""
Ollama LLM provider implementation.

Uses the Ollama Python SDK (``ollama.AsyncClient``) to interact with a
locally running Ollama server.
"""

import logging

import httpx
from ollama import AsyncClient, ResponseError

from src.core.config import get_settings
from src.core.exceptions import UpstreamError, UpstreamTimeoutError
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Ollama local LLM provider.

    Connects to a locally running Ollama server via its REST API.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the Ollama LLM provider.

        Args:
            base_url: Ollama server URL (falls back to settings if not provided).
            model: Model name to use (e.g. "llama3.2").
            max_tokens: Upper bound on generated tokens (``num_predict``).
            temperature: Sampling temperature for text generation (0.0–1.0).
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._max_tokens = max_tokens or settings.chat_max_tokens
        self._temperature = temperature if temperature is not None else settings.chat_temperature
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._client = AsyncClient(host=self._base_url, timeout=self._timeout)

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Send a chat request to the Ollama server."""
        temperature = kwargs.get("temperature")
        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={
                    "temperature": temperature if temperature is not None else self._temperature,
                    "num_predict": kwargs.get("max_tokens") or self._max_tokens,
                },
            )
        except httpx.TimeoutException as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise UpstreamTimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ResponseError as exc:
            logger.warning("Ollama returned %s: %s", exc.status_code, exc.error)
            # status_code is -1 when the SDK could not read one from the response
            status = exc.status_code if exc.status_code >= 400 else 502
            raise UpstreamError(status, exc.error or None) from exc
        return response.message.content
