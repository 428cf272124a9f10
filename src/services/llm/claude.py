"""
Claude LLM provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``) to interact with
the Claude API. The leading system message is sent through the SDK's
dedicated ``system`` parameter.
"""

import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from src.core.config import get_settings
from src.core.exceptions import UpstreamError, UpstreamTimeoutError
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


def _status_error_message(exc: APIStatusError) -> str | None:
    """Pull ``error.message`` out of an Anthropic error body, if any."""
    body = exc.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return None


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens or settings.chat_max_tokens
        self._temperature = temperature if temperature is not None else settings.chat_temperature
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout, max_retries=0)

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Send the conversation to Claude and return the first text block.

        SDK exceptions are translated to the relay taxonomy so the chat relay
        can map them onto HTTP statuses.
        """
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        turns = [m for m in messages if m["role"] != "system"]
        temperature = kwargs.get("temperature")

        request: dict = {
            "model": self._model,
            "max_tokens": kwargs.get("max_tokens") or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "messages": turns,
        }
        if system:
            request["system"] = system

        try:
            response = await self._client.messages.create(**request)
        except APITimeoutError as exc:
            logger.warning("Claude API timeout: %s", exc)
            raise UpstreamTimeoutError(f"Claude API request timed out: {exc}") from exc
        except APIStatusError as exc:
            logger.warning("Claude API returned %s: %s", exc.status_code, exc)
            raise UpstreamError(exc.status_code, _status_error_message(exc)) from exc
        except APIConnectionError as exc:
            logger.error("Claude API connection error: %s", exc)
            raise
        return response.content[0].text
