"""
Azure OpenAI chat-completions provider.

Talks to any OpenAI-style ``/chat/completions`` deployment over plain
``httpx``; the deployment is selected by the endpoint URL.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.exceptions import UpstreamTimeoutError
from src.services.llm.base import BaseLLM
from src.services.upstream import raise_for_upstream

logger = logging.getLogger(__name__)


class AzureChatLLM(BaseLLM):
    """Chat-completions provider authenticated with an ``api-key`` header."""

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._endpoint = endpoint or settings.chat_endpoint
        self._api_key = api_key or settings.chat_api_key
        self._max_tokens = max_tokens or settings.chat_max_tokens
        self._temperature = temperature if temperature is not None else settings.chat_temperature
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Post the messages and return ``choices[0].message.content``."""
        temperature = kwargs.get("temperature")
        payload = {
            "messages": messages,
            "max_tokens": kwargs.get("max_tokens") or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self._endpoint,
                    headers={"api-key": self._api_key},
                    json=payload,
                )
            except httpx.TimeoutException as exc:
                logger.warning("Chat completion timed out after %ss: %s", self._timeout, exc)
                raise UpstreamTimeoutError(f"Chat completion timed out: {exc}") from exc

        raise_for_upstream(response, "chat")
        data = response.json()
        return data["choices"][0]["message"]["content"]
