"""
Abstract base class for LLM providers.

All chat backends (hosted chat-completions, Claude, Ollama) must implement
this interface, enabling provider-agnostic logic in the chat relay.
"""

from abc import ABC, abstractmethod


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def chat(self, messages: list[dict[str, str]], **kwargs) -> str:
        """Run one chat completion.

        Args:
            messages: Ordered ``{"role", "content"}`` dicts; a leading
                ``system`` message carries the instructions.
            **kwargs: Provider-specific options (temperature, max_tokens).

        Returns:
            The assistant's reply text.

        Raises:
            UpstreamTimeoutError: The provider did not answer in time.
            UpstreamError: The provider answered with an error status.
        """
