"""Base LLM provider abstraction for the AI text-generation adapter.

Providers only move text: prompt in, raw completion out. Prompt building,
JSON parsing, and schema checks live in the AI adapter so every provider
gets the same validation.
"""

from abc import ABC, abstractmethod

from futbolai.errors import AdapterUnavailable


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def complete(self, prompt: str, max_tokens: int) -> str:
        """
        Send a prompt and return the raw completion text.

        Raises:
            AdapterUnavailable: If the provider cannot be reached or errors.
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this LLM provider."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is configured and available."""
        pass


class NullLLMProvider(LLMProvider):
    """
    Null implementation used when no LLM is configured.

    Every call fails as unavailable, so callers drop to their
    fallback paths.
    """

    async def complete(self, prompt: str, max_tokens: int) -> str:
        raise AdapterUnavailable("No LLM provider configured")

    @property
    def provider_name(self) -> str:
        return "null"

    @property
    def is_available(self) -> bool:
        return False
