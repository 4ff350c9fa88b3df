"""Claude LLM provider for summaries, classification and fixtures."""

import logging
import os
from typing import Optional

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from futbolai.errors import AdapterUnavailable
from .base import LLMProvider

logger = logging.getLogger(__name__)


class ClaudeRateLimitError(AdapterUnavailable):
    """Raised when rate limited by Claude API."""
    pass


class ClaudeProvider(LLMProvider):
    """
    Claude LLM provider.

    Wraps anthropic.AsyncAnthropic. Rate limits are retried with
    exponential backoff; every other provider error surfaces as
    AdapterUnavailable.
    """

    # Haiku is fast and cheap for structured JSON generation
    MODEL = "claude-3-haiku-20240307"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 8.0,
    ):
        """
        Initialize the Claude provider.

        Args:
            api_key: Anthropic API key. If not provided, reads from
                     ANTHROPIC_API_KEY environment variable.
            model: Model name override
            timeout: Per-request timeout in seconds
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._model = model or self.MODEL
        self._client = None
        self._available = False

        if self._api_key:
            try:
                import anthropic
                self._client = anthropic.AsyncAnthropic(
                    api_key=self._api_key,
                    timeout=timeout,
                    max_retries=0,
                )
                self._available = True
                logger.info("Claude provider initialized successfully")
            except ImportError:
                logger.warning("anthropic package not installed - AI summaries disabled")

    @property
    def provider_name(self) -> str:
        return "claude"

    @property
    def is_available(self) -> bool:
        return self._available and self._client is not None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(ClaudeRateLimitError),
        reraise=True,
    )
    async def complete(self, prompt: str, max_tokens: int) -> str:
        """Make a call to Claude API, retrying on rate limit errors."""
        if not self.is_available:
            raise AdapterUnavailable("Claude provider not configured")

        import anthropic

        try:
            message = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.RateLimitError as e:
            logger.warning(f"Claude rate limit hit: {e}")
            raise ClaudeRateLimitError(str(e))
        except anthropic.APIConnectionError as e:
            logger.error(f"Claude connection error: {e}")
            raise AdapterUnavailable(f"Claude connection error: {e}")
        except anthropic.APIStatusError as e:
            logger.error(f"Claude API error: {e.status_code} - {e.message}")
            raise AdapterUnavailable(f"Claude API error: {e.status_code}")

        if not message.content:
            return ""
        return message.content[0].text
