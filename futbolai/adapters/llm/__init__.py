# LLM integration for the AI text-generation adapter

import logging
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from config.settings import settings
from .base import LLMProvider, NullLLMProvider

# Ensure .env is loaded for API key access
load_dotenv()

if TYPE_CHECKING:
    from .claude import ClaudeProvider

logger = logging.getLogger(__name__)

__all__ = ["LLMProvider", "NullLLMProvider", "get_llm_provider"]


def get_llm_provider() -> LLMProvider:
    """
    Get the configured LLM provider.

    Returns ClaudeProvider if ANTHROPIC_API_KEY is set and the anthropic
    package is installed. Otherwise returns NullLLMProvider, which makes
    every AI call fail as unavailable so the rest of the service runs on
    rules, stats and fallbacks only.
    """
    api_key = settings.anthropic_api_key

    if api_key:
        from .claude import ClaudeProvider
        provider = ClaudeProvider(
            api_key=api_key,
            model=settings.anthropic_model,
            timeout=settings.adapter_timeout_seconds,
        )
        if provider.is_available:
            logger.info("Using Claude LLM provider")
            return provider
        logger.warning("Claude provider not available, falling back to null")

    logger.info("Using null LLM provider (no AI summaries)")
    return NullLLMProvider()
