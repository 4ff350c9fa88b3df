"""
Main search pipeline orchestrator.

This module coordinates the full search flow:
1. Validate query
2. Classify query type
3. Look up / populate the cache (single-flight per key)
4. Reconcile adapter results
5. Format response
6. Localize entity display strings
7. Log query (if enabled)
"""

import asyncio
import dataclasses
import logging
import time
from typing import Any, Optional

from futbolai.adapters.base import SourceTag
from futbolai.cache import CacheManager, CacheSource, get_cache_manager, get_category_for_query_type
from futbolai.errors import AllSourcesUnavailable, InvalidQuery
from futbolai.i18n import resolve_language, translate, translate_record
from .classifier import QueryClassifier
from .formatter import error_envelope, format_response
from .logger import log_query
from .models.envelope import SearchEnvelope
from .models.query import Query
from .models.results import ReconciledResult
from .reconciler import ResultReconciler

logger = logging.getLogger(__name__)


def cache_key_for(query: Query, language: str) -> str:
    """Cache key: "<query_type>:<normalized_term>:<language>"."""
    return f"{query.query_type.value}:{query.normalized_text}:{language}"


def is_cacheable(result: ReconciledResult) -> bool:
    """Degraded and failed results are never cached."""
    return result.success and not result.degradation


class SearchService:
    """
    Entry point for search requests.

    Collaborators are injected; build_search_service() wires the
    production ones.
    """

    def __init__(
        self,
        classifier: QueryClassifier,
        reconciler: ResultReconciler,
        cache: Optional[CacheManager] = None,
    ):
        self.classifier = classifier
        self.reconciler = reconciler
        self.cache = cache

    async def _resolve(
        self,
        query: Query,
        language: str,
        bust_cache: bool,
    ) -> ReconciledResult:
        if self.cache is None:
            return await self.reconciler.resolve(query, language)

        result, meta = await self.cache.get(
            cache_key=cache_key_for(query, language),
            fetch_fn=lambda: self.reconciler.resolve(query, language),
            category=get_category_for_query_type(query.query_type.value),
            force_refresh=bust_cache,
            should_cache=is_cacheable,
        )

        if meta.cache_source == CacheSource.FRESH.value:
            return dataclasses.replace(
                result,
                query=query,
                sources={key: SourceTag.CACHE.value for key in result.sources},
                from_cache=True,
            )
        return result

    async def _log(self, **fields: Any) -> None:
        """Write the review log entry off the event loop."""
        await asyncio.to_thread(log_query, **fields)

    async def search(
        self,
        raw_query: Optional[str],
        language: Optional[str] = "en",
        bust_cache: bool = False,
    ) -> SearchEnvelope:
        """
        Execute a search query and return a response envelope.

        Args:
            raw_query: Raw search text from the user
            language: Response language ("en" or "es")
            bust_cache: Skip cached results for this query

        Returns:
            SearchEnvelope; when no adapter returns data the envelope
            keeps the query type with success=False. Type "error" is
            reserved for a failure of the fallback video table itself.

        Raises:
            InvalidQuery: If the query is missing or blank
        """
        language = resolve_language(language)
        text = " ".join((raw_query or "").split())
        if not text:
            raise InvalidQuery(translate("search.emptyQuery", language))

        start_time = time.time()
        query = await self.classifier.classify(text)

        try:
            result = await self._resolve(query, language, bust_cache)
        except AllSourcesUnavailable as e:
            logger.error(f"Search failed for '{text}': {e}")
            await self._log(
                query=text,
                query_type=query.query_type.value,
                confidence=query.confidence,
                used_llm=query.used_llm,
                language=language,
                degraded_sources=[f.source for f in e.failures],
                from_cache=False,
                error_type="all_sources_unavailable",
                latency_ms=int((time.time() - start_time) * 1000),
            )
            return error_envelope(text, language, "search.unavailable", error="All sources unavailable")

        envelope = format_response(query, result, language)
        if result.from_cache:
            envelope.cache_source = CacheSource.FRESH.value

        if language != "en":
            envelope.player_info = translate_record(envelope.player_info, language)
            envelope.team_info = translate_record(envelope.team_info, language)
            envelope.world_cup_info = translate_record(envelope.world_cup_info, language)

        await self._log(
            query=text,
            query_type=query.query_type.value,
            confidence=query.confidence,
            used_llm=query.used_llm,
            language=language,
            degraded_sources=result.degradation.sources,
            from_cache=result.from_cache,
            error_type=None if result.success else "no_data",
            latency_ms=int((time.time() - start_time) * 1000),
        )

        return envelope


def build_search_service(cache: Optional[CacheManager] = None) -> SearchService:
    """Wire the production adapters, classifier and reconciler."""
    from config.settings import settings
    from futbolai.adapters.ai import AIAdapter
    from futbolai.adapters.llm import get_llm_provider
    from futbolai.adapters.sportsdb import SportsDbAdapter
    from futbolai.adapters.youtube import YouTubeAdapter

    cache = cache or get_cache_manager()

    ai_adapter = AIAdapter(
        provider=get_llm_provider(),
        timeout=settings.adapter_timeout_seconds,
        classify_timeout=settings.classifier_timeout_seconds,
        max_tokens=settings.anthropic_max_tokens,
    )
    stats_adapter = SportsDbAdapter(
        api_key=settings.sportsdb_api_key,
        base_url=settings.sportsdb_base_url,
        timeout=settings.adapter_timeout_seconds,
    )
    video_adapter = YouTubeAdapter(
        api_key=settings.youtube_api_key,
        base_url=settings.youtube_base_url,
        timeout=settings.adapter_timeout_seconds,
        max_attempts=settings.video_max_attempts,
        cache=cache,
    )

    return SearchService(
        classifier=QueryClassifier(ai_adapter=ai_adapter),
        reconciler=ResultReconciler(
            ai_adapter=ai_adapter,
            stats_adapter=stats_adapter,
            video_adapter=video_adapter,
            min_analysis_length=settings.min_analysis_length,
        ),
        cache=cache,
    )


# Global search service instance
_search_service: Optional[SearchService] = None


def get_search_service() -> SearchService:
    """Get or create the global search service."""
    global _search_service
    if _search_service is None:
        _search_service = build_search_service()
    return _search_service
