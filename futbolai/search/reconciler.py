"""
Result reconciliation across the AI, stats and video adapters.

Fans out to every adapter a query needs, keeps exactly one entity field,
merges canonical fields by source precedence (stats over AI over rules)
and guarantees a minimum analysis length.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from futbolai.adapters.base import (
    AdapterErrorKind,
    AdapterResult,
    DataAdapter,
    SourceTag,
)
from futbolai.adapters.youtube import fallback_video
from futbolai.errors import AllSourcesUnavailable
from futbolai.i18n import translate
from .field_map import ENVELOPE_FIELD_TABLES, map_fields, merge_by_precedence
from .models.query import ENTITY_FIELD_PRIORITY, FIELD_TO_TYPE, Query, QueryType
from .models.records import record_from_fields, wire_key
from .models.results import PartialDegradation, ReconciledResult, VideoReference

logger = logging.getLogger(__name__)

MIN_ANALYSIS_LENGTH = 160

# Context keywords appended to the entity name for the video search
VIDEO_CONTEXT = {
    QueryType.PLAYER: "goals and skills",
    QueryType.TEAM: "best moments",
    QueryType.TOURNAMENT: "",
    QueryType.GENERAL: "",
}


def select_entity_field(populated: Iterable[str], query_type: QueryType) -> Optional[str]:
    """
    Pick the single entity field to keep.

    The field matching the query type wins; otherwise the first populated
    one in the fixed order team > player > tournament. General queries
    keep none.
    """
    if query_type == QueryType.GENERAL:
        return None
    populated = set(populated)
    expected = query_type.envelope_field
    if expected in populated:
        return expected
    for field_name in ENTITY_FIELD_PRIORITY:
        if field_name in populated:
            return field_name
    return expected


def video_phrase(query: Query) -> str:
    """Entity name plus type-specific context keywords."""
    if query.query_type == QueryType.TOURNAMENT:
        return f"FIFA World Cup {query.year}" if query.year else "FIFA World Cup"
    context = VIDEO_CONTEXT.get(query.query_type, "")
    return f"{query.display_name} {context}".strip()


def ensure_min_length(
    text: str,
    query: Query,
    language: str,
    min_length: int = MIN_ANALYSIS_LENGTH,
) -> str:
    """Pad a narrative with a templated continuation up to min_length."""
    text = (text or "").strip()
    if len(text) >= min_length:
        return text

    continuation = translate(
        f"analysis.{query.query_type.value}",
        language,
        name=query.display_name,
    )
    while len(text) < min_length:
        text = (text + continuation).strip()
    return text


class ResultReconciler:
    """
    Merges adapter outputs into one ReconciledResult.

    Adapters are injected so tests can pass fakes.
    """

    def __init__(
        self,
        ai_adapter: DataAdapter,
        stats_adapter: DataAdapter,
        video_adapter: DataAdapter,
        min_analysis_length: int = MIN_ANALYSIS_LENGTH,
    ):
        self.ai_adapter = ai_adapter
        self.stats_adapter = stats_adapter
        self.video_adapter = video_adapter
        self.min_analysis_length = min_analysis_length

    async def _guarded(self, adapter: DataAdapter, term: str, **options: Any) -> AdapterResult:
        """Run one adapter call; anything it raises becomes a typed failure."""
        try:
            return await adapter.fetch(term, **options)
        except Exception as e:
            logger.exception(f"Adapter {adapter.source_name} raised for '{term}'")
            return AdapterResult.failure(adapter.source_name, AdapterErrorKind.UNAVAILABLE, str(e))

    async def _fan_out(
        self,
        query: Query,
        language: str,
    ) -> Tuple[AdapterResult, Optional[AdapterResult], AdapterResult]:
        """Call AI, stats (teams only) and video concurrently."""
        term = query.display_name
        calls = [
            self._guarded(
                self.ai_adapter,
                term,
                query_type=query.query_type,
                language=language,
                year=query.year,
            ),
            self._guarded(self.video_adapter, video_phrase(query)),
        ]
        if query.query_type == QueryType.TEAM:
            calls.append(self._guarded(self.stats_adapter, term))

        results = await asyncio.gather(*calls)
        ai_result, video_result = results[0], results[1]
        stats_result = results[2] if len(results) > 2 else None
        return ai_result, stats_result, video_result

    def _fallback_video(self, query: Query) -> Optional[VideoReference]:
        """Static-table video, or None if even that cannot be produced."""
        try:
            return fallback_video(video_phrase(query))
        except Exception:
            logger.exception(f"Fallback video lookup failed for '{query.raw_text}'")
            return None

    def _stated_values(self, query: Query, entity_field: str) -> Dict[str, Any]:
        """Facts the user typed; these outrank every adapter."""
        if entity_field == "worldCupInfo" and query.year:
            return {"year": query.year}
        return {}

    def _rules_values(self, query: Query, entity_field: str) -> Dict[str, Any]:
        """Lowest-precedence values derived from the query itself."""
        if FIELD_TO_TYPE.get(entity_field) == query.query_type:
            return {"name": query.display_name}
        return {}

    def _merge_entity(
        self,
        query: Query,
        entity_field: str,
        ai_sections: Dict[str, Dict[str, Any]],
        stats_values: Optional[Dict[str, Any]],
    ):
        """Merge canonical fields for the kept entity field."""
        layers: List[Tuple[str, Dict[str, Any]]] = [
            (SourceTag.RULES.value, self._stated_values(query, entity_field)),
        ]

        if entity_field == "teamInfo" and stats_values:
            layers.append((SourceTag.STATS.value, stats_values))

        if entity_field in ai_sections:
            ai_values, ai_used = map_fields(
                ai_sections[entity_field],
                ENVELOPE_FIELD_TABLES[entity_field],
            )
            logger.debug(f"AI fields for {entity_field}: {ai_used}")
            layers.append((SourceTag.AI.value, ai_values))

        layers.append((SourceTag.RULES.value, self._rules_values(query, entity_field)))

        merged, attribution = merge_by_precedence(layers)
        entity = record_from_fields(entity_field, merged)
        sources = {
            f"{entity_field}.{wire_key(name)}": tag
            for name, tag in attribution.items()
            if hasattr(entity, name)
        }
        return entity, sources

    async def resolve(self, query: Query, language: str = "en") -> ReconciledResult:
        """
        Resolve a classified query into a reconciled result.

        Raises:
            AllSourcesUnavailable: If no data adapter succeeded and not even
                the fallback video could be produced.
        """
        ai_result, stats_result, video_result = await self._fan_out(query, language)

        data_results = [r for r in (ai_result, stats_result) if r is not None]
        failures = [r.error for r in (ai_result, stats_result, video_result) if r is not None and not r.ok]
        degradation = PartialDegradation(failures=failures)
        data_ok = any(r.ok for r in data_results)

        video = video_result.payload if video_result.ok else self._fallback_video(query)

        if not data_ok and video is None:
            logger.error(f"All sources unavailable for '{query.raw_text}'")
            raise AllSourcesUnavailable(query.raw_text, failures)

        if degradation:
            logger.info(
                f"Partial degradation for '{query.raw_text}': "
                f"{', '.join(f'{e.source}={e.kind.value}' for e in failures)}"
            )

        sources = {"videoUrl": video.source if video is not None else SourceTag.FALLBACK.value}

        if not data_ok:
            sources["analysis"] = SourceTag.FALLBACK.value
            return ReconciledResult(
                query=query,
                entity_field=None,
                entity=None,
                analysis=translate("search.unavailable", language, query=query.raw_text),
                video=video,
                sources=sources,
                degradation=degradation,
                success=False,
            )

        ai_payload = ai_result.payload if ai_result.ok else None
        ai_sections = ai_payload.populated_fields() if ai_payload is not None else {}
        stats_values = stats_result.payload if stats_result is not None and stats_result.ok else None

        populated = set(ai_sections)
        if stats_values:
            populated.add("teamInfo")
        entity_field = select_entity_field(populated, query.query_type)

        dropped = sorted(set(ai_sections) - {entity_field})
        if dropped:
            logger.info(f"Dropping extra entity fields for '{query.raw_text}': {dropped}")

        entity = None
        if entity_field:
            entity, field_sources = self._merge_entity(query, entity_field, ai_sections, stats_values)
            sources.update(field_sources)

        analysis = ai_payload.analysis if ai_payload is not None else ""
        sources["analysis"] = SourceTag.AI.value if analysis.strip() else SourceTag.RULES.value
        analysis = ensure_min_length(analysis, query, language, self.min_analysis_length)

        return ReconciledResult(
            query=query,
            entity_field=entity_field,
            entity=entity,
            analysis=analysis,
            video=video,
            sources=sources,
            ai_confidence=ai_payload.confidence_score if ai_payload is not None else None,
            degradation=degradation,
            success=True,
        )

