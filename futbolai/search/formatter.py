"""Response formatting for search results."""

from dataclasses import asdict, fields
from typing import Any, Dict, Optional

from futbolai.adapters.youtube import fallback_video
from futbolai.i18n import translate
from .models.envelope import SearchEnvelope
from .models.query import FIELD_TO_TYPE, Query
from .models.records import EntityRecord, PlayerStats, wire_key
from .models.results import ReconciledResult

UNKNOWN = "Unknown"

# Counters that default to zero instead of "Unknown"
COUNTER_FIELDS = ("total_honours",)


def compute_confidence(
    classification: float,
    ai_reported: Optional[float],
    degraded: bool,
) -> float:
    """
    Blend classification confidence with the AI-reported score.

    Halved when any adapter degraded; always within 0..1.
    """
    score = classification if ai_reported is None else (classification + ai_reported) / 2
    if degraded:
        score /= 2
    return round(max(0.0, min(score, 1.0)), 2)


def record_to_wire(record: EntityRecord) -> Dict[str, Any]:
    """
    Convert an entity record to a camelCase dict with display defaults.

    Lists default to [], player stat counters to 0, other scalars to
    "Unknown".
    """
    wire: Dict[str, Any] = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, PlayerStats):
            value = {k: v if v is not None else 0 for k, v in asdict(value).items()}
        elif isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        elif value is None:
            value = 0 if f.name in COUNTER_FIELDS else UNKNOWN
        wire[wire_key(f.name)] = value
    return wire


class ResponseFormatter:
    """
    Formats reconciled results into SearchEnvelope objects.

    Re-asserts the single-entity rule regardless of what the reconciler
    produced.
    """

    def format(self, query: Query, result: ReconciledResult, language: str = "en") -> SearchEnvelope:
        """
        Format a reconciled result into a SearchEnvelope.

        Args:
            query: The classified query
            result: Output of ResultReconciler.resolve
            language: Response language

        Returns:
            SearchEnvelope with exactly one entity field on success
        """
        entity_fields: Dict[str, Optional[Dict[str, Any]]] = {
            "playerInfo": None,
            "teamInfo": None,
            "worldCupInfo": None,
        }

        entity_field = result.entity_field if result.success else None
        if entity_field and result.entity is None:
            entity_field = None
        if entity_field:
            entity_fields[entity_field] = record_to_wire(result.entity)
            wire_type = FIELD_TO_TYPE[entity_field].wire_type
        else:
            wire_type = query.query_type.wire_type

        if result.success:
            confidence = compute_confidence(
                query.confidence,
                result.ai_confidence,
                bool(result.degradation),
            )
        else:
            confidence = 0.0

        return SearchEnvelope(
            success=result.success,
            query=query.raw_text,
            type=wire_type,
            analysis=result.analysis,
            player_info=entity_fields["playerInfo"],
            team_info=entity_fields["teamInfo"],
            world_cup_info=entity_fields["worldCupInfo"],
            video_url=result.video.url if result.video else fallback_video(query.raw_text).url,
            confidence=confidence,
            language=language,
            sources=dict(result.sources),
            degraded=[e.to_dict() for e in result.degradation.failures],
        )


def format_response(query: Query, result: ReconciledResult, language: str = "en") -> SearchEnvelope:
    """Convenience function to format a response."""
    formatter = ResponseFormatter()
    return formatter.format(query, result, language)


def error_envelope(
    raw_query: str,
    language: str = "en",
    message_key: str = "search.failed",
    error: Optional[str] = None,
) -> SearchEnvelope:
    """
    Fallback body for total upstream failure or unexpected errors.

    Always carries a non-empty analysis and a fallback video.
    """
    return SearchEnvelope(
        success=False,
        query=raw_query,
        type="error",
        analysis=translate(message_key, language, query=raw_query),
        video_url=fallback_video(raw_query).url,
        confidence=0.0,
        language=language,
        sources={"analysis": "fallback", "videoUrl": "fallback"},
        error=error,
    )
