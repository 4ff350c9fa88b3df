"""Intermediate models produced by adapters and the reconciler."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from futbolai.adapters.base import AdapterError
from .query import Query
from .records import EntityRecord


@dataclass
class VideoReference:
    """One external highlight video."""
    url: str
    video_id: Optional[str] = None
    title: Optional[str] = None
    source: str = "fallback"  # "video-api" or "fallback"
    search_phrase: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


@dataclass
class PartialDegradation:
    """
    Non-fatal record of adapters that failed while a valid result was
    still produced. Diagnostic only, never shown as a user-facing error.
    """
    failures: List[AdapterError] = field(default_factory=list)

    @property
    def sources(self) -> List[str]:
        return [f.source for f in self.failures]

    def __bool__(self) -> bool:
        return bool(self.failures)


@dataclass
class ReconciledResult:
    """Merged output of one resolution, before wire formatting."""
    query: Query
    entity_field: Optional[str]  # "playerInfo" | "teamInfo" | "worldCupInfo" | None
    entity: Optional[EntityRecord]
    analysis: str
    video: Optional[VideoReference] = None
    sources: Dict[str, str] = field(default_factory=dict)  # "teamInfo.coach" -> "stats-api"
    ai_confidence: Optional[float] = None
    degradation: PartialDegradation = field(default_factory=PartialDegradation)
    success: bool = True
    from_cache: bool = False
