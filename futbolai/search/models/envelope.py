"""Response envelope - single wire contract for the search endpoint."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with a Z suffix."""
    return datetime.utcnow().isoformat() + "Z"


@dataclass
class SearchEnvelope:
    """
    Unified response envelope for all search queries.

    Exactly one of player_info / team_info / world_cup_info is set on a
    successful entity envelope; general and error envelopes carry none.
    """
    success: bool
    query: str
    type: str  # "player" | "team" | "worldCup" | "general" | "error"
    analysis: str
    player_info: Optional[Dict[str, Any]] = None
    team_info: Optional[Dict[str, Any]] = None
    world_cup_info: Optional[Dict[str, Any]] = None
    video_url: Optional[str] = None
    confidence: float = 0.0
    language: str = "en"
    timestamp: str = ""

    # Diagnostics
    sources: Dict[str, str] = field(default_factory=dict)
    degraded: List[Dict[str, str]] = field(default_factory=list)
    cache_source: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = utc_timestamp()

    @property
    def entity_fields(self) -> Dict[str, Optional[Dict[str, Any]]]:
        return {
            "playerInfo": self.player_info,
            "teamInfo": self.team_info,
            "worldCupInfo": self.world_cup_info,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "success": self.success,
            "query": self.query,
            "timestamp": self.timestamp,
            "type": self.type,
            "playerInfo": self.player_info,
            "teamInfo": self.team_info,
            "worldCupInfo": self.world_cup_info,
            "analysis": self.analysis,
            "videoUrl": self.video_url,
            "confidence": self.confidence,
            "language": self.language,
            "sources": self.sources,
            "degraded": self.degraded,
        }
        if self.cache_source:
            result["cacheSource"] = self.cache_source
        if self.error:
            result["error"] = self.error
        return result
