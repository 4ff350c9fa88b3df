"""Query classification models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class QueryType(str, Enum):
    """Supported query types."""
    PLAYER = "player"
    TEAM = "team"
    TOURNAMENT = "tournament"
    GENERAL = "general"

    @property
    def wire_type(self) -> str:
        """Type string used in the response envelope."""
        if self is QueryType.TOURNAMENT:
            return "worldCup"
        return self.value

    @property
    def envelope_field(self) -> Optional[str]:
        """Entity field of the envelope this type populates."""
        return ENVELOPE_FIELDS.get(self)


ENVELOPE_FIELDS = {
    QueryType.PLAYER: "playerInfo",
    QueryType.TEAM: "teamInfo",
    QueryType.TOURNAMENT: "worldCupInfo",
}

# Fixed tie-break order when a source populates several entity fields
ENTITY_FIELD_PRIORITY = ("teamInfo", "playerInfo", "worldCupInfo")

FIELD_TO_TYPE = {field: query_type for query_type, field in ENVELOPE_FIELDS.items()}


@dataclass
class Query:
    """
    A classified search query.

    Created per request and never persisted. A GENERAL query with zero
    confidence means "unknown", not a real classification.
    """
    raw_text: str
    normalized_text: str
    query_type: QueryType
    confidence: float  # 0.0 - 1.0
    used_llm: bool = False
    matched_rule: Optional[str] = None  # Which rule matched (for debugging)
    year: Optional[int] = None  # Four-digit year mentioned in the query

    @property
    def is_unknown(self) -> bool:
        return self.query_type == QueryType.GENERAL and self.confidence == 0.0

    @property
    def display_name(self) -> str:
        """Title-cased entity name for prompts and fallbacks."""
        return " ".join(self.raw_text.split()).title()
