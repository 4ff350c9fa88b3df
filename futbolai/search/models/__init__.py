# Search models
from .query import Query, QueryType, ENVELOPE_FIELDS, ENTITY_FIELD_PRIORITY
from .records import PlayerRecord, PlayerStats, TeamRecord, TournamentRecord, EntityRecord
from .results import VideoReference, PartialDegradation, ReconciledResult
from .envelope import SearchEnvelope

__all__ = [
    "Query",
    "QueryType",
    "ENVELOPE_FIELDS",
    "ENTITY_FIELD_PRIORITY",
    "PlayerRecord",
    "PlayerStats",
    "TeamRecord",
    "TournamentRecord",
    "EntityRecord",
    "VideoReference",
    "PartialDegradation",
    "ReconciledResult",
    "SearchEnvelope",
]
