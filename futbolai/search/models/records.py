"""Entity record models (player, team, tournament)."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union


@dataclass
class PlayerStats:
    """Headline career counters for a player."""
    goals: Optional[int] = None
    assists: Optional[int] = None
    appearances: Optional[int] = None


@dataclass
class PlayerRecord:
    """Player entity. Every field is optional."""
    name: Optional[str] = None
    position: Optional[str] = None
    nationality: Optional[str] = None
    current_club: Optional[str] = None
    age: Optional[int] = None
    stats: PlayerStats = field(default_factory=PlayerStats)
    market_value: Optional[str] = None
    achievements: List[str] = field(default_factory=list)


@dataclass
class TeamRecord:
    """Team entity (club or national team). Every field is optional."""
    name: Optional[str] = None
    team_type: Optional[str] = None  # "club" | "national"
    country: Optional[str] = None
    coach: Optional[str] = None
    stadium: Optional[str] = None
    league: Optional[str] = None
    founded: Optional[int] = None
    ranking: Optional[str] = None
    achievements: List[str] = field(default_factory=list)
    key_players: List[str] = field(default_factory=list)
    trophies: Dict[str, int] = field(default_factory=dict)  # Honours buckets (stats API)
    total_honours: Optional[int] = None


@dataclass
class TournamentRecord:
    """Tournament entity (World Cup edition). Every field is optional."""
    year: Optional[int] = None
    host: Optional[str] = None
    details: Optional[str] = None
    qualified_teams: List[str] = field(default_factory=list)
    venues: List[str] = field(default_factory=list)


EntityRecord = Union[PlayerRecord, TeamRecord, TournamentRecord]

RECORD_TYPES = {
    "playerInfo": PlayerRecord,
    "teamInfo": TeamRecord,
    "worldCupInfo": TournamentRecord,
}


def record_from_fields(envelope_field: str, values: Dict[str, Any]) -> EntityRecord:
    """
    Build a record from canonical field values.

    Unknown keys are ignored so partially mapped payloads never fail.
    """
    record_cls = RECORD_TYPES[envelope_field]
    known = {f.name for f in fields(record_cls)}
    kwargs = {k: v for k, v in values.items() if k in known and v is not None}

    if record_cls is PlayerRecord and isinstance(kwargs.get("stats"), dict):
        stats = kwargs["stats"]
        kwargs["stats"] = PlayerStats(
            goals=stats.get("goals"),
            assists=stats.get("assists"),
            appearances=stats.get("appearances"),
        )

    return record_cls(**kwargs)


def wire_key(field_name: str) -> str:
    """camelCase wire name for a record field ("current_club" -> "currentClub")."""
    head, *rest = field_name.split("_")
    return head + "".join(part.title() for part in rest)
