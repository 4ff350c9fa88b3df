"""
2026 World Cup group stage fixtures.

The AI adapter is asked for the fixtures document first. When it fails or
returns something that does not validate, a locally generated document
with the same shape is served instead. The generated one is reproducible
for a given seed.
"""

import logging
import random
from datetime import date, datetime, timedelta
from itertools import combinations
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from futbolai.adapters.base import SourceTag

logger = logging.getLogger(__name__)


# ============================================================================
# Document Schemas
# ============================================================================

class TournamentInfo(BaseModel):
    name: str = "2026 FIFA World Cup"
    dates: str = "June 11 - July 19, 2026"
    hosts: List[str] = Field(default_factory=lambda: ["United States", "Canada", "Mexico"])
    teams: int = 48
    groups: int = 12
    matches: int = 104


class GroupTeam(BaseModel):
    """One row of a group table."""
    name: str
    code: str
    group_points: int = Field(0, alias="groupPoints")
    goal_difference: int = Field(0, alias="goalDifference")
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0

    class Config:
        populate_by_name = True


class Group(BaseModel):
    group_name: str = Field(..., alias="groupName")
    teams: List[GroupTeam]

    class Config:
        populate_by_name = True


class Match(BaseModel):
    id: str
    group: str
    home_team: str = Field(..., alias="homeTeam")
    away_team: str = Field(..., alias="awayTeam")
    date: str
    venue: Optional[str] = None
    city: Optional[str] = None
    home_score: Optional[int] = Field(None, alias="homeScore")
    away_score: Optional[int] = Field(None, alias="awayScore")
    status: str = "scheduled"

    class Config:
        populate_by_name = True


class HostCity(BaseModel):
    city: str
    stadium: str
    country: str


class FixturesDocument(BaseModel):
    """Group stage document served by the /worldcup endpoint."""
    source: str = SourceTag.AI.value
    last_updated: str = Field(default_factory=lambda: datetime.utcnow().isoformat() + "Z", alias="lastUpdated")
    tournament: TournamentInfo = Field(default_factory=TournamentInfo)
    groups: List[Group] = Field(..., min_length=1)
    matches: List[Match] = Field(default_factory=list)
    qualified_teams: List[str] = Field(default_factory=list, alias="qualifiedTeams")
    host_cities: List[HostCity] = Field(default_factory=list, alias="hostCities")

    class Config:
        populate_by_name = True
        extra = "ignore"

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ============================================================================
# Fallback Data
# ============================================================================

FALLBACK_TEAMS: List[Tuple[str, str]] = [
    ("Argentina", "ARG"), ("Brazil", "BRA"), ("France", "FRA"), ("England", "ENG"),
    ("Germany", "GER"), ("Spain", "ESP"), ("Portugal", "POR"), ("Netherlands", "NED"),
    ("Italy", "ITA"), ("Belgium", "BEL"), ("Croatia", "CRO"), ("Morocco", "MAR"),
    ("United States", "USA"), ("Mexico", "MEX"), ("Canada", "CAN"), ("Japan", "JPN"),
    ("South Korea", "KOR"), ("Australia", "AUS"), ("Senegal", "SEN"), ("Uruguay", "URU"),
    ("Colombia", "COL"), ("Egypt", "EGY"), ("Jamaica", "JAM"), ("Saudi Arabia", "KSA"),
]

FALLBACK_HOST_CITIES = [
    HostCity(city="New York/New Jersey", stadium="MetLife Stadium", country="USA"),
    HostCity(city="Los Angeles", stadium="SoFi Stadium", country="USA"),
    HostCity(city="Mexico City", stadium="Estadio Azteca", country="Mexico"),
    HostCity(city="Toronto", stadium="BMO Field", country="Canada"),
]

FALLBACK_GROUP_COUNT = 6
TEAMS_PER_GROUP = 4
GROUP_STAGE_START = date(2026, 6, 11)


def _standings(teams: List[Tuple[str, str]], matches: List[Match]) -> List[GroupTeam]:
    """Group table computed from played matches, sorted by points then goal difference."""
    table = {name: GroupTeam(name=name, code=code) for name, code in teams}

    for match in matches:
        if match.home_score is None or match.away_score is None:
            continue
        home, away = table[match.home_team], table[match.away_team]
        for row, scored, conceded in (
            (home, match.home_score, match.away_score),
            (away, match.away_score, match.home_score),
        ):
            row.played += 1
            row.goal_difference += scored - conceded
            if scored > conceded:
                row.won += 1
                row.group_points += 3
            elif scored == conceded:
                row.drawn += 1
                row.group_points += 1
            else:
                row.lost += 1

    return sorted(
        table.values(),
        key=lambda row: (-row.group_points, -row.goal_difference, row.name),
    )


def generate_fallback_fixtures(seed: int = 2026) -> FixturesDocument:
    """
    Build a group stage document without any provider.

    Six groups of four play a round robin with random scores drawn from a
    seeded generator; standings are computed from those scores, so the
    same seed always yields the same document.
    """
    rng = random.Random(seed)
    groups: List[Group] = []
    matches: List[Match] = []
    day = 0

    for g in range(FALLBACK_GROUP_COUNT):
        letter = chr(ord("A") + g)
        group_name = f"Group {letter}"
        teams = FALLBACK_TEAMS[g * TEAMS_PER_GROUP:(g + 1) * TEAMS_PER_GROUP]

        group_matches = []
        for n, (home, away) in enumerate(combinations(teams, 2), start=1):
            venue = FALLBACK_HOST_CITIES[(g + n) % len(FALLBACK_HOST_CITIES)]
            group_matches.append(Match(
                id=f"{letter}{n}",
                group=group_name,
                home_team=home[0],
                away_team=away[0],
                date=(GROUP_STAGE_START + timedelta(days=day)).isoformat(),
                venue=venue.stadium,
                city=venue.city,
                home_score=rng.randint(0, 3),
                away_score=rng.randint(0, 3),
                status="simulated",
            ))
            day = (day + 1) % 17

        groups.append(Group(group_name=group_name, teams=_standings(teams, group_matches)))
        matches.extend(group_matches)

    return FixturesDocument(
        source=SourceTag.FALLBACK.value,
        last_updated=datetime(2026, 6, 11).isoformat() + "Z",
        tournament=TournamentInfo(),
        groups=groups,
        matches=matches,
        qualified_teams=[name for name, _ in FALLBACK_TEAMS],
        host_cities=list(FALLBACK_HOST_CITIES),
    )


# ============================================================================
# Service
# ============================================================================

class WorldCupService:
    """Serves the fixtures document, falling back to generated data."""

    def __init__(self, ai_adapter=None, seed: int = 2026):
        self.ai_adapter = ai_adapter
        self.seed = seed

    async def get_fixtures(self) -> Tuple[FixturesDocument, bool]:
        """
        Returns:
            (document, from_fallback)
        """
        if self.ai_adapter is None or not self.ai_adapter.is_available:
            logger.info("No AI provider for fixtures, using generated data")
            return generate_fallback_fixtures(self.seed), True

        result = await self.ai_adapter.fixtures()
        if not result.ok:
            logger.warning(f"AI fixtures failed ({result.error.kind.value}), using generated data")
            return generate_fallback_fixtures(self.seed), True

        try:
            document = FixturesDocument.model_validate(result.payload)
        except ValidationError as e:
            logger.warning(f"AI fixtures did not validate, using generated data: {e}")
            return generate_fallback_fixtures(self.seed), True

        return document, False
