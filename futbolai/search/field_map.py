"""
Explicit field mapping tables.

Upstream payloads name the same fact in many ways ("coach", "currentCoach",
"manager", "strManager"). Each table lists (source_field, priority) pairs
per canonical field; the lowest priority number holding a usable value
wins. Values are coerced to the canonical type on the way in.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Tuple

FieldTable = Dict[str, List[Tuple[str, int]]]


PLAYER_FIELDS: FieldTable = {
    "name": [("name", 0), ("fullName", 1), ("playerName", 2)],
    "position": [("position", 0), ("role", 1)],
    "nationality": [("nationality", 0), ("country", 1), ("nation", 2)],
    "current_club": [("currentClub", 0), ("current_club", 1), ("currentTeam", 2), ("club", 3), ("team", 4)],
    "age": [("age", 0)],
    "stats": [("stats", 0), ("statistics", 1), ("careerStats", 2)],
    "market_value": [("marketValue", 0), ("market_value", 1), ("value", 2)],
    "achievements": [("achievements", 0), ("majorAchievements", 1), ("trophies", 2), ("honours", 3)],
}

TEAM_FIELDS: FieldTable = {
    "name": [("name", 0), ("teamName", 1), ("team", 2)],
    "team_type": [("type", 0), ("teamType", 1)],
    "country": [("country", 0), ("nation", 1)],
    "coach": [("coach", 0), ("currentCoach", 1), ("manager", 2), ("headCoach", 3)],
    "stadium": [("stadium", 0), ("homeStadium", 1), ("venue", 2)],
    "league": [("league", 0), ("competition", 1)],
    "founded": [("founded", 0), ("foundedYear", 1), ("yearFounded", 2), ("formed", 3)],
    "ranking": [("ranking", 0), ("fifaRanking", 1), ("rank", 2)],
    "achievements": [("achievements", 0), ("majorAchievements", 1), ("trophies", 2)],
    "key_players": [("keyPlayers", 0), ("key_players", 1), ("players", 2), ("squad", 3)],
}

TOURNAMENT_FIELDS: FieldTable = {
    "year": [("year", 0), ("edition", 1), ("season", 2)],
    "host": [("host", 0), ("hosts", 1), ("hostCountries", 2)],
    "details": [("details", 0), ("description", 1), ("summary", 2)],
    "qualified_teams": [("qualifiedTeams", 0), ("qualified_teams", 1), ("teams", 2), ("participants", 3)],
    "venues": [("venues", 0), ("stadiums", 1), ("hostCities", 2)],
}

# TheSportsDB team payload (searchteams.php)
SPORTSDB_TEAM_FIELDS: FieldTable = {
    "name": [("strTeam", 0), ("strTeamAlternate", 1)],
    "country": [("strCountry", 0)],
    "coach": [("strManager", 0), ("strCoach", 1)],
    "stadium": [("strStadium", 0), ("strVenue", 1)],
    "league": [("strLeague", 0)],
    "founded": [("intFormedYear", 0)],
}

ENVELOPE_FIELD_TABLES: Dict[str, FieldTable] = {
    "playerInfo": PLAYER_FIELDS,
    "teamInfo": TEAM_FIELDS,
    "worldCupInfo": TOURNAMENT_FIELDS,
}


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = re.search(r"\d{1,4}", value.replace(",", ""))
        if match:
            return int(match.group(0))
    return None


def _to_str(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    if not text or text.lower() in ("null", "none", "n/a"):
        return None
    return text


def _to_str_list(value: Any) -> Optional[List[str]]:
    """Accept a list, a comma-separated string, or a dict of lists."""
    if isinstance(value, dict):
        items: List[Any] = []
        for group in value.values():
            if isinstance(group, list):
                items.extend(group)
            elif group:
                items.append(group)
        value = items
    if isinstance(value, str):
        value = [part for part in value.split(",")]
    if not isinstance(value, list):
        return None
    cleaned = [_to_str(v.get("name") if isinstance(v, dict) else v) for v in value]
    cleaned = [v for v in cleaned if v]
    return cleaned or None


def _to_host(value: Any) -> Optional[str]:
    if isinstance(value, list):
        parts = [_to_str(v) for v in value]
        return ", ".join(p for p in parts if p) or None
    return _to_str(value)


def _to_stats(value: Any) -> Optional[Dict[str, Optional[int]]]:
    if not isinstance(value, dict):
        return None
    stats = {
        "goals": _to_int(value.get("goals", value.get("careerGoals"))),
        "assists": _to_int(value.get("assists", value.get("careerAssists"))),
        "appearances": _to_int(value.get("appearances", value.get("apps"))),
    }
    if all(v is None for v in stats.values()):
        return None
    return stats


def _to_team_type(value: Any) -> Optional[str]:
    text = _to_str(value)
    if not text:
        return None
    text = text.lower()
    if "national" in text or "country" in text:
        return "national"
    if "club" in text:
        return "club"
    return None


COERCERS: Dict[str, Callable[[Any], Any]] = {
    "age": _to_int,
    "founded": _to_int,
    "year": _to_int,
    "stats": _to_stats,
    "achievements": _to_str_list,
    "key_players": _to_str_list,
    "qualified_teams": _to_str_list,
    "venues": _to_str_list,
    "host": _to_host,
    "team_type": _to_team_type,
}


def map_fields(raw: Dict[str, Any], table: FieldTable) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Map a raw upstream payload onto canonical fields.

    Args:
        raw: Upstream dict (AI JSON section or provider record)
        table: Mapping table for the record type

    Returns:
        (canonical values, canonical field -> source field actually used)
    """
    values: Dict[str, Any] = {}
    used: Dict[str, str] = {}

    if not isinstance(raw, dict):
        return values, used

    for canonical, candidates in table.items():
        coerce = COERCERS.get(canonical, _to_str)
        for source_field, _priority in sorted(candidates, key=lambda c: c[1]):
            if source_field not in raw:
                continue
            value = coerce(raw[source_field])
            if value is not None:
                values[canonical] = value
                used[canonical] = source_field
                break

    return values, used


def merge_by_precedence(
    layers: List[Tuple[str, Dict[str, Any]]],
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Merge canonical field dicts field by field.

    Args:
        layers: (source_tag, values) ordered from highest to lowest
                precedence, e.g. [("stats-api", ...), ("ai", ...)]

    Returns:
        (merged values, canonical field -> winning source tag)
    """
    merged: Dict[str, Any] = {}
    attribution: Dict[str, str] = {}

    for source, values in layers:
        for key, value in values.items():
            if key in merged or value is None or value == [] or value == {}:
                continue
            merged[key] = value
            attribution[key] = source

    return merged, attribution
