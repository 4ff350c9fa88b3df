"""Rule tables for the classifier fast path.

All entries are already normalized (lowercase, no diacritics) so they
can be matched directly against normalize_query() output.
"""

import re
from difflib import SequenceMatcher
from typing import Iterable, List, Optional, Tuple

from Levenshtein import ratio as levenshtein_ratio

from .models.query import QueryType


TOURNAMENT_KEYWORDS = [
    "world cup",
    "worldcup",
    "copa mundial",
    "copa del mundo",
    "fifa world cup",
]

CLUB_NAMES = [
    "real madrid",
    "barcelona",
    "atletico madrid",
    "sevilla",
    "valencia",
    "manchester city",
    "manchester united",
    "liverpool",
    "arsenal",
    "chelsea",
    "tottenham",
    "newcastle",
    "aston villa",
    "bayern",
    "borussia dortmund",
    "dortmund",
    "bayer leverkusen",
    "leverkusen",
    "psg",
    "marseille",
    "lyon",
    "juventus",
    "ac milan",
    "milan",
    "inter",
    "napoli",
    "roma",
    "ajax",
    "psv",
    "benfica",
    "porto",
    "sporting cp",
    "celtic",
    "rangers",
    "galatasaray",
    "boca juniors",
    "river plate",
    "flamengo",
    "palmeiras",
    "santos",
    "al nassr",
    "al hilal",
    "inter miami",
    "la galaxy",
]

COUNTRY_NAMES = [
    "argentina",
    "australia",
    "belgium",
    "bolivia",
    "brazil",
    "cameroon",
    "canada",
    "chile",
    "colombia",
    "costa rica",
    "croatia",
    "denmark",
    "ecuador",
    "egypt",
    "england",
    "france",
    "germany",
    "ghana",
    "iran",
    "iraq",
    "italy",
    "jamaica",
    "japan",
    "mexico",
    "morocco",
    "netherlands",
    "nigeria",
    "paraguay",
    "peru",
    "poland",
    "portugal",
    "qatar",
    "saudi arabia",
    "scotland",
    "senegal",
    "serbia",
    "south korea",
    "spain",
    "switzerland",
    "tunisia",
    "uruguay",
    "usa",
    "venezuela",
    "wales",
]

PLAYER_NAMES = [
    "messi",
    "ronaldo",
    "mbappe",
    "neymar",
    "haaland",
    "kane",
    "lewandowski",
    "benzema",
    "modric",
    "de bruyne",
    "salah",
    "mane",
    "vinicius",
    "bellingham",
    "pedri",
    "gavi",
    "valverde",
    "suarez",
    "pulisic",
    "griezmann",
    "kimmich",
    "kroos",
    "courtois",
    "alisson",
    "lamine yamal",
    "saka",
    "musiala",
    "osimhen",
    "son heung-min",
]

# Confidence assigned by each rule
TOURNAMENT_CONFIDENCE = 0.95
CLUB_CONFIDENCE = 0.95
COUNTRY_CONFIDENCE = 0.90
PLAYER_CONFIDENCE = 0.85
FUZZY_TEAM_CONFIDENCE = 0.75

FUZZY_THRESHOLD = 0.88


def _compile(terms: Iterable[str]) -> List[Tuple[str, "re.Pattern[str]"]]:
    # Longest first so "manchester united" wins over "united"
    ordered = sorted(set(terms), key=len, reverse=True)
    return [(term, re.compile(rf"(?<![\w-]){re.escape(term)}(?![\w-])")) for term in ordered]


_TOURNAMENT_PATTERNS = _compile(TOURNAMENT_KEYWORDS)
_CLUB_PATTERNS = _compile(CLUB_NAMES)
_COUNTRY_PATTERNS = _compile(COUNTRY_NAMES)
_PLAYER_PATTERNS = _compile(PLAYER_NAMES)

# Rule tables are tried in order; first match wins
RULES = [
    ("tournament_keyword", QueryType.TOURNAMENT, TOURNAMENT_CONFIDENCE, _TOURNAMENT_PATTERNS),
    ("known_club", QueryType.TEAM, CLUB_CONFIDENCE, _CLUB_PATTERNS),
    ("known_country", QueryType.TEAM, COUNTRY_CONFIDENCE, _COUNTRY_PATTERNS),
    ("known_player", QueryType.PLAYER, PLAYER_CONFIDENCE, _PLAYER_PATTERNS),
]


def _find(patterns, text: str) -> Optional[str]:
    for term, pattern in patterns:
        if pattern.search(text):
            return term
    return None


def match_rules(normalized: str) -> Optional[Tuple[QueryType, float, str]]:
    """
    Match a normalized query against the curated rule tables.

    Returns:
        (query_type, confidence, matched_rule) or None if nothing matched.
    """
    for rule_name, query_type, confidence, patterns in RULES:
        term = _find(patterns, normalized)
        if term:
            return query_type, confidence, f"{rule_name}:{term}"

    return _match_fuzzy_team(normalized)


def similarity(a: str, b: str) -> float:
    """Levenshtein ratio blended with SequenceMatcher; Levenshtein is better for typos."""
    if a == b:
        return 1.0
    seq_ratio = SequenceMatcher(None, a, b).ratio()
    return (levenshtein_ratio(a, b) * 0.6) + (seq_ratio * 0.4)


def _match_fuzzy_team(normalized: str) -> Optional[Tuple[QueryType, float, str]]:
    """Catch near-miss spellings of a club or country ("real madird")."""
    best_term = None
    best_ratio = 0.0
    for term in CLUB_NAMES + COUNTRY_NAMES:
        ratio = similarity(normalized, term)
        if ratio > best_ratio:
            best_term, best_ratio = term, ratio

    if best_term and best_ratio >= FUZZY_THRESHOLD:
        return QueryType.TEAM, FUZZY_TEAM_CONFIDENCE, f"fuzzy_team:{best_term}"
    return None
