"""
Trophy bucketing for honour titles.

This is a best-effort string heuristic, not exact data: honour titles from
the stats provider are free text, so each one is placed in the first bucket
whose keywords it contains (and whose exclusions it does not). Titles that
match no bucket are counted only in the total.
"""

from typing import Dict, Iterable, List, Optional, Tuple

# (bucket, include keywords, exclude keywords), evaluated in order
HONOUR_BUCKETS: List[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = [
    (
        "clubWorldCup",
        ("club world cup", "intercontinental"),
        (),
    ),
    (
        "championsLeague",
        ("champions league", "european cup"),
        (),
    ),
    (
        "domesticLeague",
        ("la liga", "premier league", "bundesliga", "serie a", "ligue 1"),
        (),
    ),
    (
        "domesticCup",
        ("copa del rey", "fa cup", "dfb-pokal", "coppa italia", "cup"),
        ("world cup",),
    ),
]

TROPHY_CATEGORIES = tuple(bucket for bucket, _, _ in HONOUR_BUCKETS)


def classify_honour(title: Optional[str]) -> Optional[str]:
    """Return the bucket for one honour title, or None."""
    if not title:
        return None
    text = title.lower()
    for bucket, include, exclude in HONOUR_BUCKETS:
        if any(word in text for word in exclude):
            continue
        if any(word in text for word in include):
            return bucket
    return None


def classify_honours(titles: Iterable[Optional[str]]) -> Dict[str, int]:
    """
    Count honour titles per trophy bucket.

    Example:
        ["UEFA Champions League", "FA Cup", "FIFA Club World Cup"]
        -> {"clubWorldCup": 1, "championsLeague": 1, "domesticLeague": 0, "domesticCup": 1}
    """
    counts = {bucket: 0 for bucket in TROPHY_CATEGORIES}
    for title in titles:
        bucket = classify_honour(title)
        if bucket:
            counts[bucket] += 1
    return counts
