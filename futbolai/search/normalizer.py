"""Query normalization for search."""

import re
import unicodedata
from typing import Optional


# Common abbreviations to expand
ABBREVIATIONS = {
    # Clubs
    "man u": "manchester united",
    "man utd": "manchester united",
    "manu": "manchester united",
    "man city": "manchester city",
    "spurs": "tottenham",
    "barca": "barcelona",
    "atleti": "atletico madrid",
    "inter milan": "inter",
    "bayern munich": "bayern",
    "paris saint germain": "psg",
    "paris sg": "psg",
    # Countries
    "usmnt": "usa",
    "united states": "usa",
    "holland": "netherlands",
    # Tournaments
    "wc": "world cup",
    "copa mundial": "world cup",
    "copa del mundo": "world cup",
    "mundial": "world cup",
}

YEAR_PATTERN = re.compile(r"\b(19[3-9]\d|20\d\d)\b")


def strip_diacritics(text: str) -> str:
    """
    Remove diacritics.

    Examples:
        "Mbappé" -> "Mbappe"
        "Müller" -> "Muller"
    """
    if not text:
        return ""
    # NFKD decomposes characters, then we remove combining marks
    text = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def normalize(text: str) -> str:
    """
    Normalize query text for matching.

    Steps:
    1. Strip diacritics
    2. Case-fold
    3. Remove punctuation (except hyphens and apostrophes in names)
    4. Collapse whitespace
    """
    text = strip_diacritics(text).casefold().strip()
    text = re.sub(r"[^\w\s\-']", " ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def expand_abbreviations(text: str) -> str:
    """
    Expand common abbreviations in the query.

    Example: "man u" → "manchester united"
    """
    words = text.split()
    result = []
    i = 0

    while i < len(words):
        # Check three- and two-word abbreviations first
        matched = False
        for size in (3, 2):
            if i + size <= len(words):
                phrase = " ".join(words[i:i + size])
                if phrase in ABBREVIATIONS:
                    result.append(ABBREVIATIONS[phrase])
                    i += size
                    matched = True
                    break
        if matched:
            continue

        word = words[i]
        result.append(ABBREVIATIONS.get(word, word))
        i += 1

    return " ".join(result)


def extract_year(text: str) -> Optional[int]:
    """Return the first four-digit year in the text, if any."""
    match = YEAR_PATTERN.search(text)
    if match:
        return int(match.group(1))
    return None


def normalize_query(raw_query: str) -> str:
    """
    Full normalization pipeline for a search query.

    "Kylian Mbappé" and "kylian  MBAPPE" both become "kylian mbappe".
    """
    return expand_abbreviations(normalize(raw_query))
