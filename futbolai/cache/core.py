"""
Cache entries and the metadata returned alongside cached search results.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class DataCategory(Enum):
    """What a cache entry holds; each category has its own TTL."""
    TEAM_PROFILE = "team_profile"
    PLAYER_PROFILE = "player_profile"
    TOURNAMENT = "tournament"
    MEDIA = "media"                  # resolved highlight videos
    GENERAL_TEXT = "general_text"    # kept until restart


class CacheSource(Enum):
    """Where the data handed to a caller came from."""
    FRESH = "fresh"
    UPSTREAM = "upstream"


@dataclass
class CacheEntry:
    """
    One stored value.

    ttl_seconds=None means the entry never expires.
    """
    data: Any
    fetched_at: datetime
    ttl_seconds: Optional[int]
    category: DataCategory = DataCategory.GENERAL_TEXT

    @property
    def age_seconds(self) -> float:
        return (datetime.utcnow() - self.fetched_at).total_seconds()

    @property
    def is_fresh(self) -> bool:
        return self.ttl_seconds is None or self.age_seconds < self.ttl_seconds


@dataclass
class CacheMeta:
    """How a CacheManager.get() call was served."""
    cache_source: str
    category: str
    ttl_seconds: Optional[int] = None
    age_seconds: float = 0.0
    served_at: str = field(default_factory=lambda: datetime.utcnow().isoformat() + "Z")
