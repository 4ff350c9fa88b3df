"""
Process-wide cache for search results and video lookups.

Entries expire per DataCategory TTL. Misses go through a RequestCoalescer
so concurrent identical lookups share one upstream resolution. Callers
can veto storing a value (degraded results, fallback videos).
"""
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from .core import CacheEntry, CacheMeta, CacheSource, DataCategory
from .coalescer import RequestCoalescer
from .ttl_policies import get_ttl_for_category

logger = logging.getLogger("cache.manager")


class CacheManager:
    """In-memory TTL cache with single-flight misses."""

    def __init__(
        self,
        coalesce_timeout: float = 30.0,
        enabled: bool = True,
        max_entries: int = 1000,
    ):
        """
        Args:
            coalesce_timeout: Max seconds a joiner waits on an in-flight lookup
            enabled: When False nothing is stored, but misses still coalesce
            max_entries: Upper bound on stored entries; the oldest go first
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._coalescer = RequestCoalescer(timeout=coalesce_timeout)
        self._enabled = enabled
        self._max_entries = max(1, max_entries)
        self._evictions = 0
        self._hits = 0
        self._misses = 0
        self._skipped_stores = 0

    def _lookup(self, cache_key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(cache_key)
        if entry is None:
            logger.info(f"CACHE MISS: {cache_key}")
            return None
        if not entry.is_fresh:
            logger.info(f"CACHE EXPIRED: {cache_key} [age={entry.age_seconds:.1f}s]")
            del self._entries[cache_key]
            return None
        return entry

    def _make_room(self) -> None:
        """Sweep expired entries, then drop the oldest until one slot is free."""
        if len(self._entries) < self._max_entries:
            return

        expired = [key for key, entry in self._entries.items() if not entry.is_fresh]
        for key in expired:
            del self._entries[key]

        overflow = max(0, len(self._entries) - self._max_entries + 1)
        oldest = sorted(self._entries, key=lambda key: self._entries[key].fetched_at)
        for key in oldest[:overflow]:
            del self._entries[key]

        self._evictions += len(expired) + overflow
        logger.info(f"Evicted {len(expired)} expired and {overflow} oldest cache entries")

    async def get(
        self,
        cache_key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
        category: DataCategory,
        force_refresh: bool = False,
        should_cache: Optional[Callable[[Any], bool]] = None,
    ) -> Tuple[Any, CacheMeta]:
        """
        Return the cached value for a key, or resolve and maybe store it.

        Args:
            cache_key: Unique cache key
            fetch_fn: Coroutine function producing the value on a miss
            category: Selects the TTL
            force_refresh: Ignore any stored value (the fetch still coalesces)
            should_cache: Predicate; values it rejects are returned but not stored

        Returns:
            (data, meta) where meta.cache_source is "fresh" or "upstream"
        """
        ttl = get_ttl_for_category(category)

        if force_refresh:
            logger.info(f"FORCE REFRESH: {cache_key}")
        elif self._enabled:
            entry = self._lookup(cache_key)
            if entry is not None:
                logger.debug(f"CACHE HIT: {cache_key} [age={entry.age_seconds:.1f}s]")
                self._hits += 1
                return entry.data, CacheMeta(
                    cache_source=CacheSource.FRESH.value,
                    category=category.value,
                    ttl_seconds=ttl,
                    age_seconds=entry.age_seconds,
                )

        data = await self._coalescer.get_or_fetch(cache_key, fetch_fn)
        self._misses += 1

        if self._enabled and (should_cache is None or should_cache(data)):
            if cache_key not in self._entries:
                self._make_room()
            self._entries[cache_key] = CacheEntry(
                data=data,
                fetched_at=datetime.utcnow(),
                ttl_seconds=ttl,
                category=category,
            )
        else:
            self._skipped_stores += 1

        return data, CacheMeta(
            cache_source=CacheSource.UPSTREAM.value,
            category=category.value,
            ttl_seconds=ttl,
        )

    def invalidate(self, cache_key: str) -> bool:
        """Drop one entry; True if it existed."""
        if self._entries.pop(cache_key, None) is None:
            return False
        logger.info(f"Invalidated cache: {cache_key}")
        return True

    def clear(self) -> int:
        """Drop every entry and return how many there were."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def get_stats(self) -> Dict[str, Any]:
        lookups = self._hits + self._misses
        return {
            "enabled": self._enabled,
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "max_entries": self._max_entries,
            "evictions": self._evictions,
            "skipped_stores": self._skipped_stores,
            "hit_rate_percent": round(self._hits / lookups * 100, 1) if lookups else 0,
            "coalescer": self._coalescer.get_stats(),
        }


_cache_manager: Optional[CacheManager] = None


def get_cache_manager() -> CacheManager:
    """Get or create the global cache manager."""
    global _cache_manager
    if _cache_manager is None:
        from config.settings import settings
        _cache_manager = CacheManager(
            coalesce_timeout=settings.coalesce_timeout_seconds,
            enabled=settings.cache_enabled,
            max_entries=settings.cache_max_entries,
        )
    return _cache_manager
