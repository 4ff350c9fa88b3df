"""
Unit tests for the cache: TTL policies, coalescing and the manager.
"""
import asyncio
from datetime import datetime, timedelta

import pytest

from futbolai.cache import (
    CacheEntry,
    CacheManager,
    DataCategory,
    RequestCoalescer,
    get_category_for_query_type,
    get_ttl_for_category,
)


class TestTTLPolicies:

    def test_ttls(self):
        assert get_ttl_for_category(DataCategory.TEAM_PROFILE) == 24 * 3600
        assert get_ttl_for_category(DataCategory.TOURNAMENT) == 6 * 3600
        assert get_ttl_for_category(DataCategory.MEDIA) == 30 * 24 * 3600
        assert get_ttl_for_category(DataCategory.GENERAL_TEXT) is None

    def test_query_type_categories(self):
        assert get_category_for_query_type("team") == DataCategory.TEAM_PROFILE
        assert get_category_for_query_type("player") == DataCategory.PLAYER_PROFILE
        assert get_category_for_query_type("tournament") == DataCategory.TOURNAMENT
        assert get_category_for_query_type("nonsense") == DataCategory.GENERAL_TEXT

    def test_entry_freshness(self):
        old = datetime.utcnow() - timedelta(hours=7)
        assert not CacheEntry("x", old, 6 * 3600).is_fresh
        assert CacheEntry("x", old, 24 * 3600).is_fresh
        assert CacheEntry("x", old - timedelta(days=365), None).is_fresh


class TestRequestCoalescer:

    def test_concurrent_identical_keys_share_one_call(self):
        calls = []

        async def fetch():
            calls.append(1)
            await asyncio.sleep(0.05)
            return {"team": "Real Madrid"}

        async def scenario():
            coalescer = RequestCoalescer(timeout=5.0)
            results = await asyncio.gather(*(coalescer.get_or_fetch("team:real madrid:en", fetch) for _ in range(5)))
            return coalescer, results

        coalescer, results = asyncio.run(scenario())

        assert len(calls) == 1
        assert all(r == {"team": "Real Madrid"} for r in results)
        assert coalescer.active_requests == 0

    def test_different_keys_fetch_separately(self):
        calls = []

        async def fetch():
            calls.append(1)
            await asyncio.sleep(0.01)
            return len(calls)

        async def scenario():
            coalescer = RequestCoalescer()
            return await asyncio.gather(
                coalescer.get_or_fetch("a", fetch),
                coalescer.get_or_fetch("b", fetch),
            )

        asyncio.run(scenario())
        assert len(calls) == 2

    def test_errors_reach_every_waiter(self):
        async def fetch():
            await asyncio.sleep(0.01)
            raise ValueError("upstream broke")

        async def scenario():
            coalescer = RequestCoalescer()
            return await asyncio.gather(
                *(coalescer.get_or_fetch("k", fetch) for _ in range(3)),
                return_exceptions=True,
            )

        results = asyncio.run(scenario())
        assert all(isinstance(r, ValueError) for r in results)

    def test_waiter_timeout(self):
        async def slow():
            await asyncio.sleep(0.5)
            return "late"

        async def scenario():
            coalescer = RequestCoalescer(timeout=0.05)
            first = asyncio.ensure_future(coalescer.get_or_fetch("k", slow))
            await asyncio.sleep(0)
            with pytest.raises(TimeoutError):
                await coalescer.get_or_fetch("k", slow)
            return await first

        assert asyncio.run(scenario()) == "late"


class TestCacheManager:

    def test_miss_then_hit(self):
        calls = []

        async def fetch():
            calls.append(1)
            return "payload"

        async def scenario():
            cache = CacheManager()
            first = await cache.get("k", fetch, DataCategory.TEAM_PROFILE)
            second = await cache.get("k", fetch, DataCategory.TEAM_PROFILE)
            return cache, first, second

        cache, (data1, meta1), (data2, meta2) = asyncio.run(scenario())

        assert data1 == data2 == "payload"
        assert meta1.cache_source == "upstream"
        assert meta2.cache_source == "fresh"
        assert len(calls) == 1
        assert cache.get_stats()["hits"] == 1

    def test_should_cache_rejects(self):
        calls = []

        async def fetch():
            calls.append(1)
            return {"degraded": True}

        async def scenario():
            cache = CacheManager()
            for _ in range(2):
                await cache.get("k", fetch, DataCategory.TEAM_PROFILE, should_cache=lambda d: not d["degraded"])
            return cache

        cache = asyncio.run(scenario())
        assert len(calls) == 2
        assert cache.get_stats()["entries"] == 0
        assert cache.get_stats()["skipped_stores"] == 2

    def test_force_refresh(self):
        calls = []

        async def fetch():
            calls.append(1)
            return len(calls)

        async def scenario():
            cache = CacheManager()
            await cache.get("k", fetch, DataCategory.GENERAL_TEXT)
            return await cache.get("k", fetch, DataCategory.GENERAL_TEXT, force_refresh=True)

        data, meta = asyncio.run(scenario())
        assert data == 2
        assert meta.cache_source == "upstream"

    def test_disabled_cache_never_stores(self):
        async def fetch():
            return "x"

        async def scenario():
            cache = CacheManager(enabled=False)
            await cache.get("k", fetch, DataCategory.MEDIA)
            return cache

        assert asyncio.run(scenario()).get_stats()["entries"] == 0

    def test_invalidate_and_clear(self):
        async def fetch():
            return "x"

        async def scenario():
            cache = CacheManager()
            await cache.get("a", fetch, DataCategory.MEDIA)
            await cache.get("b", fetch, DataCategory.MEDIA)
            return cache

        cache = asyncio.run(scenario())
        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert cache.clear() == 1
        assert cache.get_stats()["entries"] == 0

    def test_bounded_entries_drop_oldest(self):
        async def fetch():
            return "x"

        async def scenario():
            cache = CacheManager(max_entries=2)
            await cache.get("a", fetch, DataCategory.GENERAL_TEXT)
            await cache.get("b", fetch, DataCategory.GENERAL_TEXT)
            cache._entries["a"].fetched_at -= timedelta(minutes=5)
            await cache.get("c", fetch, DataCategory.GENERAL_TEXT)
            return cache

        cache = asyncio.run(scenario())
        stats = cache.get_stats()
        assert stats["entries"] == 2
        assert stats["evictions"] == 1
        assert cache.invalidate("a") is False
        assert cache.invalidate("b") is True

    def test_expired_entries_swept_before_oldest(self):
        async def fetch():
            return "x"

        async def scenario():
            cache = CacheManager(max_entries=2)
            await cache.get("old", fetch, DataCategory.GENERAL_TEXT)
            await cache.get("stale", fetch, DataCategory.TOURNAMENT)
            cache._entries["old"].fetched_at -= timedelta(days=30)
            cache._entries["stale"].fetched_at -= timedelta(hours=7)
            await cache.get("new", fetch, DataCategory.GENERAL_TEXT)
            return cache

        cache = asyncio.run(scenario())
        assert cache.get_stats()["entries"] == 2
        assert cache.invalidate("stale") is False
        assert cache.invalidate("old") is True
        assert cache.invalidate("new") is True
