"""
YouTube Data API video adapter.

Finds one embeddable highlight video for a search phrase. Query rewrites
are tried in order up to a bounded attempt count; when nothing is found
a deterministic fallback video is chosen from a static table.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from futbolai.cache.core import DataCategory
from futbolai.search.models.results import VideoReference
from futbolai.search.normalizer import normalize
from .base import AdapterErrorKind, AdapterResult, DataAdapter, SourceTag

logger = logging.getLogger(__name__)

EMBED_URL = "https://www.youtube.com/embed/{video_id}"

# Ordered query rewrites, most specific first
REWRITE_STRATEGIES: Tuple[str, ...] = (
    "{phrase} football highlights",
    "{phrase} highlights",
    "{phrase}",
)

# Substring of the normalized phrase -> video id, checked in order
FALLBACK_VIDEOS: List[Tuple[str, str]] = [
    ("canada", "6MfLJBHjK0k"),
    ("uruguay", "9ILbr0XBp2o"),
    ("brazil", "eJXWcJeGXlM"),
    ("argentina", "eJXWcJeGXlM"),
    ("spain", "6MfLJBHjK0k"),
    ("france", "J8LcQOHtQKs"),
    ("germany", "XfyZ6EueJx8"),
    ("suarez", "6kl7AOKVpCM"),
    ("messi", "ZO0d8r_2qGI"),
    ("world cup", "dZqkf1ZnQh4"),
]

DEFAULT_FALLBACK_VIDEO = "dZqkf1ZnQh4"


def fallback_video(phrase: str) -> VideoReference:
    """Deterministic fallback video for a phrase."""
    normalized = normalize(phrase or "")
    video_id = DEFAULT_FALLBACK_VIDEO
    for key, candidate in FALLBACK_VIDEOS:
        if key in normalized:
            video_id = candidate
            break
    return VideoReference(
        url=EMBED_URL.format(video_id=video_id),
        video_id=video_id,
        source=SourceTag.FALLBACK.value,
        search_phrase=phrase,
    )


class YouTubeAdapter(DataAdapter):
    """
    Adapter for the YouTube Data API v3 search endpoint.

    fetch() returns a failure only when the provider could not be asked
    (no key, timeout, HTTP or decoding error). Zero results after every
    rewrite is a success carrying the fallback video.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        timeout: float = 8.0,
        max_attempts: int = 3,
        client: Optional[httpx.AsyncClient] = None,
        cache=None,
    ):
        """
        Args:
            api_key: YouTube Data API key
            base_url: API root
            timeout: Timeout for the whole lookup, all attempts included
            max_attempts: Upper bound on rewrite strategies tried
            client: Optional httpx client (tests pass a MockTransport one)
            cache: Optional CacheManager for media lookups
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self.cache = cache

    @property
    def source_name(self) -> str:
        return SourceTag.VIDEO.value

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    def rewrites(self, phrase: str) -> List[str]:
        """Search strings to try, bounded by max_attempts."""
        seen: List[str] = []
        for strategy in REWRITE_STRATEGIES:
            candidate = " ".join(strategy.format(phrase=phrase).split())
            if candidate not in seen:
                seen.append(candidate)
        return seen[:self.max_attempts]

    async def _search(self, q: str) -> Optional[Dict[str, Any]]:
        """First embeddable result for one search string, or None."""
        response = await self.client.get(
            f"{self.base_url}/search",
            params={
                "part": "snippet",
                "q": q,
                "type": "video",
                "maxResults": 1,
                "key": self.api_key,
                "videoEmbeddable": "true",
                "safeSearch": "strict",
            },
        )
        response.raise_for_status()
        items = response.json().get("items") or []
        for item in items:
            video_id = (item.get("id") or {}).get("videoId")
            if video_id:
                return {
                    "video_id": video_id,
                    "title": (item.get("snippet") or {}).get("title"),
                }
        return None

    async def _lookup(self, phrase: str) -> VideoReference:
        for q in self.rewrites(phrase):
            found = await self._search(q)
            if found:
                return VideoReference(
                    url=EMBED_URL.format(video_id=found["video_id"]),
                    video_id=found["video_id"],
                    title=found["title"],
                    source=self.source_name,
                    search_phrase=q,
                )
            logger.debug(f"No YouTube results for '{q}'")
        logger.info(f"No YouTube video for '{phrase}', using fallback")
        return fallback_video(phrase)

    async def _fetch_uncached(self, phrase: str) -> AdapterResult:
        if not self.is_available:
            return AdapterResult.failure(
                self.source_name, AdapterErrorKind.UNAVAILABLE, "YouTube key not configured"
            )
        try:
            video = await asyncio.wait_for(self._lookup(phrase), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"YouTube search timed out for '{phrase}'")
            return AdapterResult.failure(
                self.source_name, AdapterErrorKind.UNAVAILABLE, f"Timed out after {self.timeout}s"
            )
        except httpx.HTTPError as e:
            logger.warning(f"YouTube search failed for '{phrase}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.UNAVAILABLE, str(e))
        except (ValueError, AttributeError) as e:
            logger.warning(f"YouTube returned malformed data for '{phrase}': {e}")
            return AdapterResult.failure(self.source_name, AdapterErrorKind.MALFORMED, str(e))
        return AdapterResult.success(self.source_name, video)

    async def fetch(self, term: str, **options: Any) -> AdapterResult:
        """
        Find a highlight video for a search phrase.

        Returns:
            AdapterResult with a VideoReference payload
        """
        if self.cache is None:
            return await self._fetch_uncached(term)

        result, _meta = await self.cache.get(
            cache_key=f"media:{normalize(term)}",
            fetch_fn=lambda: self._fetch_uncached(term),
            category=DataCategory.MEDIA,
            should_cache=lambda r: r.ok and not r.payload.is_fallback,
        )
        return result

    async def find_video(self, term: str) -> VideoReference:
        """Always returns a video: the provider's match or the fallback."""
        result = await self.fetch(term)
        if result.ok:
            return result.payload
        return fallback_video(term)

    async def aclose(self) -> None:
        await self.client.aclose()
