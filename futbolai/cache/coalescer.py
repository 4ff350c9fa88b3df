"""
Single-flight lookups on the event loop.

While a resolution for a cache key is running, later callers for the
same key await its outcome instead of starting their own.
"""
import asyncio
import time
import logging
from typing import Any, Awaitable, Callable, Dict
from dataclasses import dataclass, field

logger = logging.getLogger("cache.coalescer")


@dataclass
class InFlightRequest:
    """A resolution that is still running, plus how many callers joined it."""
    future: asyncio.Future
    started_at: float = field(default_factory=time.time)
    waiter_count: int = 0


class RequestCoalescer:
    """
    At most one in-flight fetch per cache key.

    The first caller runs fetch_fn and publishes its result or exception
    on a shared future; joiners await that future under a timeout. If the
    first caller is cancelled, joiners fall back to fetching themselves.

    All bookkeeping happens between awaits on one event loop, so no lock
    is needed.

    Usage:
        coalescer = RequestCoalescer()
        result = await coalescer.get_or_fetch(
            cache_key="team:real madrid:en",
            fetch_fn=lambda: reconciler.resolve(query),
        )
    """

    def __init__(self, timeout: float = 30.0):
        """
        Args:
            timeout: Max seconds a joiner waits on the shared future
        """
        self._in_flight: Dict[str, InFlightRequest] = {}
        self._timeout = timeout

    async def get_or_fetch(
        self,
        cache_key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Either join an existing in-flight request or initiate a new one.

        Args:
            cache_key: Unique key for this request
            fetch_fn: Coroutine function to call if we need to fetch

        Returns:
            The fetched data (shared among all concurrent callers)

        Raises:
            TimeoutError: If waiting for in-flight request times out
            Exception: Any error from fetch_fn is propagated
        """
        in_flight = self._in_flight.get(cache_key)

        if in_flight is None:
            return await self._initiate(cache_key, fetch_fn)

        # Join existing request
        in_flight.waiter_count += 1
        logger.debug(
            f"Coalescing request for {cache_key} "
            f"(waiters: {in_flight.waiter_count})"
        )

        try:
            return await asyncio.wait_for(
                asyncio.shield(in_flight.future),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Timeout waiting for coalesced request: {cache_key}")
            raise TimeoutError(f"Request for {cache_key} timed out after {self._timeout}s")
        except asyncio.CancelledError:
            if in_flight.future.cancelled():
                logger.info(f"Initiator cancelled for {cache_key}, fetching independently")
                return await fetch_fn()
            raise

    async def _initiate(
        self,
        cache_key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Perform the fetch and publish the outcome to waiters."""
        loop = asyncio.get_running_loop()
        in_flight = InFlightRequest(future=loop.create_future())
        self._in_flight[cache_key] = in_flight
        logger.debug(f"Initiating fetch for {cache_key}")

        try:
            result = await fetch_fn()
        except asyncio.CancelledError:
            in_flight.future.cancel()
            raise
        except Exception as e:
            logger.warning(f"Fetch failed for {cache_key}: {e}")
            in_flight.future.set_exception(e)
        else:
            in_flight.future.set_result(result)
        finally:
            self._in_flight.pop(cache_key, None)

        return await in_flight.future

    @property
    def active_requests(self) -> int:
        """Number of currently in-flight requests."""
        return len(self._in_flight)

    def get_stats(self) -> Dict[str, Any]:
        """Get coalescer statistics."""
        return {
            "active_requests": len(self._in_flight),
            "active_keys": list(self._in_flight.keys()),
        }
