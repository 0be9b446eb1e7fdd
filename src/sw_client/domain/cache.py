"""Request cache with in-flight coalescing.

  - Time-boxed cache (default 5 min TTL, per-call override)
  - Cache key: logical request identity, e.g. "GET:/wallets/me"
  - Expired entries are evicted lazily on lookup, no background sweep
  - Concurrent calls for the same key share one in-flight load
  - Failures are never cached and clear the in-flight marker
  - A load still in flight when its key is invalidated is not stored

One instance per app session. All mutation happens on the event loop
thread, so no locking.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION = 300.0  # seconds

Loader = Callable[[], Awaitable[Any]]


@dataclass
class CacheEntry:
    data: Any
    stored_at: float  # clock() reading when stored


class RequestCache:
    def __init__(
        self,
        default_duration: float = DEFAULT_CACHE_DURATION,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_duration = default_duration
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Future[Any]] = {}
        # Bumped by invalidate(); a load started under an older generation
        # still answers its waiters but is not stored.
        self._epoch = 0
        self._generations: dict[str, int] = {}

    def get_cached(self, key: str, cache_duration: float | None = None) -> CacheEntry | None:
        """Return the entry for key if still fresh; evict it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        duration = self._default_duration if cache_duration is None else cache_duration
        if self._clock() - entry.stored_at > duration:
            del self._entries[key]
            return None
        return entry

    def is_in_flight(self, key: str) -> bool:
        return key in self._in_flight

    async def fetch(
        self,
        key: str,
        loader: Loader,
        *,
        cache: bool = False,
        cache_duration: float | None = None,
    ) -> Any:
        """Return a fresh cached value, join an in-flight load, or start one.

        Every waiter on the same in-flight load receives the same value or
        the same exception instance. A waiter that is cancelled does not
        cancel the shared load.
        """
        if cache:
            entry = self.get_cached(key, cache_duration)
            if entry is not None:
                logger.debug("Cache hit: %s", key)
                return entry.data

        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("Request dedup: %s", key)
        else:
            pending = asyncio.ensure_future(
                self._load(key, loader, cache, self._generation(key))
            )
            pending.add_done_callback(_retrieve_exception)
            self._in_flight[key] = pending
        return await asyncio.shield(pending)

    def _generation(self, key: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(key, 0)

    async def _load(
        self, key: str, loader: Loader, cache: bool, started: tuple[int, int]
    ) -> Any:
        try:
            data = await loader()
            if cache and self._generation(key) == started:
                self._entries[key] = CacheEntry(data=data, stored_at=self._clock())
            return data
        finally:
            self._in_flight.pop(key, None)

    def invalidate(self, key: str | None = None) -> None:
        """Drop one entry, or the whole cache when key is None."""
        if key is None:
            self._entries.clear()
            self._epoch += 1
        else:
            self._entries.pop(key, None)
            self._generations[key] = self._generations.get(key, 0) + 1

    def __len__(self) -> int:
        return len(self._entries)


def _retrieve_exception(future: asyncio.Future[Any]) -> None:
    # Marks a failure as seen even when every waiter was cancelled first.
    if not future.cancelled():
        future.exception()
