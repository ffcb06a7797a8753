"""Thread result cache for Pressbox."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Generic, Optional, TypeVar

from core.metrics import get_performance_monitor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    timestamp: float


class ThreadCache(Generic[T]):
    """
    In-memory TTL cache keyed by game id.

    Concurrent misses for the same key share one in-flight computation.
    Entries live for the process lifetime unless swept or pushed out by
    `max_entries`; the key space is a handful of games per day.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        max_entries: Optional[int] = None,
    ):
        self._clock = clock
        self._max_entries = max_entries
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str, ttl_seconds: float) -> Optional[T]:
        """Cached value if present and younger than the TTL."""
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.timestamp >= ttl_seconds:
            return None
        return entry.value

    def set(self, key: str, value: T) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
        if self._max_entries is not None:
            while len(self._entries) > self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k].timestamp)
                del self._entries[oldest]
                logger.debug(f"Evicted cache entry {oldest}")

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: float,
        compute: Callable[[], Awaitable[T]],
        force_refresh: bool = False,
    ) -> T:
        """
        Return the cached value for `key`, computing it on a miss.

        A forced refresh skips the cached value but joins a computation
        already in flight for the key. Exceptions from `compute` reach
        every waiter and nothing is cached.
        """
        monitor = get_performance_monitor()

        if not force_refresh:
            cached = self.get(key, ttl_seconds)
            if cached is not None:
                monitor.record_cache_hit()
                return cached

        monitor.record_cache_miss()

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, compute))
            self._inflight[key] = task
        else:
            logger.debug(f"Joining in-flight computation for {key}")

        return await asyncio.shield(task)

    async def _run(self, key: str, compute: Callable[[], Awaitable[T]]) -> T:
        try:
            value = await compute()
            self.set(key, value)
            return value
        finally:
            self._inflight.pop(key, None)

    def sweep(self, ttl_seconds: float) -> int:
        """Drop entries older than the TTL. Returns how many were removed."""
        now = self._clock()
        stale = [k for k, e in self._entries.items() if now - e.timestamp >= ttl_seconds]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count
