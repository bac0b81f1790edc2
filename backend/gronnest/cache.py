"""
Bounded in-memory TTL cache shared by one source adapter.
Caches "not found" as well as hits; expired entries are dropped on read,
and the oldest entries are evicted once capacity is exceeded.
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)

# Returned by TTLCache.get when a key is absent or expired; None is a valid cached value.
MISSING = object()


class TTLCache:
    """
    key -> (value, stored_at). Safe for concurrent readers and writers
    (adapters run on worker threads). The clock is injectable for tests.
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 30 * 60,
        clock: Optional[Callable[[], float]] = None,
        name: str = "cache",
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[Hashable, tuple[Any, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: Hashable) -> Any:
        """Return the cached value, or MISSING if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return MISSING
            value, stored_at = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                self._misses += 1
                return MISSING
            self._hits += 1
        logger.debug("CACHE hit name=%s key=%s", self.name, str(key)[:60])
        return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            now = self._clock()
            if key in self._entries:
                del self._entries[key]
            self._entries[key] = (value, now)
            if len(self._entries) > self.max_entries:
                self._evict(now)

    def _evict(self, now: float) -> None:
        """Drop expired entries, then oldest-first until within capacity. Caller holds the lock."""
        expired = [k for k, (_, ts) in self._entries.items() if self._expired(ts, now)]
        for k in expired:
            del self._entries[k]
        evicted = 0
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            evicted += 1
        if expired or evicted:
            logger.debug(
                "CACHE evict name=%s expired=%s oldest=%s size=%s",
                self.name, len(expired), evicted, len(self._entries),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict:
        with self._lock:
            return {
                "name": self.name,
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
