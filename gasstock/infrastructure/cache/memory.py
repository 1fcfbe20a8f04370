"""In-process TTL cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from gasstock.config import get_logger
from gasstock.core.interfaces import ICache

logger = get_logger(__name__)


class MemoryCache(ICache):
    """
    String cache held in process memory.

    Entries expire ``ttl_seconds`` after they are written. When full, the
    least recently written entry is evicted.
    """

    def __init__(
        self,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, str]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._misses += 1
            return None
        self._hits += 1
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (self._clock() + ttl_seconds, value)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("cache_entry_evicted", key=evicted)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        """Hit/miss counters and current size."""
        return {
            "entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self._hits,
            "misses": self._misses,
        }


class NullCache(ICache):
    """Cache that stores nothing. Used when caching is disabled."""

    async def get(self, key: str) -> str | None:
        return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None
