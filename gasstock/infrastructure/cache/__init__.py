"""Cache implementations."""

from gasstock.config.settings import CacheSettings
from gasstock.core.interfaces import ICache
from gasstock.infrastructure.cache.memory import MemoryCache, NullCache


def build_cache(settings: CacheSettings) -> ICache:
    """Cache backend selected by configuration."""
    if not settings.enabled:
        return NullCache()
    return MemoryCache(max_entries=settings.max_entries)


__all__ = ["MemoryCache", "NullCache", "build_cache"]
