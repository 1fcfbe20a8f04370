"""
Best-effort caching shared by the engine, registry and query service.

Cache trouble never fails an inventory operation: every backend error is
logged at warning level and treated as a miss (or a no-op for writes).
"""

from gasstock.config import get_logger
from gasstock.core.interfaces import ICache

logger = get_logger(__name__)

CATEGORY_PREFIX = "category:"
CYLINDER_PREFIX = "cylinder:"
CATEGORY_SUMMARY_KEY = f"{CATEGORY_PREFIX}summary"
CYLINDER_STATS_KEY = f"{CYLINDER_PREFIX}stats"
DEFAULT_TTL_SECONDS = 600


def category_key(category_id: str) -> str:
    return f"{CATEGORY_PREFIX}{category_id}"


def cylinder_key(cylinder_id: str) -> str:
    return f"{CYLINDER_PREFIX}{cylinder_id}"


class SafeCache:
    """Wraps an ICache so that failures are swallowed."""

    def __init__(self, cache: ICache, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self._cache = cache
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> str | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            logger.warning("cache_get_failed", key=key, error=str(e))
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            await self._cache.set(key, value, self.ttl_seconds)
        except Exception as e:
            logger.warning("cache_set_failed", key=key, error=str(e))

    async def delete(self, key: str) -> None:
        try:
            await self._cache.delete(key)
        except Exception as e:
            logger.warning("cache_delete_failed", key=key, error=str(e))


class CacheInvalidator:
    """Single place that decides which keys a committed mutation clears."""

    def __init__(self, cache: SafeCache):
        self._cache = cache

    async def category_changed(self, category_id: str | None = None) -> None:
        if category_id:
            await self._cache.delete(category_key(category_id))
        await self._cache.delete(CATEGORY_SUMMARY_KEY)

    async def cylinder_changed(self, cylinder_id: str | None = None) -> None:
        if cylinder_id:
            await self._cache.delete(cylinder_key(cylinder_id))
        await self._cache.delete(CYLINDER_STATS_KEY)

    async def cylinder_type_changed(self, cylinder_ids: list[str]) -> None:
        """Cached cylinder details embed their type's name and gas."""
        for cylinder_id in cylinder_ids:
            await self._cache.delete(cylinder_key(cylinder_id))
        await self._cache.delete(CYLINDER_STATS_KEY)
