"""Abstract interface for the key/value cache."""

from abc import ABC, abstractmethod


class ICache(ABC):
    """String key/value store with per-entry TTL."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the cached value, or None when absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value for ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key if present."""
        pass
