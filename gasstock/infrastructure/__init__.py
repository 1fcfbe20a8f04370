"""Infrastructure layer implementations."""

from gasstock.infrastructure import cache, reports, storage

__all__ = ["storage", "cache", "reports"]
