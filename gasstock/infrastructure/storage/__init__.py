"""Storage infrastructure implementations."""

from gasstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCategoryStore,
    SQLiteCylinderStore,
)

__all__ = [
    "ConnectionPool",
    "SQLiteCategoryStore",
    "SQLiteCylinderStore",
]
