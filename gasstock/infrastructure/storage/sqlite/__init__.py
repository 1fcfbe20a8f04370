"""SQLite storage implementations."""

from gasstock.infrastructure.storage.sqlite.category_store import SQLiteCategoryStore
from gasstock.infrastructure.storage.sqlite.connection import ConnectionPool
from gasstock.infrastructure.storage.sqlite.cylinder_store import SQLiteCylinderStore

__all__ = [
    "ConnectionPool",
    "SQLiteCategoryStore",
    "SQLiteCylinderStore",
]
