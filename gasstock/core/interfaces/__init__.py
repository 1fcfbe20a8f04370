"""Core interfaces (ports) for dependency injection."""

from gasstock.core.interfaces.cache import ICache
from gasstock.core.interfaces.inventory_store import (
    ICategoryStore,
    ICylinderStore,
    ITransactional,
)

__all__ = [
    "ICache",
    "ICategoryStore",
    "ICylinderStore",
    "ITransactional",
]
