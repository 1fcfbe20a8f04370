"""
Core business logic services.

Layer-pure services that depend only on:
- gasstock/core/entities/*
- gasstock/core/interfaces/*
- gasstock/core/exceptions.py and gasstock/core/rules.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from gasstock.core.services.cache_support import CacheInvalidator, SafeCache
from gasstock.core.services.inventory_query import InventoryQueryService
from gasstock.core.services.movement_engine import (
    CategoryMovementCommand,
    CategoryMovementResult,
    CylinderMovementCommand,
    CylinderMovementResult,
    CylinderUpdateResult,
    MovementEngine,
)
from gasstock.core.services.registry import RegistryService

__all__ = [
    # Movement Engine
    "MovementEngine",
    "CategoryMovementCommand",
    "CategoryMovementResult",
    "CylinderMovementCommand",
    "CylinderMovementResult",
    "CylinderUpdateResult",
    # Read side
    "InventoryQueryService",
    # Catalogue
    "RegistryService",
    # Cache
    "SafeCache",
    "CacheInvalidator",
]
