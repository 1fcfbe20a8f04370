"""Core domain entities."""

from gasstock.core.entities.category import (
    CategoryDetail,
    CategoryStatus,
    CylinderCategory,
    InventorySummary,
    LocationBreakdown,
)
from gasstock.core.entities.cylinder import (
    Cylinder,
    CylinderDetail,
    CylinderMaterial,
    CylinderStats,
    CylinderStatus,
    CylinderType,
    GasType,
)
from gasstock.core.entities.movement import (
    CategoryMovement,
    CategoryMovementType,
    CylinderMovement,
    CylinderMovementType,
    MovementStatus,
)
from gasstock.core.entities.query import (
    CategoryFilter,
    CategoryMovementFilter,
    CylinderFilter,
    CylinderMovementFilter,
    CylinderTypeFilter,
    Page,
    PageMeta,
    PageRequest,
)

__all__ = [
    # Category flow
    "CylinderCategory",
    "CategoryDetail",
    "CategoryStatus",
    "InventorySummary",
    "LocationBreakdown",
    # Asset flow
    "Cylinder",
    "CylinderDetail",
    "CylinderType",
    "CylinderStatus",
    "CylinderMaterial",
    "CylinderStats",
    "GasType",
    # Movements
    "CategoryMovement",
    "CategoryMovementType",
    "CylinderMovement",
    "CylinderMovementType",
    "MovementStatus",
    # Queries
    "PageRequest",
    "PageMeta",
    "Page",
    "CategoryFilter",
    "CategoryMovementFilter",
    "CylinderFilter",
    "CylinderMovementFilter",
    "CylinderTypeFilter",
]
