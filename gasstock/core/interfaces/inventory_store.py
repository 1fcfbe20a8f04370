"""Abstract interfaces for inventory persistence.

Every write accepts an optional ``tx`` handle obtained from ``transaction()``.
Writes given a handle join that transaction; without one they commit on their own.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any

from gasstock.core.entities import (
    CategoryFilter,
    CategoryMovement,
    CategoryMovementFilter,
    Cylinder,
    CylinderCategory,
    CylinderFilter,
    CylinderMovement,
    CylinderMovementFilter,
    CylinderType,
    CylinderTypeFilter,
    PageRequest,
)


class ITransactional(ABC):
    """Store that can open a transaction spanning several writes."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Any]:
        """Open a transaction; commits on exit, rolls back on any exception."""
        pass


class ICategoryStore(ITransactional):
    """Interface for cylinder categories and their movements."""

    @abstractmethod
    async def get_category(self, category_id: str, tx: Any = None) -> CylinderCategory | None:
        """Get category by ID."""
        pass

    @abstractmethod
    async def create_category(self, category: CylinderCategory, tx: Any = None) -> CylinderCategory:
        """Create a new category."""
        pass

    @abstractmethod
    async def update_category(
        self, category_id: str, fields: dict[str, Any], tx: Any = None
    ) -> bool:
        """Update non-quantity fields. Returns False if no row matched."""
        pass

    @abstractmethod
    async def delete_category(self, category_id: str, tx: Any = None) -> bool:
        """Delete a category (its movements cascade)."""
        pass

    @abstractmethod
    async def adjust_quantities(
        self,
        category_id: str,
        filled_delta: int,
        empty_delta: int,
        restocked_at: datetime | None = None,
        tx: Any = None,
    ) -> bool:
        """Atomically shift both counters, clamped at zero, and recompute the total."""
        pass

    @abstractmethod
    async def list_categories(
        self, filters: CategoryFilter, page: PageRequest
    ) -> tuple[list[CylinderCategory], int]:
        """List one page of categories and the total match count."""
        pass

    @abstractmethod
    async def list_all_categories(self) -> list[CylinderCategory]:
        """Every category, for aggregation."""
        pass

    @abstractmethod
    async def count_movements(self, category_id: str) -> int:
        """Number of movements recorded against a category."""
        pass

    @abstractmethod
    async def add_movement(self, movement: CategoryMovement, tx: Any = None) -> CategoryMovement:
        """Record a category movement."""
        pass

    @abstractmethod
    async def get_movement(self, movement_id: str) -> CategoryMovement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def update_movement(
        self, movement_id: str, fields: dict[str, Any], tx: Any = None
    ) -> bool:
        """Update correction fields of a movement."""
        pass

    @abstractmethod
    async def list_movements(
        self, filters: CategoryMovementFilter, page: PageRequest
    ) -> tuple[list[CategoryMovement], int]:
        """List one page of movements and the total match count."""
        pass


class ICylinderStore(ITransactional):
    """Interface for cylinder types, serialized cylinders and their movements."""

    # --- Types ---

    @abstractmethod
    async def get_cylinder_type(self, type_id: str, tx: Any = None) -> CylinderType | None:
        """Get cylinder type by ID."""
        pass

    @abstractmethod
    async def get_cylinder_types(self, type_ids: list[str]) -> dict[str, CylinderType]:
        """Get several types keyed by ID."""
        pass

    @abstractmethod
    async def create_cylinder_type(self, cylinder_type: CylinderType, tx: Any = None) -> CylinderType:
        """Create a new cylinder type."""
        pass

    @abstractmethod
    async def update_cylinder_type(
        self, type_id: str, fields: dict[str, Any], tx: Any = None
    ) -> bool:
        """Update a cylinder type."""
        pass

    @abstractmethod
    async def delete_cylinder_type(self, type_id: str, tx: Any = None) -> bool:
        """Delete a cylinder type."""
        pass

    @abstractmethod
    async def list_cylinder_types(
        self, filters: CylinderTypeFilter, page: PageRequest
    ) -> tuple[list[CylinderType], int]:
        """List one page of cylinder types and the total match count."""
        pass

    @abstractmethod
    async def count_cylinders_of_type(self, type_id: str) -> int:
        """Number of cylinders built to a type."""
        pass

    # --- Cylinders ---

    @abstractmethod
    async def get_cylinder(self, cylinder_id: str, tx: Any = None) -> Cylinder | None:
        """Get cylinder by ID."""
        pass

    @abstractmethod
    async def get_cylinder_by_serial(self, serial_number: str, tx: Any = None) -> Cylinder | None:
        """Get cylinder by serial number."""
        pass

    @abstractmethod
    async def create_cylinder(self, cylinder: Cylinder, tx: Any = None) -> Cylinder:
        """Create a new cylinder."""
        pass

    @abstractmethod
    async def update_cylinder(
        self, cylinder_id: str, fields: dict[str, Any], tx: Any = None
    ) -> bool:
        """Update cylinder fields."""
        pass

    @abstractmethod
    async def delete_cylinder(self, cylinder_id: str, tx: Any = None) -> bool:
        """Delete a cylinder (its movements cascade)."""
        pass

    @abstractmethod
    async def list_cylinders(
        self, filters: CylinderFilter, page: PageRequest
    ) -> tuple[list[Cylinder], int]:
        """List one page of cylinders and the total match count."""
        pass

    @abstractmethod
    async def list_all_cylinders(self, filters: CylinderFilter | None = None) -> list[Cylinder]:
        """Every matching cylinder, for aggregation and exports."""
        pass

    # --- Movements ---

    @abstractmethod
    async def add_movement(self, movement: CylinderMovement, tx: Any = None) -> CylinderMovement:
        """Record a cylinder movement."""
        pass

    @abstractmethod
    async def get_movement(self, movement_id: str) -> CylinderMovement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def update_movement(
        self, movement_id: str, fields: dict[str, Any], tx: Any = None
    ) -> bool:
        """Update correction fields of a movement."""
        pass

    @abstractmethod
    async def list_movements(
        self, filters: CylinderMovementFilter, page: PageRequest
    ) -> tuple[list[CylinderMovement], int]:
        """List one page of movements and the total match count."""
        pass
