"""
Catalogue maintenance: categories, cylinder types and cylinders.

Only non-quantity data changes here. Stock counts and cylinder status move
through the MovementEngine.
"""

from typing import Any

from gasstock.config import get_logger
from gasstock.core.entities import Cylinder, CylinderCategory, CylinderFilter, CylinderType
from gasstock.core.exceptions import (
    BadRequestError,
    CategoryNotFoundError,
    CylinderNotFoundError,
    CylinderTypeNotFoundError,
    DuplicateSerialNumberError,
    InvalidUpdateError,
    ReferencedEntityError,
)
from gasstock.core.interfaces import ICategoryStore, ICylinderStore
from gasstock.core.services.cache_support import CacheInvalidator
from gasstock.core.services.guards import unexpected_errors

logger = get_logger(__name__)

CATEGORY_QUANTITY_FIELDS = frozenset(
    {"total_quantity", "filled_quantity", "empty_quantity", "last_restocked"}
)
CATEGORY_FIXED_FIELDS = frozenset({"id", "created_at", "updated_at"})


class RegistryService:
    """Create, edit and delete catalogue records with referential guards."""

    def __init__(
        self,
        category_store: ICategoryStore,
        cylinder_store: ICylinderStore,
        invalidator: CacheInvalidator,
        default_actor: str = "system",
    ):
        self._categories = category_store
        self._cylinders = cylinder_store
        self._invalidator = invalidator
        self._default_actor = default_actor

    # --- Categories ---

    async def create_category(self, category: CylinderCategory) -> CylinderCategory:
        """
        Create a category whose total equals filled plus empty.

        When the empty count is left at zero it is derived from the total.
        """
        for name in ("total_quantity", "filled_quantity", "empty_quantity"):
            value = getattr(category, name)
            if value < 0:
                raise BadRequestError(name, "must not be negative", value)
        if category.filled_quantity > category.total_quantity:
            raise BadRequestError(
                "filled_quantity", "cannot exceed total_quantity", category.filled_quantity
            )
        if category.empty_quantity == 0:
            category = category.model_copy(
                update={"empty_quantity": category.total_quantity - category.filled_quantity}
            )
        if category.filled_quantity + category.empty_quantity != category.total_quantity:
            raise BadRequestError(
                "total_quantity",
                "must equal filled_quantity + empty_quantity",
                category.total_quantity,
            )

        with unexpected_errors("create category"):
            created = await self._categories.create_category(category)
        await self._invalidator.category_changed()
        return created

    async def update_category(
        self, category_id: str, changes: dict[str, Any]
    ) -> CylinderCategory:
        """Edit descriptive fields. Counters only change through movements."""
        blocked = set(changes) & (CATEGORY_QUANTITY_FIELDS | CATEGORY_FIXED_FIELDS)
        if blocked:
            raise InvalidUpdateError(
                list(blocked), "quantities change only through stock movements"
            )
        if await self._categories.get_category(category_id) is None:
            raise CategoryNotFoundError(category_id)

        with unexpected_errors("update category", category_id=category_id):
            await self._categories.update_category(category_id, changes)
            category = await self._categories.get_category(category_id)
        await self._invalidator.category_changed(category_id)
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a category that has no recorded movements."""
        if await self._categories.get_category(category_id) is None:
            raise CategoryNotFoundError(category_id)
        movements = await self._categories.count_movements(category_id)
        if movements:
            raise ReferencedEntityError("category", category_id, "movements", movements)

        with unexpected_errors("delete category", category_id=category_id):
            await self._categories.delete_category(category_id)
        await self._invalidator.category_changed(category_id)

    # --- Cylinder types ---

    async def create_cylinder_type(self, cylinder_type: CylinderType) -> CylinderType:
        if cylinder_type.capacity <= 0:
            raise BadRequestError("capacity", "must be greater than zero", cylinder_type.capacity)
        with unexpected_errors("create cylinder type"):
            created = await self._cylinders.create_cylinder_type(cylinder_type)
        await self._invalidator.cylinder_changed()
        return created

    async def update_cylinder_type(self, type_id: str, changes: dict[str, Any]) -> CylinderType:
        blocked = set(changes) & CATEGORY_FIXED_FIELDS
        if blocked:
            raise InvalidUpdateError(list(blocked), "cannot be changed")
        if await self._cylinders.get_cylinder_type(type_id) is None:
            raise CylinderTypeNotFoundError(type_id)

        with unexpected_errors("update cylinder type", type_id=type_id):
            await self._cylinders.update_cylinder_type(type_id, changes)
            cylinder_type = await self._cylinders.get_cylinder_type(type_id)
            affected = await self._cylinders.list_all_cylinders(
                CylinderFilter(cylinder_type_id=type_id)
            )
        await self._invalidator.cylinder_type_changed([c.id for c in affected])
        return cylinder_type

    async def delete_cylinder_type(self, type_id: str) -> None:
        """Delete a type no cylinder is built to."""
        if await self._cylinders.get_cylinder_type(type_id) is None:
            raise CylinderTypeNotFoundError(type_id)
        in_use = await self._cylinders.count_cylinders_of_type(type_id)
        if in_use:
            raise ReferencedEntityError("cylinder type", type_id, "cylinders", in_use)

        with unexpected_errors("delete cylinder type", type_id=type_id):
            await self._cylinders.delete_cylinder_type(type_id)
        await self._invalidator.cylinder_changed()

    # --- Cylinders ---

    async def create_cylinder(
        self, cylinder: Cylinder, performed_by: str | None = None
    ) -> Cylinder:
        """Register a cylinder against an existing type with a unique serial number."""
        if await self._cylinders.get_cylinder_type(cylinder.cylinder_type_id) is None:
            raise BadRequestError(
                "cylinder_type_id", "cylinder type does not exist", cylinder.cylinder_type_id
            )
        if await self._cylinders.get_cylinder_by_serial(cylinder.serial_number) is not None:
            raise DuplicateSerialNumberError(cylinder.serial_number)

        actor = performed_by or self._default_actor
        cylinder = cylinder.model_copy(update={"created_by": actor, "updated_by": actor})
        with unexpected_errors("create cylinder", serial_number=cylinder.serial_number):
            created = await self._cylinders.create_cylinder(cylinder)
        await self._invalidator.cylinder_changed()
        return created

    async def delete_cylinder(self, cylinder_id: str) -> None:
        """Delete a cylinder together with its movement history."""
        if await self._cylinders.get_cylinder(cylinder_id) is None:
            raise CylinderNotFoundError(cylinder_id)
        with unexpected_errors("delete cylinder", cylinder_id=cylinder_id):
            await self._cylinders.delete_cylinder(cylinder_id)
        await self._invalidator.cylinder_changed(cylinder_id)
