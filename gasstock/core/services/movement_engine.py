"""
Movement Engine - the only component that changes stock counts or cylinder status.

Every operation follows the same shape:
1. Validate the request (nothing is written on failure)
2. Open a transaction and re-fetch the owner row
3. Write exactly one movement row
4. Apply the counter or status change to the owner
5. Commit, then invalidate the affected cache keys

A failure anywhere inside the transaction rolls back both writes. Operations
are not idempotent: repeating a sale records a second movement.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from gasstock.config import get_logger
from gasstock.core.entities import (
    CategoryMovement,
    CategoryMovementType,
    Cylinder,
    CylinderCategory,
    CylinderMovement,
    CylinderMovementType,
    CylinderStatus,
    MovementStatus,
)
from gasstock.core.entities.common import utcnow
from gasstock.core.exceptions import (
    BadRequestError,
    CategoryNotFoundError,
    CylinderNotFoundError,
    DuplicateSerialNumberError,
    InvalidUpdateError,
    MovementNotFoundError,
)
from gasstock.core.interfaces import ICategoryStore, ICylinderStore
from gasstock.core.rules import (
    category_deltas,
    movement_type_for_status,
    parse_cylinder_status,
    parse_enum,
    validate_quantity,
    validate_restock_split,
)
from gasstock.core.services.cache_support import CacheInvalidator
from gasstock.core.services.guards import unexpected_errors

logger = get_logger(__name__)

CATEGORY_MOVEMENT_CORRECTIONS = frozenset({"notes", "customer_id", "driver_id", "invoice_id"})
CYLINDER_MOVEMENT_CORRECTIONS = frozenset(
    {"notes", "customer_id", "customer_name", "invoice_id", "invoice_number"}
)
CYLINDER_IMMUTABLE = frozenset({"id", "created_at", "created_by", "updated_at"})


@dataclass
class CategoryMovementCommand:
    """A stock-affecting operation on a category."""

    category_id: str
    movement_type: CategoryMovementType | str
    quantity: int = 0
    # Restock only: split of the incoming cylinders
    restock_filled: int | None = None
    restock_empty: int | None = None
    from_location: str | None = None
    to_location: str | None = None
    customer_id: str | None = None
    driver_id: str | None = None
    invoice_id: str | None = None
    performed_by: str | None = None
    notes: str | None = None
    transaction_date: datetime | None = None
    status: MovementStatus | str = MovementStatus.COMPLETED


@dataclass
class CategoryMovementResult:
    """Movement joined with the category as it stands after the commit."""

    movement: CategoryMovement
    category: CylinderCategory


@dataclass
class CylinderMovementCommand:
    """A status and/or location change of one cylinder."""

    cylinder_id: str
    to_status: CylinderStatus | str
    movement_type: CylinderMovementType | str | None = None
    from_status: str | None = None
    from_location: str | None = None
    to_location: str | None = None
    quantity: int = 1
    customer_id: str | None = None
    customer_name: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    performed_by: str | None = None
    notes: str | None = None
    transaction_date: datetime | None = None


@dataclass
class CylinderMovementResult:
    movement: CylinderMovement
    cylinder: Cylinder


@dataclass
class CylinderUpdateResult:
    cylinder: Cylinder
    movement: CylinderMovement | None = None
    changed_fields: list[str] = field(default_factory=list)


class MovementEngine:
    """
    Transactional writer for both inventory flows.

    Category flow: sale, exchange, return and restock adjust the filled/empty
    counters. Asset flow: status transitions on individual cylinders.
    """

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

    # --- Category flow ---

    async def record_category_movement(
        self, command: CategoryMovementCommand
    ) -> CategoryMovementResult:
        """Record a movement and apply its counter deltas in one transaction."""
        movement_type = parse_enum(
            CategoryMovementType, command.movement_type, "movement_type"
        )
        status = parse_enum(MovementStatus, command.status, "status")

        # 1. Validate before any write
        restock_filled, restock_empty = command.restock_filled, command.restock_empty
        if movement_type == CategoryMovementType.RESTOCK and (
            restock_filled is not None or restock_empty is not None
        ):
            restock_filled, restock_empty = validate_restock_split(
                restock_filled or 0, restock_empty or 0
            )
            quantity = restock_filled + restock_empty
        else:
            quantity = validate_quantity(command.quantity)
        filled_delta, empty_delta = category_deltas(
            movement_type, quantity, restock_filled, restock_empty
        )

        if await self._categories.get_category(command.category_id) is None:
            raise CategoryNotFoundError(command.category_id)

        logger.info(
            "category_movement_started",
            category_id=command.category_id,
            movement_type=movement_type.value,
            quantity=quantity,
        )

        with unexpected_errors("record category movement", category_id=command.category_id):
            async with self._categories.transaction() as tx:
                # 2. Re-fetch inside the transaction
                category = await self._categories.get_category(command.category_id, tx)
                if category is None:
                    raise CategoryNotFoundError(command.category_id)

                now = utcnow()
                outbound = movement_type in (
                    CategoryMovementType.SALE,
                    CategoryMovementType.EXCHANGE,
                )

                # 3. Audit record
                movement = await self._categories.add_movement(
                    CategoryMovement(
                        category_id=category.id,
                        movement_type=movement_type,
                        quantity=quantity,
                        from_location=command.from_location
                        or (category.location if outbound else None),
                        to_location=command.to_location
                        or (None if outbound else category.location),
                        customer_id=command.customer_id,
                        driver_id=command.driver_id,
                        invoice_id=command.invoice_id,
                        performed_by=command.performed_by or self._default_actor,
                        transaction_date=command.transaction_date or now,
                        status=status,
                        notes=command.notes,
                    ),
                    tx,
                )

                # 4. Counter deltas, clamped at zero by the store
                restocked_at = now if movement_type == CategoryMovementType.RESTOCK else None
                await self._categories.adjust_quantities(
                    category.id, filled_delta, empty_delta, restocked_at, tx
                )
                category = await self._categories.get_category(category.id, tx)

        # 5. Committed
        await self._invalidator.category_changed(command.category_id)

        logger.info(
            "category_movement_complete",
            category_id=category.id,
            movement_id=movement.id,
            filled=category.filled_quantity,
            empty=category.empty_quantity,
        )
        return CategoryMovementResult(movement=movement, category=category)

    async def sell(self, category_id: str, quantity: int, **refs: Any) -> CategoryMovementResult:
        """Filled cylinders leave with the customer."""
        return await self.record_category_movement(
            CategoryMovementCommand(
                category_id=category_id,
                movement_type=CategoryMovementType.SALE,
                quantity=quantity,
                **refs,
            )
        )

    async def exchange(self, category_id: str, quantity: int, **refs: Any) -> CategoryMovementResult:
        """Filled cylinders out, the same number of empties back."""
        return await self.record_category_movement(
            CategoryMovementCommand(
                category_id=category_id,
                movement_type=CategoryMovementType.EXCHANGE,
                quantity=quantity,
                **refs,
            )
        )

    async def return_empties(
        self, category_id: str, quantity: int, **refs: Any
    ) -> CategoryMovementResult:
        """Empty cylinders come back into stock."""
        return await self.record_category_movement(
            CategoryMovementCommand(
                category_id=category_id,
                movement_type=CategoryMovementType.RETURN,
                quantity=quantity,
                **refs,
            )
        )

    async def restock(
        self,
        category_id: str,
        filled_quantity: int = 0,
        empty_quantity: int = 0,
        **refs: Any,
    ) -> CategoryMovementResult:
        """Receive filled and/or empty cylinders and stamp the restock time."""
        return await self.record_category_movement(
            CategoryMovementCommand(
                category_id=category_id,
                movement_type=CategoryMovementType.RESTOCK,
                restock_filled=filled_quantity,
                restock_empty=empty_quantity,
                **refs,
            )
        )

    async def correct_category_movement(
        self, movement_id: str, changes: dict[str, Any]
    ) -> CategoryMovement:
        """
        Edit the reference fields of a recorded movement.

        Quantity, type and owner are fixed once recorded; counters are never
        re-applied.
        """
        rejected = set(changes) - CATEGORY_MOVEMENT_CORRECTIONS
        if rejected:
            raise InvalidUpdateError(list(rejected), "recorded movements only accept corrections")
        if await self._categories.get_movement(movement_id) is None:
            raise MovementNotFoundError(movement_id)

        with unexpected_errors("correct category movement", movement_id=movement_id):
            await self._categories.update_movement(movement_id, changes)
            movement = await self._categories.get_movement(movement_id)
        logger.info("category_movement_corrected", movement_id=movement_id, fields=sorted(changes))
        return movement

    # --- Asset flow ---

    async def record_cylinder_movement(
        self, command: CylinderMovementCommand
    ) -> CylinderMovementResult:
        """Record a cylinder movement and move the cylinder to its target status."""
        to_status = parse_cylinder_status(command.to_status)
        quantity = validate_quantity(command.quantity)
        if command.movement_type is None:
            movement_type = movement_type_for_status(to_status)
        else:
            movement_type = parse_enum(
                CylinderMovementType, command.movement_type, "movement_type"
            )

        if await self._cylinders.get_cylinder(command.cylinder_id) is None:
            raise CylinderNotFoundError(command.cylinder_id)

        actor = command.performed_by or self._default_actor
        with unexpected_errors("record cylinder movement", cylinder_id=command.cylinder_id):
            async with self._cylinders.transaction() as tx:
                cylinder = await self._cylinders.get_cylinder(command.cylinder_id, tx)
                if cylinder is None:
                    raise CylinderNotFoundError(command.cylinder_id)

                movement = await self._cylinders.add_movement(
                    CylinderMovement(
                        cylinder_id=cylinder.id,
                        movement_type=movement_type,
                        from_status=command.from_status or cylinder.status.value,
                        to_status=to_status.value,
                        from_location=command.from_location or cylinder.location,
                        to_location=command.to_location or cylinder.location,
                        quantity=quantity,
                        customer_id=command.customer_id,
                        customer_name=command.customer_name,
                        invoice_id=command.invoice_id,
                        invoice_number=command.invoice_number,
                        performed_by=actor,
                        transaction_date=command.transaction_date or utcnow(),
                        notes=command.notes,
                    ),
                    tx,
                )

                changes: dict[str, Any] = {}
                if to_status != cylinder.status:
                    changes["status"] = to_status
                if command.to_location and command.to_location != cylinder.location:
                    changes["location"] = command.to_location
                if changes:
                    changes["updated_by"] = actor
                    await self._cylinders.update_cylinder(cylinder.id, changes, tx)
                cylinder = await self._cylinders.get_cylinder(cylinder.id, tx)

        await self._invalidator.cylinder_changed(command.cylinder_id)

        logger.info(
            "cylinder_movement_complete",
            cylinder_id=cylinder.id,
            movement_id=movement.id,
            movement_type=movement_type.value,
            status=cylinder.status.value,
        )
        return CylinderMovementResult(movement=movement, cylinder=cylinder)

    async def change_cylinder_status(
        self,
        cylinder_id: str,
        status: CylinderStatus | str,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> CylinderMovementResult:
        """Move a cylinder to ``status``; the movement type follows from the target."""
        return await self.record_cylinder_movement(
            CylinderMovementCommand(
                cylinder_id=cylinder_id,
                to_status=status,
                performed_by=performed_by,
                notes=notes,
            )
        )

    async def update_cylinder(
        self,
        cylinder_id: str,
        changes: dict[str, Any],
        performed_by: str | None = None,
    ) -> CylinderUpdateResult:
        """
        Edit a cylinder. A status change is recorded as a transfer movement
        in the same transaction as the edit.
        """
        immutable = set(changes) & CYLINDER_IMMUTABLE
        if immutable:
            raise InvalidUpdateError(list(immutable), "cannot be changed")
        changes = dict(changes)
        if "status" in changes:
            changes["status"] = parse_cylinder_status(changes["status"])

        current = await self._cylinders.get_cylinder(cylinder_id)
        if current is None:
            raise CylinderNotFoundError(cylinder_id)

        type_id = changes.get("cylinder_type_id")
        if type_id and type_id != current.cylinder_type_id:
            if await self._cylinders.get_cylinder_type(type_id) is None:
                raise BadRequestError("cylinder_type_id", "cylinder type does not exist", type_id)

        serial = changes.get("serial_number")
        if serial and serial != current.serial_number:
            if await self._cylinders.get_cylinder_by_serial(serial) is not None:
                raise DuplicateSerialNumberError(serial)

        actor = performed_by or self._default_actor
        movement = None
        with unexpected_errors("update cylinder", cylinder_id=cylinder_id):
            async with self._cylinders.transaction() as tx:
                current = await self._cylinders.get_cylinder(cylinder_id, tx)
                if current is None:
                    raise CylinderNotFoundError(cylinder_id)

                await self._cylinders.update_cylinder(
                    cylinder_id, {**changes, "updated_by": actor}, tx
                )

                new_status = changes.get("status")
                if new_status is not None and new_status != current.status:
                    movement = await self._cylinders.add_movement(
                        CylinderMovement(
                            cylinder_id=cylinder_id,
                            movement_type=CylinderMovementType.TRANSFER,
                            from_status=current.status.value,
                            to_status=new_status.value,
                            from_location=current.location,
                            to_location=changes.get("location", current.location),
                            performed_by=actor,
                        ),
                        tx,
                    )
                cylinder = await self._cylinders.get_cylinder(cylinder_id, tx)

        await self._invalidator.cylinder_changed(cylinder_id)
        logger.info("cylinder_updated", cylinder_id=cylinder_id, fields=sorted(changes))
        return CylinderUpdateResult(
            cylinder=cylinder, movement=movement, changed_fields=sorted(changes)
        )

    async def correct_cylinder_movement(
        self, movement_id: str, changes: dict[str, Any]
    ) -> CylinderMovement:
        """Edit the reference fields of a recorded cylinder movement."""
        rejected = set(changes) - CYLINDER_MOVEMENT_CORRECTIONS
        if rejected:
            raise InvalidUpdateError(list(rejected), "recorded movements only accept corrections")
        if await self._cylinders.get_movement(movement_id) is None:
            raise MovementNotFoundError(movement_id)

        with unexpected_errors("correct cylinder movement", movement_id=movement_id):
            await self._cylinders.update_movement(movement_id, changes)
            movement = await self._cylinders.get_movement(movement_id)
        logger.info("cylinder_movement_corrected", movement_id=movement_id, fields=sorted(changes))
        return movement
