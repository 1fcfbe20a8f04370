"""SQLite implementation of cylinder type, cylinder and cylinder-movement storage."""

from datetime import timedelta
from typing import Any

import aiosqlite

from gasstock.config import get_logger
from gasstock.core.entities import (
    Cylinder,
    CylinderFilter,
    CylinderMovement,
    CylinderMovementFilter,
    CylinderType,
    CylinderTypeFilter,
    PageRequest,
)
from gasstock.core.entities.common import new_id, utcnow
from gasstock.core.interfaces import ICylinderStore
from gasstock.infrastructure.storage.sqlite.base import Predicate, SQLiteStore, order_by

logger = get_logger(__name__)

TYPE_SORT_COLUMNS = {
    "name": "name",
    "capacity": "capacity",
    "gas_type": "gas_type",
    "material": "material",
    "created_at": "created_at",
}

CYLINDER_SORT_COLUMNS = {
    "serial_number": "serial_number",
    "status": "status",
    "location": "location",
    "fill_level": "fill_level",
    "next_inspection_date": "next_inspection_date",
    "maintenance_due_date": "maintenance_due_date",
    "manufacturing_date": "manufacturing_date",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

MOVEMENT_SORT_COLUMNS = {
    "transaction_date": "transaction_date",
    "movement_type": "movement_type",
    "to_status": "to_status",
    "created_at": "created_at",
}

TYPE_EDITABLE = frozenset(set(CylinderType.model_fields) - {"id", "created_at"})

CYLINDER_EDITABLE = frozenset(set(Cylinder.model_fields) - {"id", "created_at", "created_by"})

MOVEMENT_EDITABLE = frozenset({"notes", "customer_id", "customer_name", "invoice_id", "invoice_number"})


class SQLiteCylinderStore(SQLiteStore, ICylinderStore):
    """SQLite storage for the serialized-asset flow."""

    # --- Types ---

    async def get_cylinder_type(
        self, type_id: str, tx: aiosqlite.Connection | None = None
    ) -> CylinderType | None:
        async with self._guard("get_cylinder_type"), self._reader(tx) as conn:
            cursor = await conn.execute("SELECT * FROM cylinder_types WHERE id = ?", (type_id,))
            row = await cursor.fetchone()
            return self._row_to_type(row) if row else None

    async def get_cylinder_types(self, type_ids: list[str]) -> dict[str, CylinderType]:
        if not type_ids:
            return {}
        ids = sorted(set(type_ids))
        placeholders = ", ".join("?" for _ in ids)
        async with self._guard("get_cylinder_types"), self._reader() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM cylinder_types WHERE id IN ({placeholders})", ids
            )
            rows = await cursor.fetchall()
        return {row["id"]: self._row_to_type(row) for row in rows}

    async def create_cylinder_type(
        self, cylinder_type: CylinderType, tx: aiosqlite.Connection | None = None
    ) -> CylinderType:
        now = utcnow()
        cylinder_type = cylinder_type.model_copy(
            update={"id": cylinder_type.id or new_id(), "created_at": now, "updated_at": now}
        )
        async with self._guard("create_cylinder_type"), self._writer(tx) as conn:
            await self._insert(conn, "cylinder_types", cylinder_type.model_dump())
        logger.info("cylinder_type_created", type_id=cylinder_type.id, name=cylinder_type.name)
        return cylinder_type

    async def update_cylinder_type(
        self,
        type_id: str,
        fields: dict[str, Any],
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        fields = {**fields, "updated_at": utcnow()}
        async with self._guard("update_cylinder_type"), self._writer(tx) as conn:
            return await self._update(conn, "cylinder_types", type_id, fields, TYPE_EDITABLE)

    async def delete_cylinder_type(
        self, type_id: str, tx: aiosqlite.Connection | None = None
    ) -> bool:
        async with self._guard("delete_cylinder_type"), self._writer(tx) as conn:
            cursor = await conn.execute("DELETE FROM cylinder_types WHERE id = ?", (type_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("cylinder_type_deleted", type_id=type_id)
        return deleted

    async def list_cylinder_types(
        self, filters: CylinderTypeFilter, page: PageRequest
    ) -> tuple[list[CylinderType], int]:
        where = (
            Predicate()
            .search(["name", "description", "gas_type", "material"], filters.search)
            .equals("gas_type", filters.gas_type)
            .equals("material", filters.material)
            .at_least("capacity", filters.min_capacity)
            .at_most("capacity", filters.max_capacity)
            .equals("is_active", filters.is_active)
        )
        order = order_by(page, TYPE_SORT_COLUMNS, "name", "asc")
        async with self._guard("list_cylinder_types"), self._reader() as conn:
            rows, total = await self._page(conn, "cylinder_types", where, order, page)
        return [self._row_to_type(r) for r in rows], total

    async def count_cylinders_of_type(self, type_id: str) -> int:
        async with self._guard("count_cylinders_of_type"), self._reader() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM cylinders WHERE cylinder_type_id = ?", (type_id,)
            )
            return (await cursor.fetchone())[0]

    # --- Cylinders ---

    async def get_cylinder(
        self, cylinder_id: str, tx: aiosqlite.Connection | None = None
    ) -> Cylinder | None:
        async with self._guard("get_cylinder"), self._reader(tx) as conn:
            cursor = await conn.execute("SELECT * FROM cylinders WHERE id = ?", (cylinder_id,))
            row = await cursor.fetchone()
            return self._row_to_cylinder(row) if row else None

    async def get_cylinder_by_serial(
        self, serial_number: str, tx: aiosqlite.Connection | None = None
    ) -> Cylinder | None:
        async with self._guard("get_cylinder_by_serial"), self._reader(tx) as conn:
            cursor = await conn.execute(
                "SELECT * FROM cylinders WHERE serial_number = ?", (serial_number,)
            )
            row = await cursor.fetchone()
            return self._row_to_cylinder(row) if row else None

    async def create_cylinder(
        self, cylinder: Cylinder, tx: aiosqlite.Connection | None = None
    ) -> Cylinder:
        now = utcnow()
        cylinder = cylinder.model_copy(
            update={"id": cylinder.id or new_id(), "created_at": now, "updated_at": now}
        )
        async with self._guard("create_cylinder"), self._writer(tx) as conn:
            await self._insert(
                conn, "cylinders", cylinder.model_dump(include=set(Cylinder.model_fields))
            )
        logger.info(
            "cylinder_created",
            cylinder_id=cylinder.id,
            serial_number=cylinder.serial_number,
        )
        return cylinder

    async def update_cylinder(
        self,
        cylinder_id: str,
        fields: dict[str, Any],
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        fields = {**fields, "updated_at": utcnow()}
        async with self._guard("update_cylinder"), self._writer(tx) as conn:
            return await self._update(conn, "cylinders", cylinder_id, fields, CYLINDER_EDITABLE)

    async def delete_cylinder(
        self, cylinder_id: str, tx: aiosqlite.Connection | None = None
    ) -> bool:
        async with self._guard("delete_cylinder"), self._writer(tx) as conn:
            cursor = await conn.execute("DELETE FROM cylinders WHERE id = ?", (cylinder_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("cylinder_deleted", cylinder_id=cylinder_id)
        return deleted

    def _cylinder_predicate(self, filters: CylinderFilter) -> Predicate:
        where = (
            Predicate()
            .search(["serial_number", "manufacturer_name", "location"], filters.search)
            .equals("status", filters.status)
            .equals("cylinder_type_id", filters.cylinder_type_id)
            .equals("assigned_customer_id", filters.customer_id)
            .contains("location", filters.location)
            .equals("is_active", filters.is_active)
            .at_least("fill_level", filters.min_fill_level)
            .at_most("fill_level", filters.max_fill_level)
        )
        if filters.gas_type:
            where.add(
                "cylinder_type_id IN (SELECT id FROM cylinder_types WHERE gas_type = ?)",
                filters.gas_type,
            )
        horizon = utcnow().date() + timedelta(days=filters.threshold_days)
        if filters.needs_inspection:
            where.add(
                "next_inspection_date IS NOT NULL AND next_inspection_date <= ?", horizon
            )
        if filters.needs_maintenance:
            where.add(
                "maintenance_due_date IS NOT NULL AND maintenance_due_date <= ?", horizon
            )
        return where

    async def list_cylinders(
        self, filters: CylinderFilter, page: PageRequest
    ) -> tuple[list[Cylinder], int]:
        where = self._cylinder_predicate(filters)
        order = order_by(page, CYLINDER_SORT_COLUMNS, "serial_number", "asc")
        async with self._guard("list_cylinders"), self._reader() as conn:
            rows, total = await self._page(conn, "cylinders", where, order, page)
        return [self._row_to_cylinder(r) for r in rows], total

    async def list_all_cylinders(self, filters: CylinderFilter | None = None) -> list[Cylinder]:
        where = self._cylinder_predicate(filters or CylinderFilter())
        async with self._guard("list_all_cylinders"), self._reader() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM cylinders {where.sql} ORDER BY serial_number", where.params
            )
            rows = await cursor.fetchall()
        return [self._row_to_cylinder(r) for r in rows]

    # --- Movements ---

    async def add_movement(
        self, movement: CylinderMovement, tx: aiosqlite.Connection | None = None
    ) -> CylinderMovement:
        movement = movement.model_copy(
            update={"id": movement.id or new_id(), "created_at": utcnow()}
        )
        async with self._guard("add_cylinder_movement"), self._writer(tx) as conn:
            await self._insert(conn, "cylinder_movements", movement.model_dump())
        logger.info(
            "cylinder_movement_recorded",
            movement_id=movement.id,
            cylinder_id=movement.cylinder_id,
            type=movement.movement_type.value,
            from_status=movement.from_status,
            to_status=movement.to_status,
        )
        return movement

    async def get_movement(self, movement_id: str) -> CylinderMovement | None:
        async with self._guard("get_cylinder_movement"), self._reader() as conn:
            cursor = await conn.execute(
                "SELECT * FROM cylinder_movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_movement(row) if row else None

    async def update_movement(
        self,
        movement_id: str,
        fields: dict[str, Any],
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        async with self._guard("update_cylinder_movement"), self._writer(tx) as conn:
            return await self._update(
                conn, "cylinder_movements", movement_id, fields, MOVEMENT_EDITABLE
            )

    async def list_movements(
        self, filters: CylinderMovementFilter, page: PageRequest
    ) -> tuple[list[CylinderMovement], int]:
        where = (
            Predicate()
            .equals("cylinder_id", filters.cylinder_id)
            .equals("movement_type", filters.movement_type)
            .equals("customer_id", filters.customer_id)
            .at_least("transaction_date", filters.start_date)
            .at_most("transaction_date", filters.end_date)
            .search(["to_location", "from_location", "notes", "customer_name"], filters.search)
        )
        order = order_by(page, MOVEMENT_SORT_COLUMNS, "transaction_date", "desc")
        async with self._guard("list_cylinder_movements"), self._reader() as conn:
            rows, total = await self._page(conn, "cylinder_movements", where, order, page)
        return [self._row_to_movement(r) for r in rows], total

    @staticmethod
    def _row_to_type(row: aiosqlite.Row) -> CylinderType:
        return CylinderType.model_validate(dict(row))

    @staticmethod
    def _row_to_cylinder(row: aiosqlite.Row) -> Cylinder:
        return Cylinder.model_validate(dict(row))

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> CylinderMovement:
        return CylinderMovement.model_validate(dict(row))
