"""SQLite implementation of category and category-movement storage."""

from datetime import datetime
from typing import Any

import aiosqlite

from gasstock.config import get_logger
from gasstock.core.entities import (
    CategoryFilter,
    CategoryMovement,
    CategoryMovementFilter,
    CylinderCategory,
    PageRequest,
)
from gasstock.core.entities.common import new_id, utcnow
from gasstock.core.interfaces import ICategoryStore
from gasstock.core.rules import RESTOCK_THRESHOLD
from gasstock.infrastructure.storage.sqlite.base import (
    Predicate,
    SQLiteStore,
    order_by,
    to_db,
)

logger = get_logger(__name__)

CATEGORY_SORT_COLUMNS = {
    "category_name": "category_name",
    "total_quantity": "total_quantity",
    "filled_quantity": "filled_quantity",
    "empty_quantity": "empty_quantity",
    "location": "location",
    "last_restocked": "last_restocked",
    "gas_type": "gas_type",
    "status": "status",
    "created_at": "created_at",
}

MOVEMENT_SORT_COLUMNS = {
    "transaction_date": "transaction_date",
    "quantity": "quantity",
    "from_location": "from_location",
    "to_location": "to_location",
    "movement_type": "movement_type",
    "status": "status",
    "created_at": "created_at",
}

# Quantities move only through adjust_quantities()
CATEGORY_EDITABLE = frozenset({
    "category_name",
    "description",
    "location",
    "price",
    "deposit_amount",
    "cylinder_weight",
    "gas_type",
    "status",
    "notes",
    "updated_at",
})

MOVEMENT_EDITABLE = frozenset({"notes", "customer_id", "driver_id", "invoice_id"})


class SQLiteCategoryStore(SQLiteStore, ICategoryStore):
    """SQLite storage for cylinder categories and their movements."""

    # --- Categories ---

    async def get_category(
        self, category_id: str, tx: aiosqlite.Connection | None = None
    ) -> CylinderCategory | None:
        async with self._guard("get_category"), self._reader(tx) as conn:
            cursor = await conn.execute(
                "SELECT * FROM cylinder_categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def create_category(
        self, category: CylinderCategory, tx: aiosqlite.Connection | None = None
    ) -> CylinderCategory:
        now = utcnow()
        category = category.model_copy(
            update={"id": category.id or new_id(), "created_at": now, "updated_at": now}
        )
        async with self._guard("create_category"), self._writer(tx) as conn:
            await self._insert(
                conn,
                "cylinder_categories",
                category.model_dump(include=set(CylinderCategory.model_fields)),
            )
        logger.info(
            "category_created",
            category_id=category.id,
            total_quantity=category.total_quantity,
        )
        return category

    async def update_category(
        self,
        category_id: str,
        fields: dict[str, Any],
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        fields = {**fields, "updated_at": utcnow()}
        async with self._guard("update_category"), self._writer(tx) as conn:
            updated = await self._update(
                conn, "cylinder_categories", category_id, fields, CATEGORY_EDITABLE
            )
        if updated:
            logger.info("category_updated", category_id=category_id, fields=sorted(fields))
        return updated

    async def delete_category(
        self, category_id: str, tx: aiosqlite.Connection | None = None
    ) -> bool:
        async with self._guard("delete_category"), self._writer(tx) as conn:
            cursor = await conn.execute(
                "DELETE FROM cylinder_categories WHERE id = ?", (category_id,)
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("category_deleted", category_id=category_id)
        return deleted

    async def adjust_quantities(
        self,
        category_id: str,
        filled_delta: int,
        empty_delta: int,
        restocked_at: datetime | None = None,
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        """
        Shift both counters in one statement.

        Each counter is clamped at zero and the total is rewritten as the sum
        of the clamped counters, so the row is never observed half-updated.
        """
        async with self._guard("adjust_quantities"), self._writer(tx) as conn:
            cursor = await conn.execute(
                """
                UPDATE cylinder_categories SET
                    filled_quantity = MAX(0, filled_quantity + ?),
                    empty_quantity = MAX(0, empty_quantity + ?),
                    total_quantity = MAX(0, filled_quantity + ?) + MAX(0, empty_quantity + ?),
                    last_restocked = COALESCE(?, last_restocked),
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    filled_delta,
                    empty_delta,
                    filled_delta,
                    empty_delta,
                    to_db(restocked_at),
                    to_db(utcnow()),
                    category_id,
                ),
            )
            adjusted = cursor.rowcount > 0
        logger.debug(
            "category_quantities_adjusted",
            category_id=category_id,
            filled_delta=filled_delta,
            empty_delta=empty_delta,
        )
        return adjusted

    async def list_categories(
        self, filters: CategoryFilter, page: PageRequest
    ) -> tuple[list[CylinderCategory], int]:
        where = (
            Predicate()
            .search(["category_name", "description", "location"], filters.search)
            .contains("location", filters.location)
            .equals("status", filters.status)
            .equals("gas_type", filters.gas_type)
            .at_least("filled_quantity", filters.min_filled_quantity)
            .at_most("filled_quantity", filters.max_filled_quantity)
        )
        if filters.requires_restock is True:
            where.add(
                "(filled_quantity < total_quantity * ? AND status = 'active')",
                RESTOCK_THRESHOLD,
            )
        elif filters.requires_restock is False:
            where.add(
                "NOT (filled_quantity < total_quantity * ? AND status = 'active')",
                RESTOCK_THRESHOLD,
            )
        order = order_by(page, CATEGORY_SORT_COLUMNS, "created_at", "desc")

        async with self._guard("list_categories"), self._reader() as conn:
            rows, total = await self._page(conn, "cylinder_categories", where, order, page)
        return [self._row_to_category(r) for r in rows], total

    async def list_all_categories(self) -> list[CylinderCategory]:
        async with self._guard("list_all_categories"), self._reader() as conn:
            cursor = await conn.execute(
                "SELECT * FROM cylinder_categories ORDER BY category_name, id"
            )
            rows = await cursor.fetchall()
        return [self._row_to_category(r) for r in rows]

    async def count_movements(self, category_id: str) -> int:
        async with self._guard("count_movements"), self._reader() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM category_movements WHERE category_id = ?",
                (category_id,),
            )
            return (await cursor.fetchone())[0]

    # --- Movements ---

    async def add_movement(
        self, movement: CategoryMovement, tx: aiosqlite.Connection | None = None
    ) -> CategoryMovement:
        movement = movement.model_copy(
            update={"id": movement.id or new_id(), "created_at": utcnow()}
        )
        async with self._guard("add_category_movement"), self._writer(tx) as conn:
            await self._insert(conn, "category_movements", movement.model_dump())
        logger.info(
            "category_movement_recorded",
            movement_id=movement.id,
            category_id=movement.category_id,
            type=movement.movement_type.value,
            qty=movement.quantity,
        )
        return movement

    async def get_movement(self, movement_id: str) -> CategoryMovement | None:
        async with self._guard("get_category_movement"), self._reader() as conn:
            cursor = await conn.execute(
                "SELECT * FROM category_movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_movement(row) if row else None

    async def update_movement(
        self,
        movement_id: str,
        fields: dict[str, Any],
        tx: aiosqlite.Connection | None = None,
    ) -> bool:
        async with self._guard("update_category_movement"), self._writer(tx) as conn:
            return await self._update(
                conn, "category_movements", movement_id, fields, MOVEMENT_EDITABLE
            )

    async def list_movements(
        self, filters: CategoryMovementFilter, page: PageRequest
    ) -> tuple[list[CategoryMovement], int]:
        where = (
            Predicate()
            .equals("category_id", filters.category_id)
            .equals("movement_type", filters.movement_type)
            .equals("status", filters.status)
            .equals("customer_id", filters.customer_id)
            .equals("driver_id", filters.driver_id)
            .at_least("transaction_date", filters.from_date)
            .at_most("transaction_date", filters.to_date)
            .search(["from_location", "to_location", "notes"], filters.search)
        )
        order = order_by(page, MOVEMENT_SORT_COLUMNS, "transaction_date", "desc")

        async with self._guard("list_category_movements"), self._reader() as conn:
            rows, total = await self._page(conn, "category_movements", where, order, page)
        return [self._row_to_movement(r) for r in rows], total

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> CylinderCategory:
        return CylinderCategory.model_validate(dict(row))

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> CategoryMovement:
        return CategoryMovement.model_validate(dict(row))
