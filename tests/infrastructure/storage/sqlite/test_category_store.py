"""Tests for SQLiteCategoryStore against a real temporary database."""

from datetime import UTC, datetime

import pytest

from gasstock.core.entities import (
    CategoryFilter,
    CategoryMovement,
    CategoryMovementFilter,
    CategoryMovementType,
    CategoryStatus,
    PageRequest,
)
from gasstock.core.exceptions import InvalidSortFieldError
from gasstock.infrastructure.storage.sqlite import SQLiteCategoryStore


class TestCategoryCrud:
    async def test_create_and_get(self, category_store: SQLiteCategoryStore, category):
        fetched = await category_store.get_category(category.id)
        assert fetched is not None
        assert fetched.category_name == "12kg LPG"
        assert fetched.total_quantity == 100
        assert fetched.status == CategoryStatus.ACTIVE

    async def test_get_missing(self, category_store: SQLiteCategoryStore):
        assert await category_store.get_category("missing") is None

    async def test_update_ignores_counters(self, category_store: SQLiteCategoryStore, category):
        await category_store.update_category(
            category.id, {"location": "Depot B", "filled_quantity": 1}
        )
        fetched = await category_store.get_category(category.id)
        assert fetched.location == "Depot B"
        assert fetched.filled_quantity == 80

    async def test_delete(self, category_store: SQLiteCategoryStore, category):
        assert await category_store.delete_category(category.id) is True
        assert await category_store.get_category(category.id) is None
        assert await category_store.delete_category(category.id) is False


class TestAdjustQuantities:
    async def test_applies_both_deltas(self, category_store: SQLiteCategoryStore, category):
        await category_store.adjust_quantities(category.id, -10, 10)
        fetched = await category_store.get_category(category.id)
        assert (fetched.filled_quantity, fetched.empty_quantity) == (70, 30)
        assert fetched.total_quantity == 100

    async def test_clamps_at_zero(self, category_store: SQLiteCategoryStore, category):
        await category_store.adjust_quantities(category.id, -500, 0)
        fetched = await category_store.get_category(category.id)
        assert fetched.filled_quantity == 0
        assert fetched.empty_quantity == 20
        assert fetched.total_quantity == 20

    async def test_stamps_restock_time(self, category_store: SQLiteCategoryStore, category):
        stamp = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
        await category_store.adjust_quantities(category.id, 5, 0, stamp)
        fetched = await category_store.get_category(category.id)
        assert fetched.last_restocked == stamp

    async def test_keeps_restock_time_when_not_given(
        self, category_store: SQLiteCategoryStore, category
    ):
        stamp = datetime(2026, 5, 1, tzinfo=UTC)
        await category_store.adjust_quantities(category.id, 5, 0, stamp)
        await category_store.adjust_quantities(category.id, -1, 0)
        fetched = await category_store.get_category(category.id)
        assert fetched.last_restocked == stamp


class TestListCategories:
    @pytest.fixture
    async def seeded(self, category_store: SQLiteCategoryStore, make_category):
        await category_store.create_category(
            make_category(category_name="Oxygen 50L", location="North Yard", gas_type="oxygen")
        )
        await category_store.create_category(
            make_category(total=50, filled=5, empty=45, category_name="LPG 45kg")
        )
        await category_store.create_category(
            make_category(category_name="Old Stock", status=CategoryStatus.INACTIVE, filled=0, empty=100)
        )

    async def test_search(self, category_store: SQLiteCategoryStore, seeded):
        items, total = await category_store.list_categories(
            CategoryFilter(search="oxygen"), PageRequest()
        )
        assert total == 1
        assert items[0].category_name == "Oxygen 50L"

    async def test_location_substring(self, category_store: SQLiteCategoryStore, seeded):
        _, total = await category_store.list_categories(
            CategoryFilter(location="north"), PageRequest()
        )
        assert total == 1

    async def test_requires_restock(self, category_store: SQLiteCategoryStore, seeded):
        items, total = await category_store.list_categories(
            CategoryFilter(requires_restock=True), PageRequest()
        )
        assert total == 1
        assert items[0].category_name == "LPG 45kg"

    async def test_pagination_and_sort(self, category_store: SQLiteCategoryStore, seeded):
        items, total = await category_store.list_categories(
            CategoryFilter(), PageRequest(page=2, limit=2, sort_by="category_name", sort_order="asc")
        )
        assert total == 3
        assert [c.category_name for c in items] == ["Oxygen 50L"]

    async def test_unknown_sort_field(self, category_store: SQLiteCategoryStore, seeded):
        with pytest.raises(InvalidSortFieldError):
            await category_store.list_categories(
                CategoryFilter(), PageRequest(sort_by="price; DROP TABLE x")
            )


class TestMovements:
    async def test_add_and_list(self, category_store: SQLiteCategoryStore, category):
        movement = await category_store.add_movement(
            CategoryMovement(
                category_id=category.id,
                movement_type=CategoryMovementType.SALE,
                quantity=3,
                customer_id="cust-1",
            )
        )
        items, total = await category_store.list_movements(
            CategoryMovementFilter(category_id=category.id), PageRequest()
        )
        assert total == 1
        assert items[0].id == movement.id
        assert await category_store.count_movements(category.id) == 1

    async def test_correction_only_touches_references(
        self, category_store: SQLiteCategoryStore, category
    ):
        movement = await category_store.add_movement(
            CategoryMovement(
                category_id=category.id, movement_type=CategoryMovementType.RETURN, quantity=2
            )
        )
        await category_store.update_movement(movement.id, {"notes": "late", "quantity": 99})
        fetched = await category_store.get_movement(movement.id)
        assert fetched.notes == "late"
        assert fetched.quantity == 2

    async def test_movements_cascade_with_category(
        self, category_store: SQLiteCategoryStore, category
    ):
        movement = await category_store.add_movement(
            CategoryMovement(
                category_id=category.id, movement_type=CategoryMovementType.SALE, quantity=1
            )
        )
        await category_store.delete_category(category.id)
        assert await category_store.get_movement(movement.id) is None

    async def test_rollback_discards_both_writes(
        self, category_store: SQLiteCategoryStore, category
    ):
        with pytest.raises(RuntimeError):
            async with category_store.transaction() as tx:
                await category_store.add_movement(
                    CategoryMovement(
                        category_id=category.id,
                        movement_type=CategoryMovementType.SALE,
                        quantity=5,
                    ),
                    tx,
                )
                await category_store.adjust_quantities(category.id, -5, 0, None, tx)
                raise RuntimeError("boom")

        assert await category_store.count_movements(category.id) == 0
        fetched = await category_store.get_category(category.id)
        assert fetched.filled_quantity == 80
