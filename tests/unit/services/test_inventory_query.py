"""Tests for InventoryQueryService with mocked stores."""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from gasstock.core.entities import (
    CategoryStatus,
    Cylinder,
    CylinderCategory,
    CylinderStatus,
    CylinderType,
    GasType,
    PageRequest,
)
from gasstock.core.exceptions import (
    BadRequestError,
    CategoryNotFoundError,
    CylinderNotFoundError,
)
from gasstock.core.services import CacheInvalidator, InventoryQueryService, SafeCache
from gasstock.core.services.inventory_query import summarize_categories, summarize_cylinders
from gasstock.infrastructure.cache import MemoryCache


def _category(cid: str, total: int, filled: int, **kwargs) -> CylinderCategory:
    return CylinderCategory(
        id=cid,
        category_name=f"cat-{cid}",
        total_quantity=total,
        filled_quantity=filled,
        empty_quantity=total - filled,
        **kwargs,
    )


@pytest.fixture
def category_store() -> AsyncMock:
    store = AsyncMock()
    store.get_category.return_value = _category("c1", 100, 80, location="Depot")
    return store


@pytest.fixture
def cylinder_store() -> AsyncMock:
    store = AsyncMock()
    oxygen = CylinderType(id="t1", name="O2 50L", capacity=50, gas_type=GasType.OXYGEN)
    store.get_cylinder.return_value = Cylinder(
        id="x1", serial_number="OX-1", cylinder_type_id="t1", capacity=50, fill_level=25
    )
    store.get_cylinder_type.return_value = oxygen
    store.get_cylinder_types.return_value = {"t1": oxygen}
    return store


@pytest.fixture
def cache() -> SafeCache:
    return SafeCache(MemoryCache(), ttl_seconds=600)


@pytest.fixture
def service(category_store, cylinder_store, cache) -> InventoryQueryService:
    return InventoryQueryService(category_store, cylinder_store, cache)


class TestCachedLookups:
    async def test_category_read_through(self, service, category_store):
        first = await service.get_category("c1")
        second = await service.get_category("c1")

        assert first == second
        assert first.requires_restock is False
        category_store.get_category.assert_awaited_once_with("c1")

    async def test_invalidation_forces_reload(self, service, category_store, cache):
        await service.get_category("c1")
        await CacheInvalidator(cache).category_changed("c1")
        await service.get_category("c1")

        assert category_store.get_category.await_count == 2

    async def test_missing_category_not_cached(self, service, category_store):
        category_store.get_category.return_value = None
        with pytest.raises(CategoryNotFoundError):
            await service.get_category("nope")
        with pytest.raises(CategoryNotFoundError):
            await service.get_category("nope")
        assert category_store.get_category.await_count == 2

    async def test_cylinder_detail_joined_and_cached(self, service, cylinder_store):
        detail = await service.get_cylinder("x1")
        await service.get_cylinder("x1")

        assert detail.type_name == "O2 50L"
        assert detail.gas_type == "oxygen"
        assert detail.fill_percentage == 50.0
        cylinder_store.get_cylinder.assert_awaited_once()

    async def test_missing_cylinder(self, service, cylinder_store):
        cylinder_store.get_cylinder.return_value = None
        with pytest.raises(CylinderNotFoundError):
            await service.get_cylinder("nope")

    async def test_lookup_by_serial(self, service, cylinder_store):
        cylinder_store.get_cylinder_by_serial.return_value = Cylinder(
            id="x1", serial_number="OX-1", cylinder_type_id="t1", capacity=50, fill_level=25
        )

        detail = await service.get_cylinder_by_serial("OX-1")

        assert detail.id == "x1"
        assert detail.type_name == "O2 50L"
        cylinder_store.get_cylinder_by_serial.assert_awaited_once_with("OX-1")

    async def test_unknown_serial(self, service, cylinder_store):
        cylinder_store.get_cylinder_by_serial.return_value = None
        with pytest.raises(CylinderNotFoundError):
            await service.get_cylinder_by_serial("OX-404")
        cylinder_store.get_cylinder.assert_not_awaited()


class TestCacheFailures:
    async def test_broken_cache_falls_back_to_store(self, category_store, cylinder_store):
        broken = MagicMock()
        broken.get = AsyncMock(side_effect=ConnectionError("cache down"))
        broken.set = AsyncMock(side_effect=ConnectionError("cache down"))
        broken.delete = AsyncMock(side_effect=ConnectionError("cache down"))
        service = InventoryQueryService(category_store, cylinder_store, SafeCache(broken))

        detail = await service.get_category("c1")
        await CacheInvalidator(SafeCache(broken)).category_changed("c1")

        assert detail.id == "c1"
        category_store.get_category.assert_awaited_once()


class TestSummary:
    async def test_summary_cached_until_invalidated(self, service, category_store, cache):
        category_store.list_all_categories.return_value = [_category("c1", 100, 10)]

        first = await service.summary()
        await service.summary()
        assert first.requires_restock == 1
        assert category_store.list_all_categories.await_count == 1

        category_store.list_all_categories.return_value = [_category("c1", 100, 90)]
        await CacheInvalidator(cache).category_changed("c1")
        recounted = await service.summary()

        assert recounted.requires_restock == 0
        assert category_store.list_all_categories.await_count == 2

    def test_summarize_categories(self):
        summary = summarize_categories([
            _category("a", 100, 80, location="North", gas_type="lpg"),
            _category("b", 50, 5, location="North", gas_type="lpg"),
            _category("c", 20, 0, status=CategoryStatus.INACTIVE, location="", gas_type=None),
        ])

        assert summary.total_categories == 3
        assert summary.active_categories == 2
        assert summary.total_cylinders == 150
        assert summary.total_filled == 85
        assert summary.total_empty == 65
        assert summary.by_location["North"].total == 150
        assert "" not in summary.by_location
        assert summary.by_gas_type == {"lpg": 150}
        assert summary.by_status == {"active": 2, "inactive": 1}
        assert summary.requires_restock == 1

    def test_inactive_categories_left_out_of_totals(self):
        summary = summarize_categories([
            _category("a", 100, 80, location="North", gas_type="lpg"),
            _category(
                "b", 50, 40, status=CategoryStatus.INACTIVE, location="South", gas_type="co2"
            ),
            _category("c", 30, 1, status=CategoryStatus.DISCONTINUED, location="North"),
        ])

        assert summary.total_categories == 3
        assert summary.active_categories == 1
        assert summary.total_cylinders == 100
        assert summary.total_filled == 80
        assert summary.total_empty == 20
        assert list(summary.by_location) == ["North"]
        assert summary.by_location["North"].total == 100
        assert summary.by_gas_type == {"lpg": 100}
        assert summary.by_status == {"active": 1, "inactive": 1, "discontinued": 1}
        assert summary.requires_restock == 0

    def test_summarize_cylinders(self):
        today = date(2026, 1, 1)
        types = {"t1": CylinderType(id="t1", name="O2", capacity=50, gas_type=GasType.OXYGEN)}
        cylinders = [
            Cylinder(serial_number="1", cylinder_type_id="t1", status=CylinderStatus.EMPTY),
            Cylinder(
                serial_number="2",
                cylinder_type_id="t1",
                status=CylinderStatus.LOANED,
                assigned_customer_id="cust",
                assigned_customer_name="Acme Welding",
                next_inspection_date=today + timedelta(days=3),
            ),
            Cylinder(serial_number="3", cylinder_type_id="gone", is_active=False),
            Cylinder(
                serial_number="4",
                cylinder_type_id="t1",
                status=CylinderStatus.LOANED,
                assigned_customer_id="walk-in",
            ),
        ]

        stats = summarize_cylinders(cylinders, types, 30, today)

        assert stats.total_cylinders == 4
        assert stats.active_cylinders == 3
        assert stats.by_gas_type == {"oxygen": 3, "unknown": 1}
        assert stats.by_cylinder_type == {"O2": 3, "unknown": 1}
        assert stats.available_for_filling == 2
        assert stats.loaned == 2
        assert stats.loaned_by_customer == {"Acme Welding": 1}
        assert stats.need_inspection == 1


class TestListings:
    async def test_page_meta(self, service, category_store):
        category_store.list_categories.return_value = ([_category("c1", 10, 1)], 21)

        page = await service.list_categories(MagicMock(), PageRequest(page=1, limit=10))

        assert page.meta.total_pages == 3
        assert page.meta.has_next_page is True
        assert page.items[0].requires_restock is True

    async def test_bad_status_is_bad_request(self, service):
        with pytest.raises(BadRequestError):
            await service.categories_by_status("archived")

    async def test_requires_restock_filter(self, service, category_store):
        category_store.list_all_categories.return_value = [
            _category("a", 100, 10),
            _category("b", 100, 50),
        ]
        result = await service.categories_requiring_restock()
        assert [c.id for c in result] == ["a"]

    async def test_inspection_due_uses_threshold(self, service, cylinder_store):
        cylinder_store.list_all_cylinders.return_value = []
        await service.cylinders_due_for_inspection(7)

        filters = cylinder_store.list_all_cylinders.await_args.args[0]
        assert filters.needs_inspection is True
        assert filters.is_active is True
        assert filters.threshold_days == 7
