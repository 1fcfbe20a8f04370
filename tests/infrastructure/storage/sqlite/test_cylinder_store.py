"""Tests for SQLiteCylinderStore against a real temporary database."""

from datetime import date, timedelta

import pytest

from gasstock.core.entities import (
    CylinderFilter,
    CylinderMovement,
    CylinderMovementFilter,
    CylinderMovementType,
    CylinderStatus,
    CylinderTypeFilter,
    GasType,
    PageRequest,
)
from gasstock.core.exceptions import DatabaseError
from gasstock.infrastructure.storage.sqlite import SQLiteCylinderStore


class TestCylinderTypes:
    async def test_create_and_get(self, cylinder_store: SQLiteCylinderStore, cylinder_type):
        fetched = await cylinder_store.get_cylinder_type(cylinder_type.id)
        assert fetched.name == "Industrial Oxygen 50L"
        assert fetched.gas_type == GasType.OXYGEN

    async def test_batch_lookup(self, cylinder_store: SQLiteCylinderStore, cylinder_type):
        types = await cylinder_store.get_cylinder_types([cylinder_type.id, cylinder_type.id, "nope"])
        assert list(types) == [cylinder_type.id]
        assert await cylinder_store.get_cylinder_types([]) == {}

    async def test_filter_by_capacity(
        self, cylinder_store: SQLiteCylinderStore, cylinder_type, make_cylinder_type
    ):
        await cylinder_store.create_cylinder_type(
            make_cylinder_type(name="Small LPG", capacity=5.0, gas_type=GasType.LPG)
        )
        items, total = await cylinder_store.list_cylinder_types(
            CylinderTypeFilter(max_capacity=10), PageRequest()
        )
        assert total == 1
        assert items[0].name == "Small LPG"

    async def test_count_cylinders_of_type(
        self, cylinder_store: SQLiteCylinderStore, cylinder_type, cylinder
    ):
        assert await cylinder_store.count_cylinders_of_type(cylinder_type.id) == 1

    async def test_referenced_type_cannot_be_deleted(
        self, cylinder_store: SQLiteCylinderStore, cylinder_type, cylinder
    ):
        with pytest.raises(DatabaseError):
            await cylinder_store.delete_cylinder_type(cylinder_type.id)


class TestCylinders:
    async def test_get_by_serial(self, cylinder_store: SQLiteCylinderStore, cylinder):
        fetched = await cylinder_store.get_cylinder_by_serial("OX-0001")
        assert fetched.id == cylinder.id
        assert fetched.next_inspection_date == cylinder.next_inspection_date

    async def test_duplicate_serial_rejected(
        self, cylinder_store: SQLiteCylinderStore, cylinder_type, cylinder, make_cylinder
    ):
        with pytest.raises(DatabaseError):
            await cylinder_store.create_cylinder(make_cylinder(cylinder_type.id))

    async def test_update_keeps_creator(self, cylinder_store: SQLiteCylinderStore, cylinder):
        await cylinder_store.update_cylinder(
            cylinder.id, {"status": CylinderStatus.FILLED, "created_by": "mallory"}
        )
        fetched = await cylinder_store.get_cylinder(cylinder.id)
        assert fetched.status == CylinderStatus.FILLED
        assert fetched.created_by == cylinder.created_by


class TestCylinderFilters:
    @pytest.fixture
    async def fleet(self, cylinder_store: SQLiteCylinderStore, cylinder_type, make_cylinder):
        today = date.today()
        await cylinder_store.create_cylinder(
            make_cylinder(cylinder_type.id, "OX-1", next_inspection_date=today + timedelta(days=5))
        )
        await cylinder_store.create_cylinder(
            make_cylinder(
                cylinder_type.id,
                "OX-2",
                status=CylinderStatus.LOANED,
                assigned_customer_id="cust-9",
                next_inspection_date=today - timedelta(days=1),
            )
        )
        await cylinder_store.create_cylinder(
            make_cylinder(
                cylinder_type.id,
                "OX-3",
                is_active=False,
                maintenance_due_date=today + timedelta(days=3),
            )
        )

    async def test_status(self, cylinder_store: SQLiteCylinderStore, fleet):
        items, total = await cylinder_store.list_cylinders(
            CylinderFilter(status="loaned"), PageRequest()
        )
        assert total == 1
        assert items[0].serial_number == "OX-2"

    async def test_customer(self, cylinder_store: SQLiteCylinderStore, fleet):
        items = await cylinder_store.list_all_cylinders(CylinderFilter(customer_id="cust-9"))
        assert [c.serial_number for c in items] == ["OX-2"]

    async def test_gas_type_through_type(self, cylinder_store: SQLiteCylinderStore, fleet):
        _, total = await cylinder_store.list_cylinders(
            CylinderFilter(gas_type="oxygen"), PageRequest()
        )
        assert total == 3
        _, total = await cylinder_store.list_cylinders(
            CylinderFilter(gas_type="lpg"), PageRequest()
        )
        assert total == 0

    async def test_needs_inspection_includes_overdue(
        self, cylinder_store: SQLiteCylinderStore, fleet
    ):
        items = await cylinder_store.list_all_cylinders(
            CylinderFilter(needs_inspection=True, threshold_days=30)
        )
        assert [c.serial_number for c in items] == ["OX-1", "OX-2"]

    async def test_needs_maintenance(self, cylinder_store: SQLiteCylinderStore, fleet):
        items = await cylinder_store.list_all_cylinders(CylinderFilter(needs_maintenance=True))
        assert [c.serial_number for c in items] == ["OX-3"]

    async def test_active_only(self, cylinder_store: SQLiteCylinderStore, fleet):
        _, total = await cylinder_store.list_cylinders(
            CylinderFilter(is_active=True), PageRequest()
        )
        assert total == 2


class TestCylinderMovements:
    async def test_history_removed_with_cylinder(
        self, cylinder_store: SQLiteCylinderStore, cylinder
    ):
        movement = await cylinder_store.add_movement(
            CylinderMovement(
                cylinder_id=cylinder.id,
                movement_type=CylinderMovementType.FILL,
                from_status="available",
                to_status="filled",
            )
        )
        items, total = await cylinder_store.list_movements(
            CylinderMovementFilter(cylinder_id=cylinder.id), PageRequest()
        )
        assert total == 1
        assert items[0].id == movement.id

        await cylinder_store.delete_cylinder(cylinder.id)
        assert await cylinder_store.get_movement(movement.id) is None
