"""Tests for RegistryService."""

import pytest

from gasstock.core.exceptions import (
    BadRequestError,
    CategoryNotFoundError,
    CylinderNotFoundError,
    CylinderTypeNotFoundError,
    DuplicateSerialNumberError,
    InvalidUpdateError,
    ReferencedEntityError,
)
from gasstock.core.services import MovementEngine, RegistryService


class TestCategories:
    async def test_empty_derived_from_total(self, registry: RegistryService, make_category):
        created = await registry.create_category(make_category(total=50, filled=30, empty=0))

        assert created.id
        assert created.empty_quantity == 20
        assert created.total_quantity == 50

    async def test_filled_above_total_rejected(self, registry, make_category):
        with pytest.raises(BadRequestError) as exc:
            await registry.create_category(make_category(total=10, filled=20, empty=0))
        assert exc.value.code == "BAD_REQUEST"

    async def test_inconsistent_counts_rejected(self, registry, make_category):
        with pytest.raises(BadRequestError):
            await registry.create_category(make_category(total=100, filled=50, empty=10))

    async def test_negative_count_rejected(self, registry, make_category):
        with pytest.raises(BadRequestError):
            await registry.create_category(make_category(total=-1, filled=0, empty=0))

    async def test_update_descriptive_fields(self, registry, category):
        updated = await registry.update_category(category.id, {"location": "Harbour", "price": 30.0})

        assert updated.location == "Harbour"
        assert updated.price == 30.0
        assert updated.filled_quantity == category.filled_quantity

    @pytest.mark.parametrize("field", ["filled_quantity", "total_quantity", "last_restocked"])
    async def test_update_counters_blocked(self, registry, category, field):
        with pytest.raises(InvalidUpdateError):
            await registry.update_category(category.id, {field: 1})

    async def test_update_missing(self, registry):
        with pytest.raises(CategoryNotFoundError):
            await registry.update_category("missing", {"notes": "x"})

    async def test_delete_unused(self, registry, category, category_store):
        await registry.delete_category(category.id)
        assert await category_store.get_category(category.id) is None

    async def test_delete_with_movements_conflicts(
        self, registry, engine: MovementEngine, category, category_store
    ):
        await engine.sell(category.id, 1)

        with pytest.raises(ReferencedEntityError) as exc:
            await registry.delete_category(category.id)

        assert exc.value.code == "CONFLICT"
        assert await category_store.get_category(category.id) is not None


class TestCylinderTypes:
    async def test_zero_capacity_rejected(self, registry, make_cylinder_type):
        with pytest.raises(BadRequestError):
            await registry.create_cylinder_type(make_cylinder_type(capacity=0))

    async def test_update(self, registry, cylinder_type):
        updated = await registry.update_cylinder_type(cylinder_type.id, {"color": "black"})
        assert updated.color == "black"

    async def test_rename_refreshes_cached_cylinders(
        self, registry, query, cylinder_type, cylinder
    ):
        before = await query.get_cylinder(cylinder.id)

        await registry.update_cylinder_type(
            cylinder_type.id, {"name": "Medical Oxygen 50L", "gas_type": "nitrogen"}
        )
        after = await query.get_cylinder(cylinder.id)

        assert before.type_name == "Industrial Oxygen 50L"
        assert after.type_name == "Medical Oxygen 50L"
        assert after.gas_type == "nitrogen"

    async def test_update_missing(self, registry):
        with pytest.raises(CylinderTypeNotFoundError):
            await registry.update_cylinder_type("missing", {"color": "black"})

    async def test_delete_in_use_conflicts(self, registry, cylinder_type, cylinder):
        with pytest.raises(ReferencedEntityError):
            await registry.delete_cylinder_type(cylinder_type.id)

    async def test_delete_unused(self, registry, cylinder_type, cylinder_store):
        await registry.delete_cylinder_type(cylinder_type.id)
        assert await cylinder_store.get_cylinder_type(cylinder_type.id) is None


class TestCylinders:
    async def test_create_stamps_actor(self, registry, cylinder_type, make_cylinder):
        created = await registry.create_cylinder(
            make_cylinder(cylinder_type.id, serial="OX-0100"), performed_by="alice"
        )

        assert created.id
        assert created.created_by == "alice"
        assert created.updated_by == "alice"

    async def test_default_actor(self, registry, cylinder_type, make_cylinder):
        created = await registry.create_cylinder(make_cylinder(cylinder_type.id, serial="OX-0101"))
        assert created.created_by == "system"

    async def test_duplicate_serial(self, registry, cylinder, cylinder_type, make_cylinder):
        with pytest.raises(DuplicateSerialNumberError) as exc:
            await registry.create_cylinder(make_cylinder(cylinder_type.id, serial="OX-0001"))
        assert exc.value.code == "CONFLICT"

    async def test_unknown_type(self, registry, make_cylinder):
        with pytest.raises(BadRequestError):
            await registry.create_cylinder(make_cylinder("no-such-type"))

    async def test_delete_removes_history(
        self, registry, engine: MovementEngine, cylinder, cylinder_store
    ):
        await engine.change_cylinder_status(cylinder.id, "filled")

        await registry.delete_cylinder(cylinder.id)

        assert await cylinder_store.get_cylinder(cylinder.id) is None

    async def test_delete_missing(self, registry):
        with pytest.raises(CylinderNotFoundError):
            await registry.delete_cylinder("missing")
