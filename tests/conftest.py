"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date, timedelta
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from gasstock.application.services import ServiceContainer, build_container
from gasstock.config.settings import CacheSettings, Settings, StorageSettings
from gasstock.core.entities import (
    Cylinder,
    CylinderCategory,
    CylinderType,
    GasType,
)
from gasstock.core.services import (
    CacheInvalidator,
    InventoryQueryService,
    MovementEngine,
    RegistryService,
    SafeCache,
)
from gasstock.infrastructure.cache import MemoryCache
from gasstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCategoryStore,
    SQLiteCylinderStore,
)
from gasstock.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway data directory."""
    return Settings(
        environment="development",
        storage=StorageSettings(data_dir=tmp_path, db_name="test.db", pool_size=2),
        cache=CacheSettings(enabled=True, ttl_seconds=600),
    )


@pytest.fixture
async def db_path(settings: Settings) -> Path:
    """Migrated temporary database."""
    await initialize_database(settings.storage.db_path)
    return settings.storage.db_path


@pytest.fixture
async def pool(db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(db_path, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def category_store(pool: ConnectionPool) -> SQLiteCategoryStore:
    return SQLiteCategoryStore(pool)


@pytest.fixture
def cylinder_store(pool: ConnectionPool) -> SQLiteCylinderStore:
    return SQLiteCylinderStore(pool)


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def safe_cache(memory_cache: MemoryCache) -> SafeCache:
    return SafeCache(memory_cache, ttl_seconds=600)


@pytest.fixture
def engine(
    category_store: SQLiteCategoryStore,
    cylinder_store: SQLiteCylinderStore,
    safe_cache: SafeCache,
) -> MovementEngine:
    return MovementEngine(category_store, cylinder_store, CacheInvalidator(safe_cache))


@pytest.fixture
def registry(
    category_store: SQLiteCategoryStore,
    cylinder_store: SQLiteCylinderStore,
    safe_cache: SafeCache,
) -> RegistryService:
    return RegistryService(category_store, cylinder_store, CacheInvalidator(safe_cache))


@pytest.fixture
def query(
    category_store: SQLiteCategoryStore,
    cylinder_store: SQLiteCylinderStore,
    safe_cache: SafeCache,
) -> InventoryQueryService:
    return InventoryQueryService(category_store, cylinder_store, safe_cache)


@pytest.fixture
async def container(
    settings: Settings, db_path: Path
) -> AsyncGenerator[ServiceContainer, None]:
    container = build_container(settings)
    yield container
    await container.close()


@pytest.fixture
async def async_client(
    settings: Settings, container: ServiceContainer
) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app; the container stands in for the lifespan."""
    from gasstock.api.main import create_app

    app = create_app(settings)
    app.state.container = container
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# --- Sample records ---


def _category(
    total: int = 100,
    filled: int = 80,
    empty: int = 20,
    **overrides,
) -> CylinderCategory:
    data = {
        "category_name": "12kg LPG",
        "total_quantity": total,
        "filled_quantity": filled,
        "empty_quantity": empty,
        "location": "Main Depot",
        "gas_type": "lpg",
        "price": 25.0,
    }
    data.update(overrides)
    return CylinderCategory(**data)


def _cylinder_type(**overrides) -> CylinderType:
    data = {"name": "Industrial Oxygen 50L", "capacity": 50.0, "gas_type": GasType.OXYGEN}
    data.update(overrides)
    return CylinderType(**data)


def _cylinder(cylinder_type_id: str, serial: str = "OX-0001", **overrides) -> Cylinder:
    data = {
        "serial_number": serial,
        "cylinder_type_id": cylinder_type_id,
        "capacity": 50.0,
        "fill_level": 40.0,
        "location": "Warehouse A",
        "next_inspection_date": date.today() + timedelta(days=180),
    }
    data.update(overrides)
    return Cylinder(**data)


@pytest.fixture
async def category(category_store: SQLiteCategoryStore) -> CylinderCategory:
    """Stored category with 100 total, 80 filled, 20 empty."""
    return await category_store.create_category(_category())


@pytest.fixture
async def cylinder_type(cylinder_store: SQLiteCylinderStore) -> CylinderType:
    return await cylinder_store.create_cylinder_type(_cylinder_type())


@pytest.fixture
async def cylinder(cylinder_store: SQLiteCylinderStore, cylinder_type: CylinderType) -> Cylinder:
    return await cylinder_store.create_cylinder(_cylinder(cylinder_type.id))


@pytest.fixture
def make_category():
    """Factory for unsaved categories."""
    return _category


@pytest.fixture
def make_cylinder_type():
    return _cylinder_type


@pytest.fixture
def make_cylinder():
    return _cylinder
