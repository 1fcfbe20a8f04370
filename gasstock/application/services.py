"""
Service wiring for dependency injection.

Builds every store, cache and service once from settings. The API lifespan
owns the resulting container; tests build their own against a temporary
database. Nothing here is a module-level singleton.
"""

from dataclasses import dataclass

from gasstock.application.use_cases import (
    ExportInventoryCsvUseCase,
    GenerateCylinderLabelUseCase,
    GenerateInventoryReportUseCase,
)
from gasstock.config import Settings, get_logger
from gasstock.core.interfaces import ICache
from gasstock.core.services import (
    CacheInvalidator,
    InventoryQueryService,
    MovementEngine,
    RegistryService,
    SafeCache,
)
from gasstock.infrastructure.cache import build_cache
from gasstock.infrastructure.reports import (
    CylinderLabelRenderer,
    Fpdf2InventoryReportRenderer,
)
from gasstock.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCategoryStore,
    SQLiteCylinderStore,
)

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler may need, built once per process."""

    settings: Settings
    pool: ConnectionPool
    category_store: SQLiteCategoryStore
    cylinder_store: SQLiteCylinderStore
    cache: SafeCache
    engine: MovementEngine
    registry: RegistryService
    query: InventoryQueryService
    report_use_case: GenerateInventoryReportUseCase
    csv_use_case: ExportInventoryCsvUseCase
    label_use_case: GenerateCylinderLabelUseCase

    async def close(self) -> None:
        await self.pool.close()


def build_container(settings: Settings, cache_backend: ICache | None = None) -> ServiceContainer:
    """
    Wire infrastructure implementations to core services.

    Args:
        settings: Application settings
        cache_backend: Optional cache override (defaults to the configured backend)
    """
    pool = ConnectionPool.from_settings(settings.storage)
    category_store = SQLiteCategoryStore(pool)
    cylinder_store = SQLiteCylinderStore(pool)

    cache = SafeCache(
        cache_backend or build_cache(settings.cache),
        ttl_seconds=settings.cache.ttl_seconds,
    )
    invalidator = CacheInvalidator(cache)
    actor = settings.inventory.default_actor

    query = InventoryQueryService(
        category_store,
        cylinder_store,
        cache,
        inspection_threshold_days=settings.inventory.inspection_threshold_days,
    )

    logger.info(
        "service_container_built",
        db_path=str(settings.storage.db_path),
        cache_enabled=settings.cache.enabled,
    )
    return ServiceContainer(
        settings=settings,
        pool=pool,
        category_store=category_store,
        cylinder_store=cylinder_store,
        cache=cache,
        engine=MovementEngine(category_store, cylinder_store, invalidator, actor),
        registry=RegistryService(category_store, cylinder_store, invalidator, actor),
        query=query,
        report_use_case=GenerateInventoryReportUseCase(
            query, Fpdf2InventoryReportRenderer(settings.report)
        ),
        csv_use_case=ExportInventoryCsvUseCase(query),
        label_use_case=GenerateCylinderLabelUseCase(
            query, CylinderLabelRenderer(settings.report.qr_base_url)
        ),
    )
