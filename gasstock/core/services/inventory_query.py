"""
Inventory Query Service - read side of both flows.

Single-record lookups and the two aggregate views are cache-first. Listings
always go to the store. Nothing here writes.
"""

from collections import Counter, defaultdict
from datetime import date

from gasstock.config import get_logger
from gasstock.core.entities import (
    CategoryDetail,
    CategoryFilter,
    CategoryMovement,
    CategoryMovementFilter,
    CategoryStatus,
    Cylinder,
    CylinderCategory,
    CylinderDetail,
    CylinderFilter,
    CylinderMovement,
    CylinderMovementFilter,
    CylinderStats,
    CylinderStatus,
    CylinderType,
    CylinderTypeFilter,
    InventorySummary,
    LocationBreakdown,
    Page,
    PageRequest,
)
from gasstock.core.entities.common import utcnow
from gasstock.core.exceptions import (
    CategoryNotFoundError,
    CylinderNotFoundError,
    CylinderTypeNotFoundError,
    MovementNotFoundError,
)
from gasstock.core.interfaces import ICategoryStore, ICylinderStore
from gasstock.core.rules import (
    DEFAULT_INSPECTION_DAYS,
    days_until_inspection,
    fill_percentage,
    needs_inspection,
    needs_maintenance,
    page_meta,
    parse_enum,
    requires_restock,
)
from gasstock.core.services.cache_support import (
    CATEGORY_SUMMARY_KEY,
    CYLINDER_STATS_KEY,
    SafeCache,
    category_key,
    cylinder_key,
)
from gasstock.core.services.guards import unexpected_errors

logger = get_logger(__name__)


def to_category_detail(category: CylinderCategory) -> CategoryDetail:
    return CategoryDetail(**category.model_dump(), requires_restock=requires_restock(category))


def to_cylinder_detail(
    cylinder: Cylinder,
    cylinder_type: CylinderType | None,
    threshold_days: int = DEFAULT_INSPECTION_DAYS,
    today: date | None = None,
) -> CylinderDetail:
    """Join a cylinder with its type and resolve the derived flags."""
    return CylinderDetail(
        **cylinder.model_dump(),
        type_name=cylinder_type.name if cylinder_type else None,
        gas_type=cylinder_type.gas_type.value if cylinder_type else None,
        needs_inspection=needs_inspection(cylinder, threshold_days, today),
        needs_maintenance=needs_maintenance(cylinder, threshold_days, today),
        days_until_inspection=days_until_inspection(cylinder, today),
        fill_percentage=fill_percentage(cylinder),
    )


def summarize_categories(categories: list[CylinderCategory]) -> InventorySummary:
    """
    Totals and group-by breakdowns over active categories.

    ``total_categories`` and ``by_status`` count every category. Blank
    locations and gas types are skipped.
    """
    summary = InventorySummary(total_categories=len(categories))
    by_location: dict[str, LocationBreakdown] = defaultdict(LocationBreakdown)
    by_status: Counter[str] = Counter()
    by_gas_type: Counter[str] = Counter()

    for category in categories:
        by_status[category.status.value] += 1
        if category.status != CategoryStatus.ACTIVE:
            continue
        summary.active_categories += 1
        summary.total_cylinders += category.total_quantity
        summary.total_filled += category.filled_quantity
        summary.total_empty += category.empty_quantity
        if category.location:
            bucket = by_location[category.location]
            bucket.total += category.total_quantity
            bucket.filled += category.filled_quantity
            bucket.empty += category.empty_quantity
        if category.gas_type:
            by_gas_type[category.gas_type] += category.total_quantity
        if requires_restock(category):
            summary.requires_restock += 1

    summary.by_location = dict(by_location)
    summary.by_status = dict(by_status)
    summary.by_gas_type = dict(by_gas_type)
    return summary


def summarize_cylinders(
    cylinders: list[Cylinder],
    types: dict[str, CylinderType],
    threshold_days: int = DEFAULT_INSPECTION_DAYS,
    today: date | None = None,
) -> CylinderStats:
    stats = CylinderStats(total_cylinders=len(cylinders))
    by_status: Counter[str] = Counter()
    by_gas_type: Counter[str] = Counter()
    by_location: Counter[str] = Counter()
    by_type: Counter[str] = Counter()
    loaned_by_customer: Counter[str] = Counter()

    for cylinder in cylinders:
        if cylinder.is_active:
            stats.active_cylinders += 1
        by_status[cylinder.status.value] += 1
        cylinder_type = types.get(cylinder.cylinder_type_id)
        by_gas_type[cylinder_type.gas_type.value if cylinder_type else "unknown"] += 1
        by_type[cylinder_type.name if cylinder_type else "unknown"] += 1
        if cylinder.location:
            by_location[cylinder.location] += 1
        if needs_inspection(cylinder, threshold_days, today):
            stats.need_inspection += 1
        if needs_maintenance(cylinder, threshold_days, today):
            stats.need_maintenance += 1
        if cylinder.status in (CylinderStatus.EMPTY, CylinderStatus.AVAILABLE):
            stats.available_for_filling += 1
        if cylinder.status == CylinderStatus.LOANED:
            stats.loaned += 1
            if cylinder.assigned_customer_id and cylinder.assigned_customer_name:
                loaned_by_customer[cylinder.assigned_customer_name] += 1

    stats.by_status = dict(by_status)
    stats.by_gas_type = dict(by_gas_type)
    stats.by_location = dict(by_location)
    stats.by_cylinder_type = dict(by_type)
    stats.loaned_by_customer = dict(loaned_by_customer)
    return stats


class InventoryQueryService:
    """Cached lookups, filtered listings and aggregate views."""

    def __init__(
        self,
        category_store: ICategoryStore,
        cylinder_store: ICylinderStore,
        cache: SafeCache,
        inspection_threshold_days: int = DEFAULT_INSPECTION_DAYS,
    ):
        self._categories = category_store
        self._cylinders = cylinder_store
        self._cache = cache
        self.inspection_threshold_days = inspection_threshold_days

    # --- Category flow ---

    async def get_category(self, category_id: str) -> CategoryDetail:
        key = category_key(category_id)
        cached = await self._cache.get(key)
        if cached is not None:
            return CategoryDetail.model_validate_json(cached)

        with unexpected_errors("get category", category_id=category_id):
            category = await self._categories.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        detail = to_category_detail(category)
        await self._cache.set(key, detail.model_dump_json())
        return detail

    async def list_categories(
        self, filters: CategoryFilter, page: PageRequest
    ) -> Page[CategoryDetail]:
        with unexpected_errors("list categories"):
            items, total = await self._categories.list_categories(filters, page)
        return Page[CategoryDetail](
            items=[to_category_detail(c) for c in items],
            meta=page_meta(page.page, page.limit, total),
        )

    async def categories_by_location(self, location: str) -> list[CategoryDetail]:
        return await self._all_categories(lambda c: c.location == location)

    async def categories_by_status(self, status: CategoryStatus | str) -> list[CategoryDetail]:
        status = parse_enum(CategoryStatus, status, "status")
        return await self._all_categories(lambda c: c.status == status)

    async def categories_requiring_restock(self) -> list[CategoryDetail]:
        return await self._all_categories(requires_restock)

    async def all_categories(self) -> list[CategoryDetail]:
        """Every category, unpaginated. Used by exports."""
        return await self._all_categories(lambda c: True)

    async def _all_categories(self, keep) -> list[CategoryDetail]:
        with unexpected_errors("list categories"):
            categories = await self._categories.list_all_categories()
        return [to_category_detail(c) for c in categories if keep(c)]

    async def summary(self) -> InventorySummary:
        """Aggregate counts across every category, cached under one key."""
        cached = await self._cache.get(CATEGORY_SUMMARY_KEY)
        if cached is not None:
            return InventorySummary.model_validate_json(cached)

        with unexpected_errors("build inventory summary"):
            categories = await self._categories.list_all_categories()
        summary = summarize_categories(categories)
        await self._cache.set(CATEGORY_SUMMARY_KEY, summary.model_dump_json())
        logger.info(
            "inventory_summary_built",
            categories=summary.total_categories,
            requires_restock=summary.requires_restock,
        )
        return summary

    async def get_category_movement(self, movement_id: str) -> CategoryMovement:
        with unexpected_errors("get category movement", movement_id=movement_id):
            movement = await self._categories.get_movement(movement_id)
        if movement is None:
            raise MovementNotFoundError(movement_id)
        return movement

    async def list_category_movements(
        self, filters: CategoryMovementFilter, page: PageRequest
    ) -> Page[CategoryMovement]:
        with unexpected_errors("list category movements"):
            items, total = await self._categories.list_movements(filters, page)
        return Page[CategoryMovement](items=items, meta=page_meta(page.page, page.limit, total))

    async def movements_for_category(
        self, category_id: str, page: PageRequest
    ) -> Page[CategoryMovement]:
        await self.get_category(category_id)
        return await self.list_category_movements(
            CategoryMovementFilter(category_id=category_id), page
        )

    # --- Asset flow ---

    async def get_cylinder_type(self, type_id: str) -> CylinderType:
        with unexpected_errors("get cylinder type", type_id=type_id):
            cylinder_type = await self._cylinders.get_cylinder_type(type_id)
        if cylinder_type is None:
            raise CylinderTypeNotFoundError(type_id)
        return cylinder_type

    async def list_cylinder_types(
        self, filters: CylinderTypeFilter, page: PageRequest
    ) -> Page[CylinderType]:
        with unexpected_errors("list cylinder types"):
            items, total = await self._cylinders.list_cylinder_types(filters, page)
        return Page[CylinderType](items=items, meta=page_meta(page.page, page.limit, total))

    async def get_cylinder(self, cylinder_id: str) -> CylinderDetail:
        key = cylinder_key(cylinder_id)
        cached = await self._cache.get(key)
        if cached is not None:
            return CylinderDetail.model_validate_json(cached)

        with unexpected_errors("get cylinder", cylinder_id=cylinder_id):
            cylinder = await self._cylinders.get_cylinder(cylinder_id)
            if cylinder is None:
                raise CylinderNotFoundError(cylinder_id)
            cylinder_type = await self._cylinders.get_cylinder_type(cylinder.cylinder_type_id)

        detail = to_cylinder_detail(cylinder, cylinder_type, self.inspection_threshold_days)
        await self._cache.set(key, detail.model_dump_json())
        return detail

    async def get_cylinder_by_serial(self, serial_number: str) -> CylinderDetail:
        with unexpected_errors("get cylinder by serial", serial_number=serial_number):
            cylinder = await self._cylinders.get_cylinder_by_serial(serial_number)
        if cylinder is None:
            raise CylinderNotFoundError(serial_number)
        return await self.get_cylinder(cylinder.id)

    async def list_cylinders(
        self, filters: CylinderFilter, page: PageRequest
    ) -> Page[CylinderDetail]:
        with unexpected_errors("list cylinders"):
            items, total = await self._cylinders.list_cylinders(filters, page)
            details = await self._details(items)
        return Page[CylinderDetail](items=details, meta=page_meta(page.page, page.limit, total))

    async def all_cylinders(self, filters: CylinderFilter | None = None) -> list[CylinderDetail]:
        """Every matching cylinder, unpaginated. Used by reports and exports."""
        with unexpected_errors("list cylinders"):
            items = await self._cylinders.list_all_cylinders(filters)
            return await self._details(items)

    async def cylinders_by_type(self, type_id: str) -> list[CylinderDetail]:
        await self.get_cylinder_type(type_id)
        return await self.all_cylinders(CylinderFilter(cylinder_type_id=type_id))

    async def cylinders_by_customer(self, customer_id: str) -> list[CylinderDetail]:
        return await self.all_cylinders(CylinderFilter(customer_id=customer_id))

    async def cylinders_by_status(self, status: CylinderStatus | str) -> list[CylinderDetail]:
        status = parse_enum(CylinderStatus, status, "status")
        return await self.all_cylinders(CylinderFilter(status=status.value))

    async def cylinders_due_for_inspection(
        self, days_threshold: int | None = None
    ) -> list[CylinderDetail]:
        """Active cylinders whose next inspection falls within the threshold."""
        days = self.inspection_threshold_days if days_threshold is None else days_threshold
        return await self.all_cylinders(
            CylinderFilter(is_active=True, needs_inspection=True, threshold_days=days)
        )

    async def cylinder_stats(self) -> CylinderStats:
        cached = await self._cache.get(CYLINDER_STATS_KEY)
        if cached is not None:
            return CylinderStats.model_validate_json(cached)

        with unexpected_errors("build cylinder stats"):
            cylinders = await self._cylinders.list_all_cylinders()
            types = await self._cylinders.get_cylinder_types(
                [c.cylinder_type_id for c in cylinders]
            )
        stats = summarize_cylinders(cylinders, types, self.inspection_threshold_days)
        await self._cache.set(CYLINDER_STATS_KEY, stats.model_dump_json())
        return stats

    async def get_cylinder_movement(self, movement_id: str) -> CylinderMovement:
        with unexpected_errors("get cylinder movement", movement_id=movement_id):
            movement = await self._cylinders.get_movement(movement_id)
        if movement is None:
            raise MovementNotFoundError(movement_id)
        return movement

    async def list_cylinder_movements(
        self, filters: CylinderMovementFilter, page: PageRequest
    ) -> Page[CylinderMovement]:
        with unexpected_errors("list cylinder movements"):
            items, total = await self._cylinders.list_movements(filters, page)
        return Page[CylinderMovement](items=items, meta=page_meta(page.page, page.limit, total))

    async def movements_for_cylinder(
        self, cylinder_id: str, page: PageRequest
    ) -> Page[CylinderMovement]:
        await self.get_cylinder(cylinder_id)
        return await self.list_cylinder_movements(
            CylinderMovementFilter(cylinder_id=cylinder_id), page
        )

    async def _details(self, cylinders: list[Cylinder]) -> list[CylinderDetail]:
        types = await self._cylinders.get_cylinder_types([c.cylinder_type_id for c in cylinders])
        today = utcnow().date()
        return [
            to_cylinder_detail(
                c, types.get(c.cylinder_type_id), self.inspection_threshold_days, today
            )
            for c in cylinders
        ]
