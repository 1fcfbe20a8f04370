"""
Pure business rules over inventory records.

Nothing here touches storage or the clock implicitly: callers pass ``today``
when they need a stable reference date.
"""

import math
from datetime import date
from enum import Enum
from typing import TypeVar

from gasstock.core.entities import (
    CategoryMovementType,
    CategoryStatus,
    Cylinder,
    CylinderCategory,
    CylinderMovementType,
    CylinderStatus,
    PageMeta,
)
from gasstock.core.entities.common import utcnow
from gasstock.core.exceptions import (
    BadRequestError,
    InvalidQuantityError,
    InvalidStatusError,
)

E = TypeVar("E", bound=Enum)

# Fixed low-stock rule: filled below 20% of total
RESTOCK_THRESHOLD = 0.2

DEFAULT_INSPECTION_DAYS = 30

_STATUS_MOVEMENT_TYPES: dict[CylinderStatus, CylinderMovementType] = {
    CylinderStatus.FILLED: CylinderMovementType.FILL,
    CylinderStatus.EMPTY: CylinderMovementType.EMPTY,
    CylinderStatus.LOANED: CylinderMovementType.LOAN,
    CylinderStatus.AVAILABLE: CylinderMovementType.RETURN,
    CylinderStatus.MAINTENANCE: CylinderMovementType.MAINTENANCE,
    CylinderStatus.TESTING: CylinderMovementType.INSPECTION,
    CylinderStatus.DAMAGED: CylinderMovementType.DISPOSE,
    CylinderStatus.SCRAPPED: CylinderMovementType.DISPOSE,
}


def _today(today: date | None) -> date:
    return today or utcnow().date()


def requires_restock(category: CylinderCategory) -> bool:
    """True when an active category has less than 20% of its cylinders filled."""
    return (
        category.status == CategoryStatus.ACTIVE
        and category.filled_quantity < category.total_quantity * RESTOCK_THRESHOLD
    )


def needs_inspection(
    record: Cylinder,
    threshold_days: int = DEFAULT_INSPECTION_DAYS,
    today: date | None = None,
) -> bool:
    """True when the next inspection falls within ``threshold_days`` (or is overdue)."""
    if record.next_inspection_date is None:
        return False
    return (record.next_inspection_date - _today(today)).days <= threshold_days


def needs_maintenance(
    record: Cylinder,
    threshold_days: int = DEFAULT_INSPECTION_DAYS,
    today: date | None = None,
) -> bool:
    """True when maintenance is due within ``threshold_days`` (or is overdue)."""
    if record.maintenance_due_date is None:
        return False
    return (record.maintenance_due_date - _today(today)).days <= threshold_days


def days_until_inspection(record: Cylinder, today: date | None = None) -> int | None:
    """Days left before the next inspection; negative when overdue."""
    if record.next_inspection_date is None:
        return None
    return (record.next_inspection_date - _today(today)).days


def fill_percentage(record: Cylinder) -> float | None:
    """Fill level as a share of capacity, bounded to 0..100."""
    if record.fill_level is None or not record.capacity:
        return None
    pct = record.fill_level / record.capacity * 100
    return round(min(max(pct, 0.0), 100.0), 1)


def parse_cylinder_status(value: str | CylinderStatus) -> CylinderStatus:
    """Coerce a raw status into the allowed set."""
    try:
        return CylinderStatus(value)
    except ValueError:
        raise InvalidStatusError(value, [s.value for s in CylinderStatus]) from None


def movement_type_for_status(status: CylinderStatus) -> CylinderMovementType:
    """Movement recorded when a cylinder is moved into ``status``."""
    return _STATUS_MOVEMENT_TYPES.get(status, CylinderMovementType.TRANSFER)


def category_deltas(
    movement_type: CategoryMovementType,
    quantity: int,
    restock_filled: int | None = None,
    restock_empty: int | None = None,
) -> tuple[int, int]:
    """
    Counter changes ``(filled_delta, empty_delta)`` for a category movement.

    A restock without an explicit split counts every cylinder as filled.
    """
    if movement_type == CategoryMovementType.SALE:
        return -quantity, 0
    if movement_type == CategoryMovementType.EXCHANGE:
        return -quantity, quantity
    if movement_type == CategoryMovementType.RETURN:
        return 0, quantity
    if restock_filled is None and restock_empty is None:
        return quantity, 0
    return restock_filled or 0, restock_empty or 0


def validate_quantity(quantity: object, field: str = "quantity") -> int:
    """Reject anything that is not a positive whole number."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity, field)
    return quantity


def validate_restock_split(filled: object, empty: object) -> tuple[int, int]:
    """Both parts non-negative whole numbers, at least one positive."""
    for field, value in (("filled_quantity", filled), ("empty_quantity", empty)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidQuantityError(value, field)
    if filled == 0 and empty == 0:
        raise InvalidQuantityError(0, "filled_quantity")
    return filled, empty


def page_meta(page: int, limit: int, total: int) -> PageMeta:
    total_pages = math.ceil(total / limit) if limit else 0
    return PageMeta(
        page=page,
        limit=limit,
        total_items=total,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def parse_enum(enum_cls: type[E], value: object, field: str) -> E:
    """Coerce ``value`` into ``enum_cls`` or fail with BAD_REQUEST."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise BadRequestError(field, f"must be one of {allowed}", value) from None
