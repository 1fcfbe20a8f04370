"""Aggregate stock entities for the category-based flow."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from gasstock.core.entities.common import utcnow


class CategoryStatus(str, Enum):
    """Lifecycle status of a cylinder category."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"


class CylinderCategory(BaseModel):
    """
    A stock-keeping unit counting cylinders of one kind at one location.

    ``total_quantity`` always equals ``filled_quantity + empty_quantity``.
    Counters change only through movements.
    """

    id: str | None = None
    category_name: str
    description: str | None = None
    total_quantity: int = 0
    filled_quantity: int = 0
    empty_quantity: int = 0
    location: str | None = None
    last_restocked: datetime | None = None
    price: float | None = None
    deposit_amount: float | None = None
    cylinder_weight: float | None = None
    gas_type: str | None = None
    status: CategoryStatus = CategoryStatus.ACTIVE
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CategoryDetail(CylinderCategory):
    """Category as shown to callers, with the restock flag resolved."""

    requires_restock: bool = False


class LocationBreakdown(BaseModel):
    total: int = 0
    filled: int = 0
    empty: int = 0


class InventorySummary(BaseModel):
    """Aggregate counts across all categories."""

    total_categories: int = 0
    active_categories: int = 0
    total_cylinders: int = 0
    total_filled: int = 0
    total_empty: int = 0
    by_location: dict[str, LocationBreakdown] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    by_gas_type: dict[str, int] = Field(default_factory=dict)
    requires_restock: int = 0
