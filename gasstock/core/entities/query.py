"""Filter, sort and pagination shapes consumed by the stores."""

from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    """1-based offset pagination with a single sort key."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageMeta(BaseModel):
    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class Page(BaseModel, Generic[T]):
    items: list[T]
    meta: PageMeta


class CategoryFilter(BaseModel):
    search: str | None = None
    location: str | None = None
    status: str | None = None
    gas_type: str | None = None
    min_filled_quantity: int | None = None
    max_filled_quantity: int | None = None
    requires_restock: bool | None = None


class CategoryMovementFilter(BaseModel):
    category_id: str | None = None
    movement_type: str | None = None
    status: str | None = None
    customer_id: str | None = None
    driver_id: str | None = None
    from_date: datetime | None = None
    to_date: datetime | None = None
    search: str | None = None


class CylinderTypeFilter(BaseModel):
    search: str | None = None
    gas_type: str | None = None
    material: str | None = None
    min_capacity: float | None = None
    max_capacity: float | None = None
    is_active: bool | None = None


class CylinderFilter(BaseModel):
    search: str | None = None
    status: str | None = None
    cylinder_type_id: str | None = None
    gas_type: str | None = None
    customer_id: str | None = None
    location: str | None = None
    is_active: bool | None = None
    min_fill_level: float | None = None
    max_fill_level: float | None = None
    needs_inspection: bool | None = None
    needs_maintenance: bool | None = None
    threshold_days: int = 30


class CylinderMovementFilter(BaseModel):
    cylinder_id: str | None = None
    movement_type: str | None = None
    customer_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    search: str | None = None
