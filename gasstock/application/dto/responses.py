"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from gasstock.core.entities import (
    CategoryDetail,
    CategoryMovement,
    CylinderDetail,
    CylinderMovement,
    Page,
    PageMeta,
)
from gasstock.core.services import (
    CategoryMovementResult,
    CylinderMovementResult,
    CylinderUpdateResult,
)
from gasstock.core.services.inventory_query import to_category_detail

T = TypeVar("T")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable kind (NOT_FOUND, BAD_REQUEST, ...)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results with pagination metadata."""

    data: list[T]
    meta: PageMeta

    @classmethod
    def from_page(cls, page: Page) -> "PaginatedResponse[T]":
        return cls(data=page.items, meta=page.meta)


class DeleteResponse(BaseModel):
    id: str
    deleted: bool = True


# --- Category flow ---


class CategoryMovementResponse(BaseModel):
    """Recorded movement with the category counters after the commit."""

    movement: CategoryMovement
    category: CategoryDetail

    @classmethod
    def from_result(cls, result: CategoryMovementResult) -> "CategoryMovementResponse":
        return cls(movement=result.movement, category=to_category_detail(result.category))


# --- Asset flow ---


class CylinderMovementResponse(BaseModel):
    movement: CylinderMovement
    cylinder: CylinderDetail


class CylinderUpdateResponse(BaseModel):
    cylinder: CylinderDetail
    movement: CylinderMovement | None = None
    changed_fields: list[str] = Field(default_factory=list)


def cylinder_movement_response(
    result: CylinderMovementResult, detail: CylinderDetail
) -> CylinderMovementResponse:
    return CylinderMovementResponse(movement=result.movement, cylinder=detail)


def cylinder_update_response(
    result: CylinderUpdateResult, detail: CylinderDetail
) -> CylinderUpdateResponse:
    return CylinderUpdateResponse(
        cylinder=detail, movement=result.movement, changed_fields=result.changed_fields
    )
