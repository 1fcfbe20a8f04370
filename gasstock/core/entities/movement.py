"""Immutable movement records for both inventory flows."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from gasstock.core.entities.common import utcnow


class CategoryMovementType(str, Enum):
    """Stock movements against a category."""

    SALE = "sale"
    EXCHANGE = "exchange"
    RETURN = "return"
    RESTOCK = "restock"


class MovementStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CylinderMovementType(str, Enum):
    """Movements of a single serialized cylinder."""

    FILL = "fill"
    EMPTY = "empty"
    LOAN = "loan"
    RETURN = "return"
    TRANSFER = "transfer"
    MAINTENANCE = "maintenance"
    INSPECTION = "inspection"
    RECEIVE = "receive"
    DISPOSE = "dispose"
    SELL = "sell"
    PURCHASE = "purchase"


class CategoryMovement(BaseModel):
    """Audit record of one stock-affecting operation on a category."""

    id: str | None = None
    category_id: str
    movement_type: CategoryMovementType
    quantity: int  # always positive
    from_location: str | None = None
    to_location: str | None = None
    customer_id: str | None = None
    driver_id: str | None = None
    invoice_id: str | None = None
    performed_by: str | None = None
    transaction_date: datetime = Field(default_factory=utcnow)
    status: MovementStatus = MovementStatus.COMPLETED
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


class CylinderMovement(BaseModel):
    """Audit record of one status/location change of a cylinder."""

    id: str | None = None
    cylinder_id: str
    movement_type: CylinderMovementType
    from_status: str | None = None
    to_status: str
    from_location: str | None = None
    to_location: str | None = None
    quantity: int = 1
    customer_id: str | None = None
    customer_name: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    performed_by: str | None = None
    transaction_date: datetime = Field(default_factory=utcnow)
    notes: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
