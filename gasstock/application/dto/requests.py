"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from gasstock.core.entities import (
    CategoryStatus,
    CylinderMaterial,
    CylinderStatus,
    GasType,
    MovementStatus,
)

# Upper bound on any single quantity; keeps values inside SQLite INTEGER range.
MAX_QUANTITY = 1_000_000

# --- Categories ---


class CreateCategoryRequest(BaseModel):
    """Request to register a cylinder category.

    When ``empty_quantity`` is omitted it is derived as total minus filled.
    """

    category_name: str = Field(..., min_length=1, description="Category name")
    description: str | None = Field(default=None, description="Free-text description")
    total_quantity: int = Field(
        default=0, ge=0, le=MAX_QUANTITY, description="Cylinders held in total"
    )
    filled_quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY, description="Filled cylinders")
    empty_quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY, description="Empty cylinders")
    location: str | None = Field(default=None, description="Storage location")
    price: float | None = Field(default=None, ge=0, description="Unit sale price")
    deposit_amount: float | None = Field(default=None, ge=0, description="Deposit per cylinder")
    cylinder_weight: float | None = Field(default=None, gt=0, description="Weight in kg")
    gas_type: str | None = Field(default=None, description="Gas held", examples=["lpg"])
    status: CategoryStatus = Field(default=CategoryStatus.ACTIVE)
    notes: str | None = None


class UpdateCategoryRequest(BaseModel):
    """Descriptive fields only. Quantities move through stock movements."""

    category_name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    location: str | None = None
    price: float | None = Field(default=None, ge=0)
    deposit_amount: float | None = Field(default=None, ge=0)
    cylinder_weight: float | None = Field(default=None, gt=0)
    gas_type: str | None = None
    status: CategoryStatus | None = None
    notes: str | None = None


# --- Category movements ---


class MovementReferences(BaseModel):
    """Reference fields shared by every stock movement."""

    from_location: str | None = None
    to_location: str | None = None
    customer_id: str | None = None
    driver_id: str | None = None
    invoice_id: str | None = None
    performed_by: str | None = Field(default=None, description="Actor recorded on the movement")
    notes: str | None = None
    transaction_date: datetime | None = None
    status: MovementStatus = Field(default=MovementStatus.COMPLETED)


class StockQuantityRequest(MovementReferences):
    """Sale, exchange or return of ``quantity`` cylinders."""

    quantity: int = Field(..., gt=0, le=MAX_QUANTITY, description="Number of cylinders")


class RestockRequest(MovementReferences):
    """Incoming cylinders, split into filled and empty."""

    filled_quantity: int = Field(
        default=0, ge=0, le=MAX_QUANTITY, description="Filled cylinders received"
    )
    empty_quantity: int = Field(
        default=0, ge=0, le=MAX_QUANTITY, description="Empty cylinders received"
    )

    @model_validator(mode="after")
    def require_some_stock(self) -> "RestockRequest":
        if self.filled_quantity == 0 and self.empty_quantity == 0:
            raise ValueError("filled_quantity or empty_quantity must be greater than zero")
        return self


class CreateCategoryMovementRequest(MovementReferences):
    """Generic movement; the type decides the counter deltas."""

    category_id: str = Field(..., description="Category the movement applies to")
    movement_type: str = Field(..., description="sale, exchange, return or restock")
    quantity: int = Field(..., gt=0, le=MAX_QUANTITY, description="Number of cylinders")


class CorrectCategoryMovementRequest(BaseModel):
    """Reference fields that may be corrected after recording."""

    customer_id: str | None = None
    driver_id: str | None = None
    invoice_id: str | None = None
    notes: str | None = None


# --- Cylinder types ---


class CreateCylinderTypeRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    capacity: float = Field(..., gt=0, description="Water capacity in liters")
    gas_type: GasType
    material: CylinderMaterial = CylinderMaterial.STEEL
    height: float | None = Field(default=None, gt=0)
    diameter: float | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    color: str | None = None
    valve_type: str | None = None
    standard_pressure: float | None = Field(default=None, gt=0)
    max_pressure: float | None = Field(default=None, gt=0)
    is_active: bool = True


class UpdateCylinderTypeRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    capacity: float | None = Field(default=None, gt=0)
    gas_type: GasType | None = None
    material: CylinderMaterial | None = None
    height: float | None = Field(default=None, gt=0)
    diameter: float | None = Field(default=None, gt=0)
    weight: float | None = Field(default=None, gt=0)
    color: str | None = None
    valve_type: str | None = None
    standard_pressure: float | None = Field(default=None, gt=0)
    max_pressure: float | None = Field(default=None, gt=0)
    is_active: bool | None = None


# --- Cylinders ---


class CylinderFields(BaseModel):
    """Editable cylinder attributes shared by create and update."""

    manufacturer_name: str | None = None
    manufacturing_date: date | None = None
    last_inspection_date: date | None = None
    next_inspection_date: date | None = None
    capacity: float | None = Field(default=None, gt=0)
    color: str | None = None
    location: str | None = None
    current_gas_type: str | None = None
    fill_level: float | None = Field(default=None, ge=0)
    tare: float | None = Field(default=None, ge=0)
    valve_type: str | None = None
    current_pressure: float | None = Field(default=None, ge=0)
    max_pressure: float | None = Field(default=None, gt=0)
    batch_number: str | None = None
    notes: str | None = None
    barcode: str | None = None
    rfid_tag: str | None = None
    last_filled: datetime | None = None
    last_leak_test: date | None = None
    last_maintenance_date: date | None = None
    maintenance_due_date: date | None = None
    assigned_customer_id: str | None = None
    assigned_customer_name: str | None = None


class CreateCylinderRequest(CylinderFields):
    serial_number: str = Field(..., min_length=1, description="Unique serial number")
    cylinder_type_id: str = Field(..., description="Type the cylinder is built to")
    status: CylinderStatus = CylinderStatus.AVAILABLE
    is_active: bool = True
    performed_by: str | None = None


class UpdateCylinderRequest(CylinderFields):
    """A status change here is recorded as a transfer movement."""

    serial_number: str | None = Field(default=None, min_length=1)
    cylinder_type_id: str | None = None
    status: CylinderStatus | None = None
    is_active: bool | None = None
    performed_by: str | None = None


class CylinderStatusRequest(BaseModel):
    status: CylinderStatus = Field(..., description="Target status")
    performed_by: str | None = None
    notes: str | None = None


# --- Cylinder movements ---


class CreateCylinderMovementRequest(BaseModel):
    """Status and/or location change of one cylinder."""

    cylinder_id: str
    to_status: CylinderStatus
    movement_type: str | None = Field(
        default=None, description="Derived from the target status when omitted"
    )
    from_location: str | None = None
    to_location: str | None = None
    quantity: int = Field(default=1, gt=0, le=MAX_QUANTITY)
    customer_id: str | None = None
    customer_name: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    performed_by: str | None = None
    notes: str | None = None
    transaction_date: datetime | None = None


class CorrectCylinderMovementRequest(BaseModel):
    customer_id: str | None = None
    customer_name: str | None = None
    invoice_id: str | None = None
    invoice_number: str | None = None
    notes: str | None = None
