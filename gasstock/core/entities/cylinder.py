"""Serialized cylinder assets and the types they are built to."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from gasstock.core.entities.common import utcnow


class CylinderStatus(str, Enum):
    """Current state of a physical cylinder."""

    AVAILABLE = "available"
    IN_USE = "in_use"
    LOANED = "loaned"
    EMPTY = "empty"
    FILLED = "filled"
    MAINTENANCE = "maintenance"
    TESTING = "testing"
    EXPIRED = "expired"
    DAMAGED = "damaged"
    LOST = "lost"
    SCRAPPED = "scrapped"


class GasType(str, Enum):
    LPG = "lpg"
    CNG = "cng"
    OXYGEN = "oxygen"
    NITROGEN = "nitrogen"
    HYDROGEN = "hydrogen"
    HELIUM = "helium"
    ARGON = "argon"
    CARBON_DIOXIDE = "carbon_dioxide"
    ACETYLENE = "acetylene"
    PROPANE = "propane"
    BUTANE = "butane"
    MIXED = "mixed"
    OTHER = "other"


class CylinderMaterial(str, Enum):
    STEEL = "steel"
    ALUMINUM = "aluminum"
    COMPOSITE = "composite"
    FIBER = "fiber"
    OTHER = "other"


class CylinderType(BaseModel):
    """Build template shared by many serialized cylinders."""

    id: str | None = None
    name: str
    description: str | None = None
    capacity: float  # liters
    gas_type: GasType
    material: CylinderMaterial = CylinderMaterial.STEEL
    height: float | None = None
    diameter: float | None = None
    weight: float | None = None
    color: str | None = None
    valve_type: str | None = None
    standard_pressure: float | None = None
    max_pressure: float | None = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Cylinder(BaseModel):
    """One physically serialized cylinder."""

    id: str | None = None
    serial_number: str
    cylinder_type_id: str
    manufacturer_name: str | None = None
    manufacturing_date: date | None = None
    last_inspection_date: date | None = None
    next_inspection_date: date | None = None
    capacity: float | None = None
    color: str | None = None
    status: CylinderStatus = CylinderStatus.AVAILABLE
    location: str | None = None
    current_gas_type: str | None = None
    fill_level: float | None = None
    tare: float | None = None
    valve_type: str | None = None
    current_pressure: float | None = None
    max_pressure: float | None = None
    batch_number: str | None = None
    notes: str | None = None
    barcode: str | None = None
    rfid_tag: str | None = None
    is_active: bool = True
    last_filled: datetime | None = None
    last_leak_test: date | None = None
    last_maintenance_date: date | None = None
    maintenance_due_date: date | None = None
    assigned_customer_id: str | None = None
    assigned_customer_name: str | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CylinderDetail(Cylinder):
    """Cylinder joined with its type and the derived maintenance flags."""

    type_name: str | None = None
    gas_type: str | None = None
    needs_inspection: bool = False
    needs_maintenance: bool = False
    days_until_inspection: int | None = None
    fill_percentage: float | None = None


class CylinderStats(BaseModel):
    """Aggregate counts across serialized cylinders."""

    total_cylinders: int = 0
    active_cylinders: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_gas_type: dict[str, int] = Field(default_factory=dict)
    by_location: dict[str, int] = Field(default_factory=dict)
    by_cylinder_type: dict[str, int] = Field(default_factory=dict)
    need_inspection: int = 0
    need_maintenance: int = 0
    available_for_filling: int = 0
    loaned: int = 0
    loaned_by_customer: dict[str, int] = Field(default_factory=dict)
