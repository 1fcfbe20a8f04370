"""
Domain exceptions for the gas cylinder inventory.

Every error carries one of five kinds as its ``code``: NOT_FOUND, BAD_REQUEST,
CONFLICT, DATABASE_ERROR or INTERNAL. The HTTP layer maps kinds to status codes.
"""

from typing import Any


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    default_code = "INTERNAL"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Not Found
class NotFoundError(InventoryError):
    """Referenced entity does not exist."""

    default_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} not found: {entity_id}",
            details={"entity": entity, "id": entity_id},
        )


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str):
        super().__init__("Cylinder category", category_id)


class CylinderTypeNotFoundError(NotFoundError):
    def __init__(self, type_id: str):
        super().__init__("Cylinder type", type_id)


class CylinderNotFoundError(NotFoundError):
    def __init__(self, cylinder_id: str):
        super().__init__("Cylinder", cylinder_id)


class MovementNotFoundError(NotFoundError):
    def __init__(self, movement_id: str):
        super().__init__("Movement", movement_id)


# Bad Request
class BadRequestError(InventoryError):
    """Request is semantically invalid."""

    default_code = "BAD_REQUEST"

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Invalid '{field}': {message}",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(BadRequestError):
    """Quantity must be a positive whole number."""

    def __init__(self, quantity: Any, field: str = "quantity"):
        super().__init__(field, "must be greater than zero", quantity)


class InvalidStatusError(BadRequestError):
    """Status is not a member of the allowed set."""

    def __init__(self, status: Any, allowed: list[str]):
        super().__init__("status", f"must be one of {', '.join(allowed)}", status)
        self.details["allowed"] = allowed


class InvalidUpdateError(BadRequestError):
    """Update touches fields that cannot be edited directly."""

    def __init__(self, fields: list[str], reason: str):
        super().__init__(", ".join(sorted(fields)), reason)
        self.details["fields"] = sorted(fields)


class InvalidSortFieldError(BadRequestError):
    def __init__(self, sort_by: str, allowed: list[str]):
        super().__init__("sort_by", f"must be one of {', '.join(allowed)}", sort_by)


class InvalidLabelTextError(BadRequestError):
    def __init__(self, text: str, reason: str):
        super().__init__("serial_number", reason, text)


# Conflict
class ConflictError(InventoryError):
    """Operation conflicts with existing data."""

    default_code = "CONFLICT"


class ReferencedEntityError(ConflictError):
    """Delete blocked because other records still reference the entity."""

    def __init__(self, entity: str, entity_id: str, referenced_by: str, count: int):
        super().__init__(
            f"Cannot delete {entity} {entity_id}: referenced by {count} {referenced_by}",
            details={
                "entity": entity,
                "id": entity_id,
                "referenced_by": referenced_by,
                "count": count,
            },
        )


class DuplicateSerialNumberError(ConflictError):
    def __init__(self, serial_number: str):
        super().__init__(
            f"Cylinder with serial number already exists: {serial_number}",
            details={"serial_number": serial_number},
        )


# Storage
class DatabaseError(InventoryError):
    """Database operation failed."""

    default_code = "DATABASE_ERROR"

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database operation failed: {operation}",
            details={"operation": operation, "error": error},
        )


class InternalError(InventoryError):
    """Unexpected failure. The cause is logged, never exposed."""

    default_code = "INTERNAL"

