"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from gasstock.application.dto.requests import (
    CorrectCategoryMovementRequest,
    CorrectCylinderMovementRequest,
    CreateCategoryMovementRequest,
    CreateCategoryRequest,
    CreateCylinderMovementRequest,
    CreateCylinderRequest,
    CreateCylinderTypeRequest,
    CylinderStatusRequest,
    RestockRequest,
    StockQuantityRequest,
    UpdateCategoryRequest,
    UpdateCylinderRequest,
    UpdateCylinderTypeRequest,
)
from gasstock.application.dto.responses import (
    CategoryMovementResponse,
    CylinderMovementResponse,
    CylinderUpdateResponse,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    PaginatedResponse,
)

__all__ = [
    # Requests
    "CreateCategoryRequest",
    "UpdateCategoryRequest",
    "StockQuantityRequest",
    "RestockRequest",
    "CreateCategoryMovementRequest",
    "CorrectCategoryMovementRequest",
    "CreateCylinderTypeRequest",
    "UpdateCylinderTypeRequest",
    "CreateCylinderRequest",
    "UpdateCylinderRequest",
    "CylinderStatusRequest",
    "CreateCylinderMovementRequest",
    "CorrectCylinderMovementRequest",
    # Responses
    "CategoryMovementResponse",
    "CylinderMovementResponse",
    "CylinderUpdateResponse",
    "DeleteResponse",
    "ErrorResponse",
    "HealthResponse",
    "PaginatedResponse",
]
