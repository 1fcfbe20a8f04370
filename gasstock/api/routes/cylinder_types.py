"""Cylinder type endpoints."""

from fastapi import APIRouter, Depends, Query, status

from gasstock.api.dependencies import get_page, get_query, get_registry
from gasstock.application.dto.requests import (
    CreateCylinderTypeRequest,
    UpdateCylinderTypeRequest,
)
from gasstock.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    PaginatedResponse,
)
from gasstock.core.entities import (
    CylinderDetail,
    CylinderType,
    CylinderTypeFilter,
    PageRequest,
)
from gasstock.core.services import InventoryQueryService, RegistryService

router = APIRouter(prefix="/api/cylinder-types", tags=["cylinder-types"])


@router.post(
    "",
    response_model=CylinderType,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_cylinder_type(
    request: CreateCylinderTypeRequest,
    registry: RegistryService = Depends(get_registry),
) -> CylinderType:
    return await registry.create_cylinder_type(CylinderType(**request.model_dump()))


@router.get("", response_model=PaginatedResponse[CylinderType])
async def list_cylinder_types(
    search: str | None = Query(default=None),
    gas_type: str | None = Query(default=None),
    material: str | None = Query(default=None),
    min_capacity: float | None = Query(default=None, ge=0),
    max_capacity: float | None = Query(default=None, ge=0),
    is_active: bool | None = Query(default=None),
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CylinderType]:
    filters = CylinderTypeFilter(
        search=search,
        gas_type=gas_type,
        material=material,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        is_active=is_active,
    )
    result = await query.list_cylinder_types(filters, page)
    return PaginatedResponse[CylinderType].from_page(result)


@router.get(
    "/{type_id}",
    response_model=CylinderType,
    responses={404: {"model": ErrorResponse}},
)
async def get_cylinder_type(
    type_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> CylinderType:
    return await query.get_cylinder_type(type_id)


@router.get("/{type_id}/cylinders", response_model=list[CylinderDetail])
async def cylinders_of_type(
    type_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> list[CylinderDetail]:
    return await query.cylinders_by_type(type_id)


@router.patch(
    "/{type_id}",
    response_model=CylinderType,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_cylinder_type(
    type_id: str,
    request: UpdateCylinderTypeRequest,
    registry: RegistryService = Depends(get_registry),
) -> CylinderType:
    return await registry.update_cylinder_type(type_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/{type_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_cylinder_type(
    type_id: str,
    registry: RegistryService = Depends(get_registry),
) -> DeleteResponse:
    """Types still referenced by cylinders cannot be deleted."""
    await registry.delete_cylinder_type(type_id)
    return DeleteResponse(id=type_id)
