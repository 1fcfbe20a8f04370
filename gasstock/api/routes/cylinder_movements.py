"""Cylinder movement endpoints: record, list, inspect and correct."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from gasstock.api.dependencies import get_engine, get_page, get_query
from gasstock.application.dto.requests import (
    CorrectCylinderMovementRequest,
    CreateCylinderMovementRequest,
)
from gasstock.application.dto.responses import (
    CylinderMovementResponse,
    ErrorResponse,
    PaginatedResponse,
    cylinder_movement_response,
)
from gasstock.core.entities import CylinderMovement, CylinderMovementFilter, PageRequest
from gasstock.core.services import (
    CylinderMovementCommand,
    InventoryQueryService,
    MovementEngine,
)

router = APIRouter(prefix="/api/cylinder-movements", tags=["cylinder-movements"])


@router.post(
    "",
    response_model=CylinderMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_movement(
    request: CreateCylinderMovementRequest,
    engine: MovementEngine = Depends(get_engine),
    query: InventoryQueryService = Depends(get_query),
) -> CylinderMovementResponse:
    result = await engine.record_cylinder_movement(
        CylinderMovementCommand(**request.model_dump())
    )
    return cylinder_movement_response(result, await query.get_cylinder(request.cylinder_id))


@router.get("", response_model=PaginatedResponse[CylinderMovement])
async def list_movements(
    cylinder_id: str | None = Query(default=None),
    movement_type: str | None = Query(default=None),
    customer_id: str | None = Query(default=None),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    search: str | None = Query(default=None),
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CylinderMovement]:
    filters = CylinderMovementFilter(
        cylinder_id=cylinder_id,
        movement_type=movement_type,
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    result = await query.list_cylinder_movements(filters, page)
    return PaginatedResponse[CylinderMovement].from_page(result)


@router.get(
    "/{movement_id}",
    response_model=CylinderMovement,
    responses={404: {"model": ErrorResponse}},
)
async def get_movement(
    movement_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> CylinderMovement:
    return await query.get_cylinder_movement(movement_id)


@router.patch(
    "/{movement_id}",
    response_model=CylinderMovement,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def correct_movement(
    movement_id: str,
    request: CorrectCylinderMovementRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CylinderMovement:
    return await engine.correct_cylinder_movement(
        movement_id, request.model_dump(exclude_unset=True)
    )
