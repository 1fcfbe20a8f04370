"""Category movement endpoints: record, list, inspect and correct."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from gasstock.api.dependencies import get_engine, get_page, get_query
from gasstock.application.dto.requests import (
    CorrectCategoryMovementRequest,
    CreateCategoryMovementRequest,
)
from gasstock.application.dto.responses import (
    CategoryMovementResponse,
    ErrorResponse,
    PaginatedResponse,
)
from gasstock.core.entities import CategoryMovement, CategoryMovementFilter, PageRequest
from gasstock.core.services import (
    CategoryMovementCommand,
    InventoryQueryService,
    MovementEngine,
)

router = APIRouter(prefix="/api/category-movements", tags=["category-movements"])


@router.post(
    "",
    response_model=CategoryMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_movement(
    request: CreateCategoryMovementRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovementResponse:
    """Record a movement and apply its counter change atomically."""
    result = await engine.record_category_movement(
        CategoryMovementCommand(**request.model_dump())
    )
    return CategoryMovementResponse.from_result(result)


@router.get("", response_model=PaginatedResponse[CategoryMovement])
async def list_movements(
    category_id: str | None = Query(default=None),
    movement_type: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    customer_id: str | None = Query(default=None),
    driver_id: str | None = Query(default=None),
    from_date: datetime | None = Query(default=None),
    to_date: datetime | None = Query(default=None),
    search: str | None = Query(default=None, description="Matches locations or notes"),
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CategoryMovement]:
    filters = CategoryMovementFilter(
        category_id=category_id,
        movement_type=movement_type,
        status=status_filter,
        customer_id=customer_id,
        driver_id=driver_id,
        from_date=from_date,
        to_date=to_date,
        search=search,
    )
    result = await query.list_category_movements(filters, page)
    return PaginatedResponse[CategoryMovement].from_page(result)


@router.get(
    "/{movement_id}",
    response_model=CategoryMovement,
    responses={404: {"model": ErrorResponse}},
)
async def get_movement(
    movement_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> CategoryMovement:
    return await query.get_category_movement(movement_id)


@router.patch(
    "/{movement_id}",
    response_model=CategoryMovement,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def correct_movement(
    movement_id: str,
    request: CorrectCategoryMovementRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovement:
    """Correct reference fields. Counters are never re-applied."""
    return await engine.correct_category_movement(
        movement_id, request.model_dump(exclude_unset=True)
    )
