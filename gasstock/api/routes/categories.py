"""
Cylinder category endpoints.

Categories are counted stock. Sale, exchange, return and restock are the only
way their counters change.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from gasstock.api.dependencies import (
    get_csv_use_case,
    get_engine,
    get_page,
    get_query,
    get_registry,
)
from gasstock.application.dto.requests import (
    CreateCategoryRequest,
    RestockRequest,
    StockQuantityRequest,
    UpdateCategoryRequest,
)
from gasstock.application.dto.responses import (
    CategoryMovementResponse,
    DeleteResponse,
    ErrorResponse,
    PaginatedResponse,
)
from gasstock.application.use_cases import ExportInventoryCsvUseCase
from gasstock.core.entities import (
    CategoryDetail,
    CategoryFilter,
    CategoryMovement,
    CylinderCategory,
    InventorySummary,
    PageRequest,
)
from gasstock.core.services import InventoryQueryService, MovementEngine, RegistryService
from gasstock.core.services.inventory_query import to_category_detail

router = APIRouter(prefix="/api/categories", tags=["categories"])

ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=CategoryDetail,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_category(
    request: CreateCategoryRequest,
    registry: RegistryService = Depends(get_registry),
) -> CategoryDetail:
    created = await registry.create_category(CylinderCategory(**request.model_dump()))
    return to_category_detail(created)


@router.get("", response_model=PaginatedResponse[CategoryDetail])
async def list_categories(
    search: str | None = Query(default=None, description="Matches name, description or location"),
    location: str | None = Query(default=None),
    status_filter: str | None = Query(default=None, alias="status"),
    gas_type: str | None = Query(default=None),
    min_filled_quantity: int | None = Query(default=None, ge=0),
    max_filled_quantity: int | None = Query(default=None, ge=0),
    requires_restock: bool | None = Query(default=None),
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CategoryDetail]:
    """List categories with filtering, sorting and pagination."""
    filters = CategoryFilter(
        search=search,
        location=location,
        status=status_filter,
        gas_type=gas_type,
        min_filled_quantity=min_filled_quantity,
        max_filled_quantity=max_filled_quantity,
        requires_restock=requires_restock,
    )
    result = await query.list_categories(filters, page)
    return PaginatedResponse[CategoryDetail].from_page(result)


@router.get("/summary", response_model=InventorySummary)
async def inventory_summary(
    query: InventoryQueryService = Depends(get_query),
) -> InventorySummary:
    return await query.summary()


@router.get("/requires-restock", response_model=list[CategoryDetail])
async def categories_requiring_restock(
    query: InventoryQueryService = Depends(get_query),
) -> list[CategoryDetail]:
    """Active categories with less than 20% of their cylinders filled."""
    return await query.categories_requiring_restock()


@router.get("/by-location/{location}", response_model=list[CategoryDetail])
async def categories_by_location(
    location: str,
    query: InventoryQueryService = Depends(get_query),
) -> list[CategoryDetail]:
    return await query.categories_by_location(location)


@router.get("/by-status/{category_status}", response_model=list[CategoryDetail])
async def categories_by_status(
    category_status: str,
    query: InventoryQueryService = Depends(get_query),
) -> list[CategoryDetail]:
    return await query.categories_by_status(category_status)


@router.get("/export.csv", response_model=None)
async def export_categories(
    use_case: ExportInventoryCsvUseCase = Depends(get_csv_use_case),
) -> StreamingResponse:
    export = await use_case.export_categories()
    return StreamingResponse(
        iter([export.content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.file_name}"'},
    )


@router.get("/{category_id}", response_model=CategoryDetail, responses=ERRORS)
async def get_category(
    category_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> CategoryDetail:
    return await query.get_category(category_id)


@router.get("/{category_id}/movements", response_model=PaginatedResponse[CategoryMovement])
async def category_movements(
    category_id: str,
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CategoryMovement]:
    result = await query.movements_for_category(category_id, page)
    return PaginatedResponse[CategoryMovement].from_page(result)


@router.patch("/{category_id}", response_model=CategoryDetail, responses=ERRORS)
async def update_category(
    category_id: str,
    request: UpdateCategoryRequest,
    registry: RegistryService = Depends(get_registry),
) -> CategoryDetail:
    """Edit descriptive fields. Quantities are not accepted here."""
    updated = await registry.update_category(
        category_id, request.model_dump(exclude_unset=True)
    )
    return to_category_detail(updated)


@router.delete(
    "/{category_id}",
    response_model=DeleteResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: str,
    registry: RegistryService = Depends(get_registry),
) -> DeleteResponse:
    await registry.delete_category(category_id)
    return DeleteResponse(id=category_id)


# --- Stock movements ---


@router.post(
    "/{category_id}/sale",
    response_model=CategoryMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def sell(
    category_id: str,
    request: StockQuantityRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovementResponse:
    """Filled cylinders leave with the customer."""
    result = await engine.sell(category_id, **request.model_dump())
    return CategoryMovementResponse.from_result(result)


@router.post(
    "/{category_id}/exchange",
    response_model=CategoryMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def exchange(
    category_id: str,
    request: StockQuantityRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovementResponse:
    """Filled cylinders out, the same number of empties back."""
    result = await engine.exchange(category_id, **request.model_dump())
    return CategoryMovementResponse.from_result(result)


@router.post(
    "/{category_id}/return",
    response_model=CategoryMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def return_empties(
    category_id: str,
    request: StockQuantityRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovementResponse:
    result = await engine.return_empties(category_id, **request.model_dump())
    return CategoryMovementResponse.from_result(result)


@router.post(
    "/{category_id}/restock",
    response_model=CategoryMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def restock(
    category_id: str,
    request: RestockRequest,
    engine: MovementEngine = Depends(get_engine),
) -> CategoryMovementResponse:
    result = await engine.restock(category_id, **request.model_dump())
    return CategoryMovementResponse.from_result(result)
