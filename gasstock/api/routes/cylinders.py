"""
Serialized cylinder endpoints.

Status changes go through the movement engine so every transition leaves a
movement record.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response, StreamingResponse

from gasstock.api.dependencies import (
    get_csv_use_case,
    get_engine,
    get_label_use_case,
    get_page,
    get_query,
    get_registry,
    get_report_use_case,
)
from gasstock.application.dto.requests import (
    CreateCylinderRequest,
    CylinderStatusRequest,
    UpdateCylinderRequest,
)
from gasstock.application.dto.responses import (
    CylinderMovementResponse,
    CylinderUpdateResponse,
    DeleteResponse,
    ErrorResponse,
    PaginatedResponse,
    cylinder_movement_response,
    cylinder_update_response,
)
from gasstock.application.use_cases import (
    ExportInventoryCsvUseCase,
    GenerateCylinderLabelUseCase,
    GenerateInventoryReportUseCase,
)
from gasstock.core.entities import (
    Cylinder,
    CylinderDetail,
    CylinderFilter,
    CylinderMovement,
    CylinderStats,
    PageRequest,
)
from gasstock.core.services import InventoryQueryService, MovementEngine, RegistryService

router = APIRouter(prefix="/api/cylinders", tags=["cylinders"])

NOT_FOUND = {404: {"model": ErrorResponse}}


def cylinder_filters(
    search: str | None = Query(default=None, description="Matches serial number, manufacturer or location"),
    status_filter: str | None = Query(default=None, alias="status"),
    cylinder_type_id: str | None = Query(default=None),
    gas_type: str | None = Query(default=None),
    customer_id: str | None = Query(default=None),
    location: str | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    min_fill_level: float | None = Query(default=None, ge=0),
    max_fill_level: float | None = Query(default=None, ge=0),
    needs_inspection: bool | None = Query(default=None),
    needs_maintenance: bool | None = Query(default=None),
    threshold_days: int = Query(default=30, ge=0),
) -> CylinderFilter:
    return CylinderFilter(
        search=search,
        status=status_filter,
        cylinder_type_id=cylinder_type_id,
        gas_type=gas_type,
        customer_id=customer_id,
        location=location,
        is_active=is_active,
        min_fill_level=min_fill_level,
        max_fill_level=max_fill_level,
        needs_inspection=needs_inspection,
        needs_maintenance=needs_maintenance,
        threshold_days=threshold_days,
    )


@router.post(
    "",
    response_model=CylinderDetail,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_cylinder(
    request: CreateCylinderRequest,
    registry: RegistryService = Depends(get_registry),
    query: InventoryQueryService = Depends(get_query),
) -> CylinderDetail:
    created = await registry.create_cylinder(
        Cylinder(**request.model_dump(exclude={"performed_by"})),
        performed_by=request.performed_by,
    )
    return await query.get_cylinder(created.id)


@router.get("", response_model=PaginatedResponse[CylinderDetail])
async def list_cylinders(
    filters: CylinderFilter = Depends(cylinder_filters),
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CylinderDetail]:
    result = await query.list_cylinders(filters, page)
    return PaginatedResponse[CylinderDetail].from_page(result)


@router.get("/stats", response_model=CylinderStats)
async def cylinder_stats(
    query: InventoryQueryService = Depends(get_query),
) -> CylinderStats:
    return await query.cylinder_stats()


@router.get("/inspection-due", response_model=list[CylinderDetail])
async def inspection_due(
    days: int | None = Query(default=None, ge=0, description="Look-ahead window in days"),
    query: InventoryQueryService = Depends(get_query),
) -> list[CylinderDetail]:
    """Active cylinders whose next inspection is within ``days`` or overdue."""
    return await query.cylinders_due_for_inspection(days)


@router.get("/by-customer/{customer_id}", response_model=list[CylinderDetail])
async def cylinders_by_customer(
    customer_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> list[CylinderDetail]:
    return await query.cylinders_by_customer(customer_id)


@router.get("/by-status/{cylinder_status}", response_model=list[CylinderDetail])
async def cylinders_by_status(
    cylinder_status: str,
    query: InventoryQueryService = Depends(get_query),
) -> list[CylinderDetail]:
    return await query.cylinders_by_status(cylinder_status)


@router.get("/report.pdf", response_model=None)
async def inventory_report(
    filters: CylinderFilter = Depends(cylinder_filters),
    use_case: GenerateInventoryReportUseCase = Depends(get_report_use_case),
) -> Response:
    """Filtered cylinder inventory as a PDF document."""
    result = await use_case.execute(filters)
    return Response(
        content=result.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{result.file_name}"'},
    )


@router.get("/export.csv", response_model=None)
async def export_cylinders(
    filters: CylinderFilter = Depends(cylinder_filters),
    use_case: ExportInventoryCsvUseCase = Depends(get_csv_use_case),
) -> StreamingResponse:
    export = await use_case.execute(filters)
    return StreamingResponse(
        iter([export.content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export.file_name}"'},
    )


@router.get("/serial/{serial_number}", response_model=CylinderDetail, responses=NOT_FOUND)
async def get_cylinder_by_serial(
    serial_number: str,
    query: InventoryQueryService = Depends(get_query),
) -> CylinderDetail:
    return await query.get_cylinder_by_serial(serial_number)


@router.get("/{cylinder_id}", response_model=CylinderDetail, responses=NOT_FOUND)
async def get_cylinder(
    cylinder_id: str,
    query: InventoryQueryService = Depends(get_query),
) -> CylinderDetail:
    return await query.get_cylinder(cylinder_id)


@router.get(
    "/{cylinder_id}/movements",
    response_model=PaginatedResponse[CylinderMovement],
    responses=NOT_FOUND,
)
async def cylinder_movements(
    cylinder_id: str,
    page: PageRequest = Depends(get_page),
    query: InventoryQueryService = Depends(get_query),
) -> PaginatedResponse[CylinderMovement]:
    result = await query.movements_for_cylinder(cylinder_id, page)
    return PaginatedResponse[CylinderMovement].from_page(result)


@router.post(
    "/{cylinder_id}/status",
    response_model=CylinderMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, **NOT_FOUND},
)
async def change_status(
    cylinder_id: str,
    request: CylinderStatusRequest,
    engine: MovementEngine = Depends(get_engine),
    query: InventoryQueryService = Depends(get_query),
) -> CylinderMovementResponse:
    """Move the cylinder to a new status; the movement type follows from it."""
    result = await engine.change_cylinder_status(
        cylinder_id, request.status, request.performed_by, request.notes
    )
    return cylinder_movement_response(result, await query.get_cylinder(cylinder_id))


@router.get("/{cylinder_id}/qrcode", response_model=None, responses=NOT_FOUND)
async def cylinder_qrcode(
    cylinder_id: str,
    use_case: GenerateCylinderLabelUseCase = Depends(get_label_use_case),
) -> Response:
    label = await use_case.execute(cylinder_id, "qrcode")
    return Response(content=label.content, media_type=label.media_type)


@router.get(
    "/{cylinder_id}/barcode",
    response_model=None,
    responses={400: {"model": ErrorResponse}, **NOT_FOUND},
)
async def cylinder_barcode(
    cylinder_id: str,
    use_case: GenerateCylinderLabelUseCase = Depends(get_label_use_case),
) -> Response:
    label = await use_case.execute(cylinder_id, "barcode")
    return Response(
        content=label.content,
        media_type=label.media_type,
        headers={"Content-Disposition": f'inline; filename="{label.file_name}"'},
    )


@router.patch(
    "/{cylinder_id}",
    response_model=CylinderUpdateResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, **NOT_FOUND},
)
async def update_cylinder(
    cylinder_id: str,
    request: UpdateCylinderRequest,
    engine: MovementEngine = Depends(get_engine),
    query: InventoryQueryService = Depends(get_query),
) -> CylinderUpdateResponse:
    changes = request.model_dump(exclude_unset=True)
    performed_by = changes.pop("performed_by", None)
    result = await engine.update_cylinder(cylinder_id, changes, performed_by)
    return cylinder_update_response(result, await query.get_cylinder(cylinder_id))


@router.delete("/{cylinder_id}", response_model=DeleteResponse, responses=NOT_FOUND)
async def delete_cylinder(
    cylinder_id: str,
    registry: RegistryService = Depends(get_registry),
) -> DeleteResponse:
    """Delete the cylinder and its movement history."""
    await registry.delete_cylinder(cylinder_id)
    return DeleteResponse(id=cylinder_id)
