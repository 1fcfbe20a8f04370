"""
Dependency providers for FastAPI.

Route handlers receive services from the container the lifespan stored on
``app.state``.
"""

from fastapi import Depends, Query, Request

from gasstock.application.services import ServiceContainer
from gasstock.application.use_cases import (
    ExportInventoryCsvUseCase,
    GenerateCylinderLabelUseCase,
    GenerateInventoryReportUseCase,
)
from gasstock.core.entities import PageRequest
from gasstock.core.services import InventoryQueryService, MovementEngine, RegistryService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_engine(container: ServiceContainer = Depends(get_container)) -> MovementEngine:
    return container.engine


def get_registry(container: ServiceContainer = Depends(get_container)) -> RegistryService:
    return container.registry


def get_query(container: ServiceContainer = Depends(get_container)) -> InventoryQueryService:
    return container.query


def get_report_use_case(
    container: ServiceContainer = Depends(get_container),
) -> GenerateInventoryReportUseCase:
    return container.report_use_case


def get_csv_use_case(
    container: ServiceContainer = Depends(get_container),
) -> ExportInventoryCsvUseCase:
    return container.csv_use_case


def get_label_use_case(
    container: ServiceContainer = Depends(get_container),
) -> GenerateCylinderLabelUseCase:
    return container.label_use_case


def get_page(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: str | None = Query(default=None),
    sort_order: str | None = Query(default=None, pattern="^(asc|desc)$"),
) -> PageRequest:
    """Pagination and sort query parameters shared by every listing."""
    return PageRequest(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
