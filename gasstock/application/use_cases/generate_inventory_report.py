"""
Generate Inventory Report Use Case.

Renders the filtered cylinder inventory as a PDF document.
"""

from dataclasses import dataclass

from gasstock.config import get_logger
from gasstock.core.entities import CylinderFilter
from gasstock.core.services import InventoryQueryService
from gasstock.infrastructure.reports import IInventoryReportRenderer

logger = get_logger(__name__)

# Filter fields echoed in the report header, with their labels
CRITERIA_LABELS = {
    "status": "Status",
    "cylinder_type_id": "Cylinder Type",
    "gas_type": "Gas Type",
    "location": "Location",
    "customer_id": "Customer",
    "search": "Search",
}


@dataclass
class InventoryReportResult:
    """Result of inventory report generation."""

    pdf_bytes: bytes
    file_name: str
    cylinder_count: int
    file_size: int


class GenerateInventoryReportUseCase:
    """
    Use case for generating the cylinder inventory PDF.

    Flow:
    1. Load every cylinder matching the filters
    2. Render PDF via the report renderer
    3. Return PDF bytes and metadata
    """

    def __init__(self, query: InventoryQueryService, renderer: IInventoryReportRenderer):
        self._query = query
        self._renderer = renderer

    async def execute(self, filters: CylinderFilter | None = None) -> InventoryReportResult:
        filters = filters or CylinderFilter()
        logger.info("inventory_report_started", filters=filters.model_dump(exclude_none=True))

        cylinders = await self._query.all_cylinders(filters)
        pdf_bytes = self._renderer.render(cylinders, self.criteria(filters))

        logger.info(
            "inventory_report_complete",
            cylinders=len(cylinders),
            file_size=len(pdf_bytes),
        )
        return InventoryReportResult(
            pdf_bytes=pdf_bytes,
            file_name="cylinder_inventory_report.pdf",
            cylinder_count=len(cylinders),
            file_size=len(pdf_bytes),
        )

    @staticmethod
    def criteria(filters: CylinderFilter) -> dict[str, str]:
        criteria = {
            label: str(getattr(filters, name))
            for name, label in CRITERIA_LABELS.items()
            if getattr(filters, name)
        }
        if filters.needs_inspection:
            criteria["Inspection Due"] = f"within {filters.threshold_days} days"
        if filters.needs_maintenance:
            criteria["Maintenance Due"] = f"within {filters.threshold_days} days"
        return criteria
