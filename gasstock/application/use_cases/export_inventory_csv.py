"""Export Inventory CSV Use Case."""

from dataclasses import dataclass

from gasstock.config import get_logger
from gasstock.core.entities import CylinderFilter
from gasstock.core.services import InventoryQueryService
from gasstock.infrastructure.reports import categories_to_csv, cylinders_to_csv

logger = get_logger(__name__)


@dataclass
class CsvExport:
    content: str
    file_name: str
    rows: int


class ExportInventoryCsvUseCase:
    """Spreadsheet exports of cylinders and categories."""

    def __init__(self, query: InventoryQueryService):
        self._query = query

    async def execute(self, filters: CylinderFilter | None = None) -> CsvExport:
        """Export cylinders matching ``filters``."""
        cylinders = await self._query.all_cylinders(filters)
        logger.info("cylinder_csv_exported", rows=len(cylinders))
        return CsvExport(
            content=cylinders_to_csv(cylinders),
            file_name="cylinders_export.csv",
            rows=len(cylinders),
        )

    async def export_categories(self) -> CsvExport:
        categories = await self._query.all_categories()
        logger.info("category_csv_exported", rows=len(categories))
        return CsvExport(
            content=categories_to_csv(categories),
            file_name="categories_export.csv",
            rows=len(categories),
        )
