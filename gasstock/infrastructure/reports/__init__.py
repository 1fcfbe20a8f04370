"""Report and label renderers."""

from gasstock.infrastructure.reports.csv_export import categories_to_csv, cylinders_to_csv
from gasstock.infrastructure.reports.inventory_pdf import (
    Fpdf2InventoryReportRenderer,
    IInventoryReportRenderer,
)
from gasstock.infrastructure.reports.labels import CylinderLabelRenderer

__all__ = [
    "Fpdf2InventoryReportRenderer",
    "IInventoryReportRenderer",
    "CylinderLabelRenderer",
    "categories_to_csv",
    "cylinders_to_csv",
]
