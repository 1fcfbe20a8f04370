"""Application use cases."""

from gasstock.application.use_cases.export_inventory_csv import (
    CsvExport,
    ExportInventoryCsvUseCase,
)
from gasstock.application.use_cases.generate_cylinder_label import (
    CylinderLabel,
    GenerateCylinderLabelUseCase,
)
from gasstock.application.use_cases.generate_inventory_report import (
    GenerateInventoryReportUseCase,
    InventoryReportResult,
)

__all__ = [
    "GenerateInventoryReportUseCase",
    "InventoryReportResult",
    "ExportInventoryCsvUseCase",
    "CsvExport",
    "GenerateCylinderLabelUseCase",
    "CylinderLabel",
]
