"""
Cylinder inventory PDF report using fpdf2.

Title block, applied filters, counts by status and a cylinder table, with a
page-numbered footer on every page.
"""

from abc import ABC, abstractmethod
from collections import Counter
from datetime import UTC, datetime

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from gasstock.config.settings import ReportSettings, get_settings
from gasstock.core.entities import CylinderDetail

TABLE_COLUMNS = [
    ("Serial #", 40),
    ("Type", 45),
    ("Status", 30),
    ("Location", 40),
    ("Next Inspection", 35),
]


def safe_text(text: object) -> str:
    """Core PDF fonts are latin-1 only."""
    return str(text).encode("latin-1", "replace").decode("latin-1")


class IInventoryReportRenderer(ABC):
    """Interface for inventory report rendering implementations."""

    @abstractmethod
    def render(self, cylinders: list[CylinderDetail], criteria: dict[str, str]) -> bytes:
        """Render the cylinder list into PDF bytes."""
        ...


class _ReportPdf(FPDF):
    """FPDF subclass that renders a footer on every page."""

    def __init__(self, company_name: str, generated_at: datetime) -> None:
        super().__init__()
        self._company_name = company_name
        self._generated = generated_at.strftime("%Y-%m-%d %H:%M UTC")

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 5, safe_text(self._company_name), align="L")
        self.set_x(-60)
        self.cell(0, 5, f"Page {self.page_no()} of {{nb}} | {self._generated}", align="R")


class Fpdf2InventoryReportRenderer(IInventoryReportRenderer):
    """Renders the cylinder inventory report."""

    def __init__(self, settings: ReportSettings | None = None) -> None:
        self._settings = settings or get_settings().report

    def render(self, cylinders: list[CylinderDetail], criteria: dict[str, str]) -> bytes:
        generated_at = datetime.now(UTC)
        pdf = _ReportPdf(self._settings.company_name, generated_at)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        self._render_title(pdf, generated_at)
        self._render_criteria(pdf, criteria)
        self._render_summary(pdf, cylinders)
        self._render_table(pdf, cylinders)

        return bytes(pdf.output())

    def _render_title(self, pdf: FPDF, generated_at: datetime) -> None:
        pdf.set_font("Helvetica", "B", 18)
        pdf.cell(
            0, 12, "Cylinder Inventory Report", align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(
            0, 6, safe_text(self._settings.company_name), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.cell(
            0, 6, f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M UTC')}", align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.ln(4)

    @staticmethod
    def _render_criteria(pdf: FPDF, criteria: dict[str, str]) -> None:
        if not criteria:
            return
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 8, "Filter Criteria", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 10)
        for name, value in criteria.items():
            pdf.cell(
                0, 6, safe_text(f"{name}: {value}"),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(3)

    @staticmethod
    def _render_summary(pdf: FPDF, cylinders: list[CylinderDetail]) -> None:
        pdf.set_font("Helvetica", "B", 12)
        pdf.cell(0, 8, "Summary", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(
            0, 6, f"Total Cylinders: {len(cylinders)}",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        by_status = Counter(c.status.value for c in cylinders)
        for status, count in sorted(by_status.items()):
            pdf.cell(
                0, 6, f"{status}: {count}",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        pdf.ln(3)

    @staticmethod
    def _render_table(pdf: FPDF, cylinders: list[CylinderDetail]) -> None:
        """Cylinder table with a shaded header and alternating rows."""
        pdf.set_font("Helvetica", "B", 9)
        pdf.set_fill_color(70, 70, 70)
        pdf.set_text_color(255, 255, 255)
        for header, width in TABLE_COLUMNS:
            pdf.cell(width, 7, header, border=1, fill=True, align="C")
        pdf.ln()
        pdf.set_text_color(0, 0, 0)

        pdf.set_font("Helvetica", "", 8)
        for idx, cylinder in enumerate(cylinders, 1):
            fill = idx % 2 == 0
            if fill:
                pdf.set_fill_color(240, 240, 240)
            row = [
                cylinder.serial_number,
                cylinder.type_name or "N/A",
                cylinder.status.value,
                cylinder.location or "N/A",
                cylinder.next_inspection_date.isoformat()
                if cylinder.next_inspection_date
                else "N/A",
            ]
            for (_, width), value in zip(TABLE_COLUMNS, row):
                pdf.cell(width, 6, safe_text(value)[:30], border=1, fill=fill)
            pdf.ln()
