"""
Generate Cylinder Label Use Case.

Produces a QR code PNG or a Code 39 barcode PDF for one cylinder.
"""

from dataclasses import dataclass
from typing import Literal

from gasstock.config import get_logger
from gasstock.core.services import InventoryQueryService
from gasstock.infrastructure.reports import CylinderLabelRenderer

logger = get_logger(__name__)

LabelKind = Literal["qrcode", "barcode"]


@dataclass
class CylinderLabel:
    content: bytes
    media_type: str
    file_name: str


class GenerateCylinderLabelUseCase:
    def __init__(self, query: InventoryQueryService, renderer: CylinderLabelRenderer):
        self._query = query
        self._renderer = renderer

    async def execute(self, cylinder_id: str, kind: LabelKind = "qrcode") -> CylinderLabel:
        """
        Render a label for a cylinder.

        Raises:
            CylinderNotFoundError: If the cylinder does not exist.
            InvalidLabelTextError: If the serial number cannot be barcoded.
        """
        cylinder = await self._query.get_cylinder(cylinder_id)

        if kind == "barcode":
            label = CylinderLabel(
                content=self._renderer.render_barcode_pdf(cylinder),
                media_type="application/pdf",
                file_name=f"barcode_{cylinder.serial_number}.pdf",
            )
        else:
            label = CylinderLabel(
                content=self._renderer.render_qr_png(cylinder),
                media_type="image/png",
                file_name=f"qrcode_{cylinder.serial_number}.png",
            )

        logger.info("cylinder_label_generated", cylinder_id=cylinder_id, kind=kind)
        return label
