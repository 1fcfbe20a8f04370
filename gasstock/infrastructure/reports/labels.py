"""QR code and barcode labels for individual cylinders."""

import io
import json
import re

import qrcode
from fpdf import FPDF

from gasstock.core.entities import CylinderDetail
from gasstock.core.exceptions import InvalidLabelTextError

# Code 39 symbol set, without the '*' start/stop character
_CODE39_TEXT = re.compile(r"^[0-9A-Z \-.$/+%]+$")


class CylinderLabelRenderer:
    """Renders scannable labels that identify a cylinder."""

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    def qr_payload(self, cylinder: CylinderDetail) -> str:
        """JSON encoded into the QR code."""
        return json.dumps({
            "id": cylinder.id,
            "serialNumber": cylinder.serial_number,
            "capacity": cylinder.capacity,
            "type": cylinder.type_name,
            "url": f"{self._base_url}/{cylinder.id}",
        })

    def render_qr_png(self, cylinder: CylinderDetail) -> bytes:
        qr = qrcode.QRCode(version=1, box_size=10, border=5)
        qr.add_data(self.qr_payload(cylinder))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    def render_barcode_pdf(self, cylinder: CylinderDetail) -> bytes:
        """Single-label PDF with the serial number as a Code 39 barcode."""
        text = cylinder.serial_number.upper()
        if not _CODE39_TEXT.match(text):
            raise InvalidLabelTextError(
                cylinder.serial_number,
                "only letters, digits, space and - . $ / + % can be encoded",
            )

        pdf = FPDF(orientation="L", unit="mm", format=(50, 100))
        pdf.set_auto_page_break(auto=False)
        pdf.add_page()
        pdf.code39(f"*{text}*", 5, 8, 0.4, 25)
        pdf.set_xy(5, 36)
        pdf.set_font("Helvetica", "", 10)
        pdf.cell(90, 6, text, align="C")
        return bytes(pdf.output())
