"""Drawing of the QR-bill payment part on a PDF page.

The payment part is produced by :mod:`qrbill` as SVG, converted to a
reportlab drawing with :mod:`svglib` and merged onto the current page of a
:class:`~qrinvoice.pdf.PdfContext` through a one-page overlay.
"""

from __future__ import annotations

import io
import logging
from typing import Any, Protocol

from pypdf import PdfReader
from qrbill import QRBill
from reportlab.graphics import renderPDF
from reportlab.pdfgen import canvas
from svglib.svglib import svg2rlg

from .payload import MAX_ADDITIONAL_INFORMATION_LENGTH, Address, QrBillPayload
from .pdf import PdfContext
from .utils import format_amount, truncate

LOGGER = logging.getLogger("qrinvoice.rendering")

SUPPORTED_LANGUAGES = ("de", "fr", "it")
DEFAULT_LANGUAGE = "en"


class PanelRenderer(Protocol):
    """Adapter drawing a payload on the current page of a PDF context."""

    def draw(self, payload: QrBillPayload, language: str, pdf: PdfContext) -> None:
        """Draw the payment part; raise on failure."""


def panel_language(short_language: str) -> str:
    """Return the payment part language for a two-letter language code."""

    return short_language if short_language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def _address_fields(address: Address) -> dict[str, Any]:
    return {
        "name": address.name,
        "street": address.street,
        "pcode": address.postal_code,
        "city": address.town,
        "country": address.country,
    }


def to_qrbill(payload: QrBillPayload, language: str) -> QRBill:
    """Build the :class:`qrbill.QRBill` matching ``payload``."""

    amount = payload.payment_amount_information.amount
    reference = payload.payment_reference.reference or None
    return QRBill(
        account=payload.creditor_information.iban,
        creditor=_address_fields(payload.creditor),
        debtor=_address_fields(payload.ultimate_debtor) if payload.ultimate_debtor else None,
        amount=format_amount(amount) if amount is not None else None,
        currency=payload.payment_amount_information.currency,
        reference_number=reference,
        additional_information=truncate(
            payload.additional_information, MAX_ADDITIONAL_INFORMATION_LENGTH
        ),
        language=language,
    )


class QrBillPanelRenderer:
    """Renders the payment part at the bottom of the current page."""

    def draw(self, payload: QrBillPayload, language: str, pdf: PdfContext) -> None:
        bill = to_qrbill(payload, language)

        svg = io.StringIO()
        bill.as_svg(svg)
        # lxml refuses text input that carries an encoding declaration.
        drawing = svg2rlg(io.BytesIO(svg.getvalue().encode("utf-8")))
        if drawing is None:
            raise RuntimeError("The QR-bill SVG could not be converted")

        page = pdf.current_page
        width = float(page.mediabox.width)
        height = float(page.mediabox.height)
        if drawing.width and abs(drawing.width - width) > 0.5:
            factor = width / drawing.width
            drawing.width *= factor
            drawing.height *= factor
            drawing.scale(factor, factor)

        buffer = io.BytesIO()
        overlay = canvas.Canvas(buffer, pagesize=(width, height))
        red, green, blue = pdf.text_color
        overlay.setFillColorRGB(red / 255, green / 255, blue / 255)
        renderPDF.draw(drawing, overlay, 0, 0)
        overlay.showPage()
        overlay.save()

        page.merge_page(PdfReader(io.BytesIO(buffer.getvalue())).pages[0])
        LOGGER.debug("Payment part merged on page %d (%s)", pdf.page_number, language)


__all__ = [
    "DEFAULT_LANGUAGE",
    "PanelRenderer",
    "QrBillPanelRenderer",
    "SUPPORTED_LANGUAGES",
    "panel_language",
    "to_qrbill",
]
