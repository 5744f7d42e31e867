"""Invoice document models.

:class:`InvoiceDocumentModel` is the parent of every invoice PDF generator.
It carries the QR-bill integration: reserving room at the bottom of page 1
(:meth:`~InvoiceDocumentModel.height_for_qr_panel`) and drawing the payment
part there once the pages exist (:meth:`~InvoiceDocumentModel.render_qr_panel`).
Concrete models register themselves with :func:`register_model` and are
listed by :func:`list_models`.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from .accounts import AccountStore
from .invoices import Invoice, InvoiceLine, Party
from .pdf import PdfContext
from .rendering import PanelRenderer, QrBillPanelRenderer, panel_language
from .settings import InvoiceSettings
from .swissqr import QrBillError, QrBillErrorKind, QrBillResult, build_qr_bill
from .translation import Translator
from .utils import format_amount, truncate

LOGGER = logging.getLogger("qrinvoice.documents")

# The standard asks for 105 mm; 100 mm leaves the page number readable.
QR_PANEL_HEIGHT_MM = 100


@dataclass(frozen=True)
class QrPanelOutcome:
    """Result of :meth:`InvoiceDocumentModel.render_qr_panel`."""

    rendered: bool
    error: QrBillError | None = None


@dataclass(frozen=True)
class DocumentResult:
    """Result of writing an invoice document."""

    path: Path
    page_count: int
    qr_rendered: bool = False
    error: QrBillError | None = None


_MODELS: dict[str, type["InvoiceDocumentModel"]] = {}


def register_model(model: type["InvoiceDocumentModel"]) -> type["InvoiceDocumentModel"]:
    """Class decorator adding ``model`` to the registry under its ``name``."""

    if not model.name:
        raise ValueError(f"{model.__name__} has no model name")
    _MODELS[model.name] = model
    return model


def get_model(name: str) -> type["InvoiceDocumentModel"]:
    try:
        return _MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown document model: {name}") from None


def list_models(enabled: Iterable[str] | None = None, max_length: int = 0) -> dict[str, str]:
    """Return the active document models as ``{name: label}``.

    ``enabled`` restricts the result to the given names, in that order;
    unknown names are ignored. Labels longer than ``max_length`` are
    shortened (zero keeps them whole).
    """

    names: Iterable[str] = sorted(_MODELS) if enabled is None else enabled
    listed: dict[str, str] = {}
    for name in names:
        model = _MODELS.get(name)
        if model is None:
            LOGGER.debug("Document model %s is enabled but not registered", name)
            continue
        label = f"{model.name}: {model.description}" if model.description else model.name
        listed[name] = truncate(label, max_length)
    return listed


class InvoiceDocumentModel(ABC):
    """Parent class of invoice document generators."""

    name = ""
    description = ""

    def __init__(
        self,
        *,
        issuer: Party,
        accounts: AccountStore,
        settings: InvoiceSettings,
        renderer: PanelRenderer | None = None,
    ) -> None:
        self.issuer = issuer
        self.accounts = accounts
        self.settings = settings
        self.renderer = renderer if renderer is not None else QrBillPanelRenderer()
        self.error = ""

    def build_qr_bill(self, invoice: Invoice, translator: Translator) -> QrBillResult:
        return build_qr_bill(
            invoice,
            issuer=self.issuer,
            accounts=self.accounts,
            settings=self.settings,
            translator=translator,
        )

    def height_for_qr_panel(self, page_number: int, invoice: Invoice, translator: Translator) -> int:
        """Height in mm to keep free at the bottom of ``page_number``.

        Only page 1 holds the payment part; the height is zero when the
        feature is off or the invoice cannot produce a valid QR-bill.
        """

        if page_number != 1 or not self.settings.qr_enabled:
            return 0
        if not self.build_qr_bill(invoice, translator).ok:
            return 0
        return QR_PANEL_HEIGHT_MM

    def render_qr_panel(
        self, pdf: PdfContext, invoice: Invoice, translator: Translator
    ) -> QrPanelOutcome:
        """Draw the payment part at the bottom of page 1 of ``pdf``.

        Failures never propagate: a drawing error rolls the page back to its
        previous state and is reported in the outcome.
        """

        result = self.build_qr_bill(invoice, translator)
        if result.payload is None:
            return QrPanelOutcome(rendered=False, error=result.error)

        payload = result.payload
        language = panel_language(translator.short_language)

        def _draw(context: PdfContext) -> None:
            context.set_page(1)
            context.set_text_color(0, 0, 0)
            self.renderer.draw(payload, language, context)

        outcome = pdf.attempt(_draw)
        if not outcome.committed:
            return QrPanelOutcome(
                rendered=False,
                error=QrBillError(
                    QrBillErrorKind.RENDERING_FAILURE,
                    translator.trans("SwissQrRenderingFailed", outcome.error),
                ),
            )
        return QrPanelOutcome(rendered=True)

    def finish_document(
        self, pdf: PdfContext, invoice: Invoice, translator: Translator
    ) -> QrPanelOutcome:
        """Add the QR panel when requested and record its failure in ``error``."""

        outcome = self.render_qr_panel(pdf, invoice, translator)
        if outcome.error is not None and outcome.error.kind is not QrBillErrorKind.FEATURE_DISABLED:
            self.error = outcome.error.message
        return outcome

    @abstractmethod
    def write_file(self, invoice: Invoice, destination: Path, translator: Translator) -> DocumentResult:
        """Write the PDF of ``invoice`` to ``destination``."""


PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_MM = 20
ROW_MM = 6
FIRST_HEADER_MM = 75
NEXT_HEADER_MM = 30
TOTALS_ROWS = 2


def paginate(
    lines: Sequence[InvoiceLine], first_capacity: int, next_capacity: int
) -> list[list[InvoiceLine]]:
    """Split ``lines`` into pages, leaving room for the totals on the last one."""

    first_capacity = max(first_capacity, 0)
    next_capacity = max(next_capacity, TOTALS_ROWS + 1)

    pages: list[list[InvoiceLine]] = []
    remaining = list(lines)
    capacity = first_capacity
    while True:
        if len(remaining) + TOTALS_ROWS <= capacity:
            pages.append(remaining)
            return pages
        take = min(len(remaining), capacity)
        pages.append(remaining[:take])
        remaining = remaining[take:]
        capacity = next_capacity


@register_model
class PlainInvoiceDocument(InvoiceDocumentModel):
    """Single-column invoice with an optional QR payment part."""

    name = "plain"
    description = "Plain invoice, Swiss QR-bill capable"

    def write_file(self, invoice: Invoice, destination: Path, translator: Translator) -> DocumentResult:
        self.error = ""
        reserved = self.height_for_qr_panel(1, invoice, translator)
        first_bottom = reserved + 10 if reserved else MARGIN_MM

        usable_first = (PAGE_HEIGHT / mm) - MARGIN_MM - FIRST_HEADER_MM - first_bottom
        usable_next = (PAGE_HEIGHT / mm) - MARGIN_MM - NEXT_HEADER_MM - MARGIN_MM
        pages = paginate(invoice.lines, int(usable_first // ROW_MM), int(usable_next // ROW_MM))

        buffer = io.BytesIO()
        document = canvas.Canvas(buffer, pagesize=A4)
        document.setTitle(f"{translator.trans('Invoice')} {invoice.ref}")
        document.setAuthor(self.issuer.name)
        for index, page_lines in enumerate(pages, start=1):
            if index == 1:
                top = self._draw_first_header(document, invoice, translator)
            else:
                top = self._draw_next_header(document, invoice, translator)
            y = self._draw_lines(document, page_lines, top, translator)
            if index == len(pages):
                self._draw_totals(document, invoice, y, translator)
            footer = reserved + 6 if index == 1 and reserved else MARGIN_MM / 2
            document.setFont("Helvetica", 8)
            document.drawRightString(
                PAGE_WIDTH - MARGIN_MM * mm,
                footer * mm,
                translator.trans("Page", index, len(pages)),
            )
            document.showPage()
        document.save()

        pdf = PdfContext.from_bytes(buffer.getvalue())
        outcome = self.finish_document(pdf, invoice, translator)
        pdf.save(destination)
        LOGGER.info(
            "Invoice %s written to %s (%d pages, QR panel: %s)",
            invoice.ref,
            destination,
            pdf.page_count,
            "yes" if outcome.rendered else "no",
        )
        return DocumentResult(
            path=destination,
            page_count=pdf.page_count,
            qr_rendered=outcome.rendered,
            error=outcome.error,
        )

    def _draw_first_header(self, document: canvas.Canvas, invoice: Invoice, translator: Translator) -> float:
        left = MARGIN_MM * mm
        y = PAGE_HEIGHT - MARGIN_MM * mm

        document.setFont("Helvetica-Bold", 12)
        document.drawString(left, y, self.issuer.name)
        document.setFont("Helvetica", 9)
        for text in (self.issuer.address, self.issuer.postal_line.strip(), self.issuer.country_code):
            if text:
                y -= 4.5 * mm
                document.drawString(left, y, text)

        right = PAGE_WIDTH - MARGIN_MM * mm
        y_right = PAGE_HEIGHT - MARGIN_MM * mm
        document.setFont("Helvetica-Bold", 14)
        document.drawRightString(right, y_right, f"{translator.trans('Invoice')} {invoice.ref}")
        document.setFont("Helvetica", 9)
        document.drawRightString(
            right, y_right - 6 * mm, f"{translator.trans('Date')}: {invoice.issue_date.isoformat()}"
        )

        party = invoice.thirdparty
        y = PAGE_HEIGHT - 45 * mm
        document.setFont("Helvetica-Bold", 9)
        document.drawString(110 * mm, y, translator.trans("Customer"))
        document.setFont("Helvetica", 9)
        for text in (party.name, party.address, party.postal_line.strip(), party.country_code):
            if text:
                y -= 4.5 * mm
                document.drawString(110 * mm, y, text)

        return PAGE_HEIGHT - (MARGIN_MM + FIRST_HEADER_MM) * mm

    def _draw_next_header(self, document: canvas.Canvas, invoice: Invoice, translator: Translator) -> float:
        document.setFont("Helvetica-Bold", 10)
        document.drawString(
            MARGIN_MM * mm,
            PAGE_HEIGHT - MARGIN_MM * mm,
            f"{translator.trans('Invoice')} {invoice.ref}",
        )
        return PAGE_HEIGHT - (MARGIN_MM + NEXT_HEADER_MM) * mm

    def _draw_lines(
        self, document: canvas.Canvas, lines: Sequence[InvoiceLine], top: float, translator: Translator
    ) -> float:
        left = MARGIN_MM * mm
        right = PAGE_WIDTH - MARGIN_MM * mm
        y = top + ROW_MM * mm

        document.setFont("Helvetica-Bold", 9)
        document.drawString(left, y, translator.trans("Description"))
        document.drawRightString(125 * mm, y, translator.trans("Quantity"))
        document.drawRightString(155 * mm, y, translator.trans("UnitPrice"))
        document.drawRightString(right, y, translator.trans("Amount"))
        document.line(left, y - 1.5 * mm, right, y - 1.5 * mm)

        document.setFont("Helvetica", 9)
        for line in lines:
            y -= ROW_MM * mm
            document.drawString(left, y, truncate(line.description, 55))
            document.drawRightString(125 * mm, y, _quantity(line.quantity))
            document.drawRightString(155 * mm, y, format_amount(line.unit_price))
            document.drawRightString(right, y, format_amount(line.total))
        return y

    def _draw_totals(self, document: canvas.Canvas, invoice: Invoice, y: float, translator: Translator) -> None:
        right = PAGE_WIDTH - MARGIN_MM * mm
        y -= ROW_MM * mm
        document.line(120 * mm, y + 3 * mm, right, y + 3 * mm)
        y -= ROW_MM * mm / 2
        document.setFont("Helvetica-Bold", 10)
        document.drawString(120 * mm, y, translator.trans("TotalTTC"))
        document.drawRightString(
            right, y, f"{format_amount(invoice.total_ttc)} {invoice.currency_code}"
        )


def _quantity(value: Decimal) -> str:
    if value == value.to_integral():
        return str(int(value))
    return str(value.normalize())


__all__ = [
    "DocumentResult",
    "InvoiceDocumentModel",
    "PlainInvoiceDocument",
    "QR_PANEL_HEIGHT_MM",
    "QrPanelOutcome",
    "get_model",
    "list_models",
    "paginate",
    "register_model",
]
