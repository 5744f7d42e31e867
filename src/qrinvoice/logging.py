"""Excel log of Swiss QR-bill readiness checks.

One row per invoice: ``OK`` when a payload could be built, otherwise the
error kind, its translated message and the details as compact JSON. Rows of
invoices that cannot carry a QR-bill are highlighted.
"""

from __future__ import annotations

import json
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from .swissqr import QrBillError

STATUS_OK = "OK"
FAILURE_FILL = PatternFill(fill_type="solid", start_color="FFFCE4D6", end_color="FFFCE4D6")


class ExcelLogger:
    """QR-bill check log written to an ``.xlsx`` workbook.

    Columns: invoice, status, message, details.
    """

    COLUMNS = ["invoice", "status", "message", "details"]
    WIDTHS = {"A": 20, "B": 30, "C": 80, "D": 40}

    def __init__(self, destination: Path, *, sheet_title: str = "QR-bill") -> None:
        self.path = Path(destination)
        self.failures = 0
        self.wb = Workbook()
        self.ws = self.wb.active
        self.ws.title = sheet_title
        self.ws.append(self.COLUMNS)
        for cell in self.ws[1]:
            cell.font = Font(bold=True)
        self.ws.freeze_panes = "A2"
        for col, width in self.WIDTHS.items():
            self.ws.column_dimensions[col].width = width

    def log(self, ref: str, error: QrBillError | None) -> None:
        if error is None:
            self.ws.append([ref, STATUS_OK, "", ""])
            return

        details = ""
        if error.details:
            details = json.dumps(error.details, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        self.ws.append([ref, error.kind.value, error.message, details])
        for cell in self.ws[self.ws.max_row]:
            cell.fill = FAILURE_FILL
        self.failures += 1

    def flush(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(self.path)
        return self.path


__all__ = ["ExcelLogger", "FAILURE_FILL", "STATUS_OK"]
