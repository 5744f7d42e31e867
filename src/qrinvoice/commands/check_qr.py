"""Check which invoices can carry a Swiss QR-bill and why not."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Iterable, Sequence

from ..accounts import AccountStore
from ..errors import QrInvoiceError
from ..invoices import Invoice, Party, load_invoices
from ..logging import ExcelLogger
from ..settings import PLACEMENT_BOTTOM, InvoiceSettings
from ..swissqr import QrBillError, build_qr_bill
from ..translation import Translator
from ._common import add_common_arguments, configure_logging, issuer_of, load_context


class CheckRow:
    """Outcome of the check for one invoice."""

    def __init__(self, ref: str, error: QrBillError | None) -> None:
        self.ref = ref
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_cells(self) -> list[str]:
        if self.error is None:
            return [self.ref, "OK", ""]
        return [self.ref, *self.error.as_cells()]


def check_invoices(
    invoices: Iterable[Invoice],
    *,
    issuer: Party,
    accounts: AccountStore,
    settings: InvoiceSettings,
    translator: Translator,
) -> list[CheckRow]:
    """Build the QR-bill of every invoice, as if the feature were enabled."""

    enabled = settings.with_placement(PLACEMENT_BOTTOM)
    rows = []
    for invoice in invoices:
        result = build_qr_bill(
            invoice, issuer=issuer, accounts=accounts, settings=enabled, translator=translator
        )
        rows.append(CheckRow(invoice.ref, result.error))
    return rows


def export_report(rows: Iterable[CheckRow], *, destination: Path) -> Path:
    """Export check results to an Excel workbook."""

    logger = ExcelLogger(destination)
    for row in rows:
        logger.log(row.ref, row.error)
    return logger.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Check the Swiss QR-bill data of invoices.")
    parser.add_argument("invoices", type=Path, help="JSON file with the invoices")
    parser.add_argument("--excel", type=Path, default=None, help="Write the results to this .xlsx file")
    add_common_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings, accounts, translator = load_context(args)
        invoices = load_invoices(args.invoices)
    except (QrInvoiceError, OSError) as exc:
        parser.error(str(exc))

    rows = check_invoices(
        invoices,
        issuer=issuer_of(settings),
        accounts=accounts,
        settings=settings,
        translator=translator,
    )
    for row in rows:
        ref, status, message = row.as_cells()
        print(f"{ref}: {status}" + (f" - {message}" if message else ""))

    if args.excel is not None:
        destination = export_report(rows, destination=args.excel)
        print(f"Report saved to {destination}")

    return 0 if all(row.ok for row in rows) else 1


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
