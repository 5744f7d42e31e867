"""Render invoice PDFs, with the QR-bill payment part when configured."""

from __future__ import annotations

import argparse
import re
from pathlib import Path
from typing import Sequence

from ..documents import get_model
from ..errors import QrInvoiceError
from ..invoices import load_invoices
from ._common import add_common_arguments, configure_logging, issuer_of, load_context

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def output_name(ref: str) -> str:
    """File name used for the PDF of invoice ``ref``."""

    return (_UNSAFE.sub("_", ref).strip("._") or "invoice") + ".pdf"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate invoice PDF documents.")
    parser.add_argument("invoices", type=Path, help="JSON file with the invoices")
    parser.add_argument(
        "--output-dir", type=Path, default=Path("."), help="Destination folder for the PDFs"
    )
    parser.add_argument("--model", default=None, help="Document model (defaults to the first enabled)")
    add_common_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings, accounts, translator = load_context(args)
        invoices = load_invoices(args.invoices)
        model_name = args.model or next(iter(settings.enabled_document_models), "plain")
        model_class = get_model(model_name)
    except (QrInvoiceError, OSError, ValueError) as exc:
        parser.error(str(exc))

    generator = model_class(issuer=issuer_of(settings), accounts=accounts, settings=settings)
    for invoice in invoices:
        destination = args.output_dir / output_name(invoice.ref)
        result = generator.write_file(invoice, destination, translator)
        print(f"{invoice.ref}: {result.path} ({result.page_count} page(s))")
        if generator.error:
            print(f"  QR-bill: {generator.error}")

    return 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
