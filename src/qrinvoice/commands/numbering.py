"""Inspect invoice numbering modules and compute references."""

from __future__ import annotations

import argparse
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from ..errors import QrInvoiceError
from ..invoices import Invoice, Party
from ..numbering import MODE_LAST, MODE_NEXT, get_numbering
from ..settings import load_settings
from ..translation import Translator
from ._common import configure_logging


def _read_references(path: Path | None) -> list[str]:
    if path is None:
        return []
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Describe a numbering module and compute a reference.")
    parser.add_argument("--module", default=None, help="Numbering module name (defaults to the settings)")
    parser.add_argument("--references", type=Path, default=None, help="Text file with one stored reference per line")
    parser.add_argument("--mode", choices=(MODE_NEXT, MODE_LAST), default=MODE_NEXT)
    parser.add_argument("--date", type=date.fromisoformat, default=None, help="Invoice date (YYYY-MM-DD)")
    parser.add_argument("--settings", type=Path, default=None)
    parser.add_argument("--lang", default="en_US")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
        references = _read_references(args.references)
        module = get_numbering(
            args.module or settings.numbering_module,
            Translator(args.lang),
            references=references,
            prefix=settings.numbering_prefix,
            platform_version=settings.platform_version,
        )
    except (QrInvoiceError, OSError, ValueError) as exc:
        parser.error(str(exc))

    invoice = Invoice(
        ref="(PROV)",
        thirdparty=Party(name=""),
        total_ttc=Decimal("0"),
        issue_date=args.date or date.today(),
    )
    print(f"Info: {module.info()}")
    print(f"Example: {module.example()}")
    print(f"Version: {module.version()}")
    print(f"Can be activated: {'yes' if module.can_activate() else 'no'}")
    print(f"Value ({args.mode}): {module.next_value(None, invoice, args.mode)}")
    return 0 if module.can_activate() else 1


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
