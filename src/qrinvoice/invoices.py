"""Invoice related data structures."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable

from .errors import InputError
from .utils import AMT2, parse_decimal

PAYMENT_WIRE_TRANSFER = "VIR"


@dataclass
class Party:
    """Issuer or counterparty of an invoice."""

    name: str
    address: str = ""
    zip: str = ""
    town: str = ""
    country_code: str = ""

    @property
    def postal_line(self) -> str:
        """Postal code and town on a single line, as printed on QR bills."""

        return f"{self.zip} {self.town}"

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Party":
        return cls(
            name=str(payload.get("name", "")).strip(),
            address=str(payload.get("address", "") or "").strip(),
            zip=str(payload.get("zip", "") or "").strip(),
            town=str(payload.get("town", "") or "").strip(),
            country_code=str(payload.get("country_code", "") or "").strip().upper(),
        )


@dataclass
class InvoiceLine:
    """Single billed line."""

    description: str
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return (self.quantity * self.unit_price).quantize(AMT2)


@dataclass
class Invoice:
    """Lightweight invoice representation used by the document models."""

    ref: str
    thirdparty: Party
    total_ttc: Decimal
    currency_code: str = "CHF"
    payment_method_code: str = PAYMENT_WIRE_TRANSFER
    bank_account_id: int | None = None
    issue_date: date = field(default_factory=date.today)
    lines: list[InvoiceLine] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Invoice":
        """Build an invoice from a decoded JSON object."""

        if not isinstance(payload, dict):
            raise InputError(f"Invoice entry must be a JSON object, got {payload!r}")
        try:
            ref = str(payload["ref"])
            thirdparty = Party.from_dict(payload["thirdparty"])
        except KeyError as exc:
            raise InputError(f"Invoice is missing required key {exc}") from exc
        except (AttributeError, TypeError) as exc:
            raise InputError("Invoice 'thirdparty' must be a JSON object") from exc

        total = parse_decimal(payload.get("total_ttc"), default=None)
        if total is None:
            raise InputError(f"Invoice '{ref}' has no valid 'total_ttc'")

        raw_date = payload.get("date")
        try:
            invoice_date = date.fromisoformat(raw_date) if raw_date else date.today()
        except (TypeError, ValueError) as exc:
            raise InputError(f"Invoice '{ref}' has an invalid date: {raw_date}") from exc

        account = payload.get("bank_account_id")
        try:
            bank_account_id = int(account) if account not in (None, "") else None
        except (TypeError, ValueError) as exc:
            raise InputError(f"Invoice '{ref}' has an invalid 'bank_account_id': {account!r}") from exc

        try:
            lines = [
                InvoiceLine(
                    description=str(item.get("description", "")),
                    quantity=parse_decimal(item.get("quantity"), default=Decimal("1")),
                    unit_price=parse_decimal(item.get("unit_price")),
                )
                for item in payload.get("lines") or []
            ]
        except (AttributeError, TypeError) as exc:
            raise InputError(f"Invoice '{ref}' lines must be a list of JSON objects") from exc

        return cls(
            ref=ref,
            thirdparty=thirdparty,
            total_ttc=total,
            currency_code=str(payload.get("currency_code") or "CHF").strip().upper(),
            payment_method_code=str(payload.get("payment_method_code") or "").strip().upper(),
            bank_account_id=bank_account_id,
            issue_date=invoice_date,
            lines=lines,
        )


def load_invoices(path: Path) -> Iterable[Invoice]:
    """Load invoices from a JSON document.

    The document is either a list of invoices or an object with an
    ``invoices`` list.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputError(f"'{path}' is not valid JSON") from exc

    if isinstance(payload, dict):
        payload = payload.get("invoices", [])
    if not isinstance(payload, list):
        raise InputError(f"'{path}' does not contain a list of invoices")
    return [Invoice.from_dict(item) for item in payload]


__all__ = [
    "Invoice",
    "InvoiceLine",
    "PAYMENT_WIRE_TRANSFER",
    "Party",
    "load_invoices",
]
