"""Utility helpers shared across qrinvoice modules."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

AMT2 = Decimal("0.01")
ELLIPSIS = "…"


def parse_decimal(value: str | int | Decimal | None, *, default: Decimal | None = Decimal("0")) -> Decimal | None:
    """Convert the provided value to :class:`~decimal.Decimal`.

    Empty strings and unparsable values return ``default``. Floats are
    rejected through their string form so binary artefacts never leak into
    amounts.
    """

    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return default

    text = str(value).strip().replace("'", "")
    if not text:
        return default

    try:
        return Decimal(text)
    except (InvalidOperation, ValueError):
        return default


def format_amount(value: Decimal) -> str:
    """Return ``value`` with two decimals, as printed on invoices."""

    return f"{value.quantize(AMT2):.2f}"


def short_language(code: str | None, *, default: str = "en") -> str:
    """Return the two-letter language part of a locale such as ``fr_CH``."""

    if not code:
        return default
    text = code.strip().replace("-", "_")
    head = text.split("_", 1)[0].lower()
    if len(head) != 2 or not head.isalpha():
        return default
    return head


def truncate(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, ellipsis included.

    A ``max_length`` of zero (or below) disables truncation.
    """

    if max_length <= 0 or len(text) <= max_length:
        return text
    if max_length == 1:
        return ELLIPSIS
    return text[: max_length - 1] + ELLIPSIS


__all__ = ["AMT2", "format_amount", "parse_decimal", "short_language", "truncate"]
