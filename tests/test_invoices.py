from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import pytest

from qrinvoice.accounts import load_accounts
from qrinvoice.errors import InputError
from qrinvoice.invoices import Invoice, InvoiceLine, load_invoices
from qrinvoice.utils import format_amount, parse_decimal


def _invoice_payload(**overrides):
    payload = {
        "ref": "FA2405-0001",
        "date": "2024-05-17",
        "thirdparty": {
            "name": "Pia-Maria Rutschmann-Schnyder",
            "address": "Grosse Marktgasse 28",
            "zip": 9400,
            "town": "Rorschach",
            "country_code": "ch",
        },
        "total_ttc": "1'500.50",
        "currency_code": "chf",
        "payment_method_code": "vir",
        "bank_account_id": "1",
        "lines": [{"description": "Consulting", "quantity": "2", "unit_price": "750.25"}],
    }
    payload.update(overrides)
    return payload


def test_invoice_from_dict():
    invoice = Invoice.from_dict(_invoice_payload())

    assert invoice.total_ttc == Decimal("1500.50")
    assert invoice.currency_code == "CHF"
    assert invoice.payment_method_code == "VIR"
    assert invoice.bank_account_id == 1
    assert invoice.issue_date == date(2024, 5, 17)
    assert invoice.thirdparty.zip == "9400"
    assert invoice.thirdparty.country_code == "CH"
    assert invoice.lines[0].total == Decimal("1500.50")


def test_invoice_without_payment_method_or_account():
    invoice = Invoice.from_dict(_invoice_payload(payment_method_code=None, bank_account_id=""))

    assert invoice.payment_method_code == ""
    assert invoice.bank_account_id is None


@pytest.mark.parametrize(
    "overrides",
    [{"total_ttc": "abc"}, {"total_ttc": None}, {"date": "17.05.2024"}],
)
def test_invalid_invoice_values(overrides):
    with pytest.raises(InputError):
        Invoice.from_dict(_invoice_payload(**overrides))


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"bank_account_id": "abc"}, "bank_account_id"),
        ({"bank_account_id": [1]}, "bank_account_id"),
        ({"thirdparty": "Pia Rutschmann"}, "thirdparty"),
        ({"lines": ["Consulting"]}, "lines"),
        ({"lines": "Consulting"}, "lines"),
        ({"date": 20240517}, "date"),
    ],
)
def test_malformed_values_raise_input_error(overrides, message):
    with pytest.raises(InputError, match=message):
        Invoice.from_dict(_invoice_payload(**overrides))


def test_invoice_entry_must_be_an_object(tmp_path):
    path = tmp_path / "invoices.json"
    path.write_text(json.dumps(["FA2405-0001"]), encoding="utf-8")

    with pytest.raises(InputError, match="JSON object"):
        load_invoices(path)


def test_missing_thirdparty():
    payload = _invoice_payload()
    del payload["thirdparty"]

    with pytest.raises(InputError, match="thirdparty"):
        Invoice.from_dict(payload)


def test_load_invoices_accepts_wrapped_list(tmp_path):
    path = tmp_path / "invoices.json"
    path.write_text(json.dumps({"invoices": [_invoice_payload(), _invoice_payload(ref="FA2405-0002")]}), encoding="utf-8")

    invoices = load_invoices(path)

    assert [invoice.ref for invoice in invoices] == ["FA2405-0001", "FA2405-0002"]


def test_load_invoices_rejects_other_documents(tmp_path):
    path = tmp_path / "invoices.json"
    path.write_text(json.dumps("FA2405-0001"), encoding="utf-8")

    with pytest.raises(InputError):
        load_invoices(path)


def test_load_accounts(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text(
        json.dumps({"accounts": [{"id": "4", "iban": "CH93 0076 2011 6238 5295 7", "label": "Main"}]}),
        encoding="utf-8",
    )

    store = load_accounts(path)

    assert len(store) == 1
    assert store.fetch(4).label == "Main"
    assert store.fetch(5) is None


def test_load_accounts_rejects_entries_without_id(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text(json.dumps([{"iban": "CH9300762011623852957"}]), encoding="utf-8")

    with pytest.raises(InputError):
        load_accounts(path)


def test_amount_helpers():
    assert parse_decimal("1'234.5") == Decimal("1234.5")
    assert parse_decimal("", default=None) is None
    assert format_amount(Decimal("3")) == "3.00"
    assert InvoiceLine("Hours", Decimal("1.5"), Decimal("80")).total == Decimal("120.00")
