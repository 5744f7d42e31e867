from __future__ import annotations

from decimal import Decimal

import pytest

from qrinvoice.accounts import BankAccount
from qrinvoice.invoices import Party
from qrinvoice.payload import ReferenceType
from qrinvoice.settings import InvoiceSettings
from qrinvoice.swissqr import QrBillErrorKind, build_qr_bill
from qrinvoice.translation import Translator

from conftest import IBAN, QR_ACCOUNT_ID


def _build(invoice, issuer, accounts, settings, translator=None):
    return build_qr_bill(
        invoice,
        issuer=issuer,
        accounts=accounts,
        settings=settings,
        translator=translator or Translator("en_US"),
    )


def test_wire_transfer_invoice_builds_payload(make_invoice, issuer, accounts, settings, debtor):
    result = _build(make_invoice(), issuer, accounts, settings)

    assert result.ok
    assert result.error is None
    payload = result.payload
    assert payload.is_valid()
    assert payload.creditor.name == "Robert Schneider AG"
    assert payload.creditor.line2 == "2501 Biel"
    assert payload.creditor_information.iban == IBAN
    assert payload.payment_reference.type is ReferenceType.NON
    assert payload.payment_amount_information.currency == "CHF"
    assert payload.payment_amount_information.amount == Decimal("150.00")
    assert payload.additional_information == "FA2405-0001"
    debtor_address = payload.ultimate_debtor
    assert (debtor_address.name, debtor_address.street, debtor_address.line2, debtor_address.country) == (
        debtor.name,
        debtor.address,
        f"{debtor.zip} {debtor.town}",
        debtor.country_code,
    )


def test_disabled_feature_is_not_an_error(make_invoice, issuer, accounts):
    result = _build(make_invoice(), issuer, accounts, InvoiceSettings(qr_code_placement="top"))

    assert not result.ok
    assert not result.requested
    assert result.error.kind is QrBillErrorKind.FEATURE_DISABLED
    assert result.error.message == ""


@pytest.mark.parametrize("method", ["CHQ", "CHECK", "CB", "LIQ", ""])
def test_other_payment_methods_are_rejected(method, make_invoice, accounts, settings):
    # Even an invalid issuer and a missing account do not change the outcome.
    invoice = make_invoice(payment_method_code=method, bank_account_id=None)

    result = _build(invoice, Party(name=""), accounts, settings)

    assert result.requested
    assert result.error.kind is QrBillErrorKind.UNSUPPORTED_PAYMENT_METHOD
    assert "credit transfer" in result.error.message


def test_missing_bank_account_is_checked_before_addresses(make_invoice, accounts, settings):
    result = _build(make_invoice(bank_account_id=None), Party(name=""), accounts, settings)

    assert result.error.kind is QrBillErrorKind.MISSING_BANK_ACCOUNT


def test_invalid_creditor_address(make_invoice, issuer, accounts, settings):
    issuer.country_code = ""

    result = _build(make_invoice(), issuer, accounts, settings)

    assert result.error.kind is QrBillErrorKind.INVALID_CREDITOR_ADDRESS
    assert "country: must not be blank" in result.error.message


def test_unknown_bank_account(make_invoice, issuer, accounts, settings):
    result = _build(make_invoice(bank_account_id=99), issuer, accounts, settings)

    assert result.error.kind is QrBillErrorKind.INVALID_CREDITOR_ACCOUNT
    assert result.error.details == {"account_id": "99"}


def test_invalid_iban(make_invoice, issuer, accounts, settings):
    accounts.add(BankAccount(id=3, iban="CH9300762011623852958"))

    result = _build(make_invoice(bank_account_id=3), issuer, accounts, settings)

    assert result.error.kind is QrBillErrorKind.INVALID_CREDITOR_ACCOUNT
    assert "CH9300762011623852958" in result.error.message


def test_qr_iban_is_unsupported(make_invoice, issuer, accounts, settings):
    result = _build(make_invoice(bank_account_id=QR_ACCOUNT_ID), issuer, accounts, settings)

    assert not result.ok
    assert result.error.kind is QrBillErrorKind.UNSUPPORTED_QR_IBAN


@pytest.mark.parametrize(
    ("currency", "total"),
    [("USD", Decimal("150.00")), ("CHF", Decimal("-5.00")), ("EUR", Decimal("10.001"))],
)
def test_invalid_payment_amount(currency, total, make_invoice, issuer, accounts, settings):
    invoice = make_invoice(currency_code=currency, total_ttc=total)

    result = _build(invoice, issuer, accounts, settings)

    assert result.error.kind is QrBillErrorKind.INVALID_PAYMENT_AMOUNT


@pytest.mark.parametrize(("zip_code", "town"), [("9400", ""), ("", "Rorschach"), ("", "")])
def test_debtor_without_postal_data_is_omitted(zip_code, town, make_invoice, issuer, accounts, settings):
    thirdparty = Party(name="Pia Rutschmann", address="", zip=zip_code, town=town, country_code="")

    result = _build(make_invoice(thirdparty=thirdparty), issuer, accounts, settings)

    assert result.ok
    assert result.payload.ultimate_debtor is None


def test_invalid_debtor_address(make_invoice, issuer, accounts, settings):
    thirdparty = Party(name="Pia Rutschmann", zip="9400", town="Rorschach", country_code="ZZ")

    result = _build(make_invoice(thirdparty=thirdparty), issuer, accounts, settings)

    assert result.error.kind is QrBillErrorKind.INVALID_DEBTOR_ADDRESS


def test_messages_follow_the_translator(make_invoice, issuer, accounts, settings):
    invoice = make_invoice(bank_account_id=QR_ACCOUNT_ID)

    result = _build(invoice, issuer, accounts, settings, Translator("fr_CH"))

    assert result.error.message.startswith("QR-IBAN pas encore pris en charge")


def test_error_cells(make_invoice, issuer, accounts, settings):
    result = _build(make_invoice(payment_method_code="CHQ"), issuer, accounts, settings)

    assert result.error.as_cells()[0] == "UNSUPPORTED_PAYMENT_METHOD"
