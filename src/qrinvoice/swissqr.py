"""Assembly of the Swiss QR-bill payload of an invoice.

:func:`build_qr_bill` runs the checks in a fixed order and stops at the first
failure, returning it as a :class:`QrBillError` inside a :class:`QrBillResult`.
Nothing here raises for invalid invoice data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .accounts import AccountStore
from .invoices import PAYMENT_WIRE_TRANSFER, Invoice, Party
from .payload import (
    CreditorInformation,
    PaymentAmountInformation,
    PaymentReference,
    QrBillPayload,
    ReferenceType,
    create_address,
    format_violations,
)
from .settings import InvoiceSettings
from .translation import Translator
from .utils import format_amount

LOGGER = logging.getLogger("qrinvoice.swissqr")


class QrBillErrorKind(str, Enum):
    """Reasons for a QR-bill not being produced."""

    FEATURE_DISABLED = "FEATURE_DISABLED"
    UNSUPPORTED_PAYMENT_METHOD = "UNSUPPORTED_PAYMENT_METHOD"
    MISSING_BANK_ACCOUNT = "MISSING_BANK_ACCOUNT"
    INVALID_CREDITOR_ADDRESS = "INVALID_CREDITOR_ADDRESS"
    INVALID_CREDITOR_ACCOUNT = "INVALID_CREDITOR_ACCOUNT"
    UNSUPPORTED_QR_IBAN = "UNSUPPORTED_QR_IBAN"
    INVALID_PAYMENT_AMOUNT = "INVALID_PAYMENT_AMOUNT"
    INVALID_DEBTOR_ADDRESS = "INVALID_DEBTOR_ADDRESS"
    RENDERING_FAILURE = "RENDERING_FAILURE"


@dataclass(frozen=True)
class QrBillError:
    """Failure recorded while building or drawing a QR-bill."""

    kind: QrBillErrorKind
    message: str = ""
    details: dict[str, str] = field(default_factory=dict)

    def as_cells(self) -> list[str]:
        """Serialise the error for tabular export."""

        return [self.kind.value, self.message]


@dataclass(frozen=True)
class QrBillResult:
    """Outcome of :func:`build_qr_bill`: a payload or the first error."""

    payload: QrBillPayload | None = None
    error: QrBillError | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None

    @property
    def requested(self) -> bool:
        """False when the QR feature is switched off in the settings."""

        return self.error is None or self.error.kind is not QrBillErrorKind.FEATURE_DISABLED

    @classmethod
    def failure(cls, kind: QrBillErrorKind, message: str = "", **details: str) -> "QrBillResult":
        if kind is not QrBillErrorKind.FEATURE_DISABLED:
            LOGGER.info("QR-bill not built (%s): %s", kind.value, message)
        return cls(error=QrBillError(kind, message, dict(details)))


def build_qr_bill(
    invoice: Invoice,
    *,
    issuer: Party,
    accounts: AccountStore,
    settings: InvoiceSettings,
    translator: Translator,
) -> QrBillResult:
    """Validate ``invoice`` and assemble its QR-bill payload."""

    if not settings.qr_enabled:
        return QrBillResult.failure(QrBillErrorKind.FEATURE_DISABLED)

    if invoice.payment_method_code != PAYMENT_WIRE_TRANSFER:
        return QrBillResult.failure(
            QrBillErrorKind.UNSUPPORTED_PAYMENT_METHOD,
            translator.trans("SwissQrOnlyVIR"),
            payment_method=invoice.payment_method_code,
        )

    if not invoice.bank_account_id:
        return QrBillResult.failure(
            QrBillErrorKind.MISSING_BANK_ACCOUNT,
            translator.trans("SwissQrBankAccountRequired"),
        )

    creditor = create_address(
        issuer.name, issuer.address, issuer.zip, issuer.town, issuer.country_code
    )
    violations = creditor.violations()
    if violations:
        return QrBillResult.failure(
            QrBillErrorKind.INVALID_CREDITOR_ADDRESS,
            translator.trans("SwissQrCreditorAddressInvalid", format_violations(violations)),
        )

    account = accounts.fetch(invoice.bank_account_id)
    if account is None:
        return QrBillResult.failure(
            QrBillErrorKind.INVALID_CREDITOR_ACCOUNT,
            translator.trans("SwissQrBankAccountNotFound", invoice.bank_account_id),
            account_id=str(invoice.bank_account_id),
        )

    creditor_information = CreditorInformation.create(account.iban)
    violations = creditor_information.violations()
    if violations:
        return QrBillResult.failure(
            QrBillErrorKind.INVALID_CREDITOR_ACCOUNT,
            translator.trans(
                "SwissQrCreditorInformationInvalid", account.iban, format_violations(violations)
            ),
            iban=account.iban,
        )

    if creditor_information.contains_qr_iban():
        # QR-IBAN accounts need a QRR reference, which is not generated here.
        return QrBillResult.failure(
            QrBillErrorKind.UNSUPPORTED_QR_IBAN,
            translator.trans("SwissQrIbanNotImplementedYet", account.iban),
            iban=account.iban,
        )

    reference = PaymentReference(ReferenceType.NON)

    amount_information = PaymentAmountInformation(invoice.currency_code, invoice.total_ttc)
    violations = amount_information.violations()
    if violations:
        return QrBillResult.failure(
            QrBillErrorKind.INVALID_PAYMENT_AMOUNT,
            translator.trans(
                "SwissQrPaymentInformationInvalid",
                _printable_total(invoice),
                format_violations(violations),
            ),
        )

    debtor = None
    thirdparty = invoice.thirdparty
    # Postal code and town are mandatory for the debtor; skip it when unknown.
    if thirdparty.zip and thirdparty.town:
        debtor = create_address(
            thirdparty.name,
            thirdparty.address,
            thirdparty.zip,
            thirdparty.town,
            thirdparty.country_code,
        )
        violations = debtor.violations()
        if violations:
            return QrBillResult.failure(
                QrBillErrorKind.INVALID_DEBTOR_ADDRESS,
                translator.trans("SwissQrDebitorAddressInvalid", format_violations(violations)),
            )

    payload = QrBillPayload(
        creditor=creditor,
        creditor_information=creditor_information,
        payment_reference=reference,
        payment_amount_information=amount_information,
        additional_information=invoice.ref,
        ultimate_debtor=debtor,
    )
    LOGGER.debug("QR-bill payload built for invoice %s", invoice.ref)
    return QrBillResult(payload=payload)


def _printable_total(invoice: Invoice) -> str:
    if invoice.total_ttc.is_finite():
        return format_amount(invoice.total_ttc)
    return str(invoice.total_ttc)


__all__ = ["QrBillError", "QrBillErrorKind", "QrBillResult", "build_qr_bill"]
