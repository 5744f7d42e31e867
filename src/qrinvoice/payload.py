"""Swiss QR-bill payload elements and their structural validation.

Each element exposes ``violations()`` returning the list of structural
problems found, and ``is_valid()``. A :class:`QrBillPayload` is valid only
when every element it carries is valid.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

from iso3166 import countries_by_alpha2
from stdnum import iban as stdnum_iban
from stdnum import iso11649

from .utils import AMT2

MAX_NAME_LENGTH = 70
MAX_LINE_LENGTH = 70
MAX_POSTAL_CODE_LENGTH = 16
MAX_TOWN_LENGTH = 35
MAX_ADDITIONAL_INFORMATION_LENGTH = 140
MAX_AMOUNT = Decimal("999999999.99")
SUPPORTED_CURRENCIES = ("CHF", "EUR")
SUPPORTED_IBAN_COUNTRIES = ("CH", "LI")
QR_IID_RANGE = range(30000, 32000)


@dataclass(frozen=True)
class Violation:
    """Single structural problem of a payload element."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def format_violations(violations: Iterable[Violation]) -> str:
    """Join ``violations`` into the text used in error messages."""

    return "; ".join(str(violation) for violation in violations)


class ReferenceType(str, Enum):
    """Payment reference schemes of the QR-bill standard."""

    NON = "NON"
    QRR = "QRR"
    SCOR = "SCOR"


@dataclass(frozen=True)
class Address:
    """Postal address; ``line2`` joins postal code and town as printed."""

    name: str
    street: str
    postal_code: str
    town: str
    country: str

    @property
    def line1(self) -> str:
        return self.street

    @property
    def line2(self) -> str:
        return f"{self.postal_code} {self.town}".strip()

    def violations(self) -> list[Violation]:
        found: list[Violation] = []
        name = self.name.strip()
        if not name:
            found.append(Violation("name", "must not be blank"))
        elif len(name) > MAX_NAME_LENGTH:
            found.append(
                Violation("name", f"must not be longer than {MAX_NAME_LENGTH} characters")
            )

        if len(self.line1) > MAX_LINE_LENGTH:
            found.append(
                Violation("line1", f"must not be longer than {MAX_LINE_LENGTH} characters")
            )

        # Encoded as separate fields on the payment part; line2 only joins them.
        if not self.postal_code:
            found.append(Violation("postal_code", "must not be blank"))
        elif len(self.postal_code) > MAX_POSTAL_CODE_LENGTH:
            found.append(
                Violation(
                    "postal_code", f"must not be longer than {MAX_POSTAL_CODE_LENGTH} characters"
                )
            )

        if not self.town:
            found.append(Violation("town", "must not be blank"))
        elif len(self.town) > MAX_TOWN_LENGTH:
            found.append(
                Violation("town", f"must not be longer than {MAX_TOWN_LENGTH} characters")
            )

        country = self.country.strip().upper()
        if not country:
            found.append(Violation("country", "must not be blank"))
        elif country not in countries_by_alpha2:
            found.append(
                Violation("country", f"'{self.country}' is not an ISO 3166-1 alpha-2 code")
            )
        return found

    def is_valid(self) -> bool:
        return not self.violations()


def create_address(name: str, street: str, postal_code: str, town: str, country: str) -> Address:
    """Return an :class:`Address` with surrounding whitespace removed."""

    return Address(
        name=(name or "").strip(),
        street=(street or "").strip(),
        postal_code=(postal_code or "").strip(),
        town=(town or "").strip(),
        country=(country or "").strip().upper(),
    )


@dataclass(frozen=True)
class CreditorInformation:
    """Account of the creditor, identified by its IBAN."""

    iban: str

    @classmethod
    def create(cls, iban: str | None) -> "CreditorInformation":
        return cls(iban=stdnum_iban.compact(iban or ""))

    @property
    def formatted_iban(self) -> str:
        return stdnum_iban.format(self.iban)

    def contains_qr_iban(self) -> bool:
        """Whether the IBAN is a QR-IBAN (institution id 30000 to 31999)."""

        if not self.is_valid():
            return False
        iid = self.iban[4:9]
        return iid.isdigit() and int(iid) in QR_IID_RANGE

    def violations(self) -> list[Violation]:
        if not self.iban:
            return [Violation("iban", "must not be blank")]
        if not stdnum_iban.is_valid(self.iban):
            return [Violation("iban", f"'{self.iban}' is not a valid IBAN")]
        if self.iban[:2] not in SUPPORTED_IBAN_COUNTRIES:
            return [Violation("iban", "only CH and LI accounts are supported")]
        return []

    def is_valid(self) -> bool:
        return not self.violations()


@dataclass(frozen=True)
class PaymentReference:
    """Reference type and value used to identify the incoming payment."""

    type: ReferenceType = ReferenceType.NON
    reference: str | None = None

    def violations(self) -> list[Violation]:
        value = (self.reference or "").replace(" ", "")
        if self.type is ReferenceType.NON:
            if value:
                return [Violation("reference", "must be empty for reference type NON")]
            return []
        if not value:
            return [Violation("reference", f"is required for reference type {self.type.value}")]
        if self.type is ReferenceType.QRR and not (len(value) == 27 and value.isdigit()):
            return [Violation("reference", "a QR reference must have 27 digits")]
        if self.type is ReferenceType.SCOR and not iso11649.is_valid(value):
            return [Violation("reference", f"'{value}' is not a valid creditor reference")]
        return []

    def is_valid(self) -> bool:
        return not self.violations()


@dataclass(frozen=True)
class PaymentAmountInformation:
    """Currency and amount to be paid; an empty amount leaves it open."""

    currency: str
    amount: Decimal | None = None

    def violations(self) -> list[Violation]:
        found: list[Violation] = []
        if self.currency not in SUPPORTED_CURRENCIES:
            found.append(
                Violation(
                    "currency",
                    f"'{self.currency}' is not one of {', '.join(SUPPORTED_CURRENCIES)}",
                )
            )

        amount = self.amount
        if amount is None:
            return found
        if not amount.is_finite():
            found.append(Violation("amount", "must be a finite number"))
        elif amount < 0:
            found.append(Violation("amount", "must not be negative"))
        elif amount > MAX_AMOUNT:
            found.append(Violation("amount", f"must not be greater than {MAX_AMOUNT}"))
        elif amount != amount.quantize(AMT2):
            found.append(Violation("amount", "must not have more than two decimals"))
        return found

    def is_valid(self) -> bool:
        return not self.violations()


@dataclass(frozen=True)
class QrBillPayload:
    """Assembled data of a QR-bill payment part."""

    creditor: Address
    creditor_information: CreditorInformation
    payment_reference: PaymentReference
    payment_amount_information: PaymentAmountInformation
    additional_information: str = ""
    ultimate_debtor: Address | None = None

    def violations(self) -> list[Violation]:
        found: list[Violation] = []
        found.extend(self.creditor.violations())
        found.extend(self.creditor_information.violations())
        found.extend(self.payment_reference.violations())
        found.extend(self.payment_amount_information.violations())
        if self.ultimate_debtor is not None:
            found.extend(self.ultimate_debtor.violations())
        return found

    def is_valid(self) -> bool:
        return not self.violations()


__all__ = [
    "Address",
    "CreditorInformation",
    "MAX_ADDITIONAL_INFORMATION_LENGTH",
    "PaymentAmountInformation",
    "PaymentReference",
    "QrBillPayload",
    "ReferenceType",
    "Violation",
    "create_address",
    "format_violations",
]
