from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from qrinvoice.accounts import BankAccount, InMemoryAccountStore  # noqa: E402
from qrinvoice.invoices import Invoice, InvoiceLine, Party  # noqa: E402
from qrinvoice.settings import InvoiceSettings  # noqa: E402
from qrinvoice.translation import Translator  # noqa: E402

IBAN = "CH9300762011623852957"
QR_IBAN = "CH4431999123000889012"
ACCOUNT_ID = 1
QR_ACCOUNT_ID = 2


@pytest.fixture
def issuer() -> Party:
    return Party(
        name="Robert Schneider AG",
        address="Rue du Lac 1268",
        zip="2501",
        town="Biel",
        country_code="CH",
    )


@pytest.fixture
def debtor() -> Party:
    return Party(
        name="Pia-Maria Rutschmann-Schnyder",
        address="Grosse Marktgasse 28",
        zip="9400",
        town="Rorschach",
        country_code="CH",
    )


@pytest.fixture
def accounts() -> InMemoryAccountStore:
    return InMemoryAccountStore(
        [
            BankAccount(id=ACCOUNT_ID, iban=IBAN, label="Main account"),
            BankAccount(id=QR_ACCOUNT_ID, iban=QR_IBAN, label="QR account"),
        ]
    )


@pytest.fixture
def settings() -> InvoiceSettings:
    return InvoiceSettings(qr_code_placement="bottom")


@pytest.fixture
def translator() -> Translator:
    return Translator("en_US")


@pytest.fixture
def make_invoice(debtor):
    def _make(**overrides) -> Invoice:
        values = dict(
            ref="FA2405-0001",
            thirdparty=debtor,
            total_ttc=Decimal("150.00"),
            currency_code="CHF",
            payment_method_code="VIR",
            bank_account_id=ACCOUNT_ID,
            lines=[InvoiceLine("Consulting", Decimal("2"), Decimal("75.00"))],
        )
        values.update(overrides)
        return Invoice(**values)

    return _make
