from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from qrinvoice.invoices import Invoice, Party
from qrinvoice.numbering import (
    MODE_LAST,
    MODE_NEXT,
    NUMBERING_MODULES,
    DefaultNumbering,
    YearMonthNumbering,
    describe_version,
    get_numbering,
)
from qrinvoice.translation import Translator


def _invoice(day: date) -> Invoice:
    return Invoice(ref="(PROV)", thirdparty=Party(name="Client"), total_ttc=Decimal("0"), issue_date=day)


def test_default_module_fallbacks(translator):
    module = DefaultNumbering(translator)

    assert module.is_enabled()
    assert module.info() == "No description"
    assert module.example() == "No example"
    assert module.can_activate()
    assert module.next_value(None, None) == "Not available"
    assert module.version() == "Not available"


def test_default_module_version_tag(translator):
    assert DefaultNumbering(translator, version_tag="development").version() == "Development"
    assert DefaultNumbering(translator, version_tag="platform", platform_version="20.0.1").version() == "20.0.1"


def test_default_module_is_localised():
    module = DefaultNumbering(Translator("fr_FR"))

    assert module.info() == "Pas de description"
    assert module.next_value(None, None, MODE_LAST) == "Non disponible"


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("development", "Development"),
        ("experimental", "Experimental"),
        ("platform", "9.1.0"),
        ("2.3", "2.3"),
        (None, "Not available"),
        ("", "Not available"),
    ],
)
def test_describe_version(tag, expected, translator):
    assert describe_version(tag, translator, platform_version="9.1.0") == expected


def test_year_month_next_value(translator):
    module = YearMonthNumbering(translator, ["FA2404-0007", "FA2405-0012", "FA2405-0003"])

    value = module.next_value(None, _invoice(date(2024, 6, 3)), MODE_NEXT)

    assert value == "FA2406-0013"


def test_year_month_starts_at_one(translator):
    module = YearMonthNumbering(translator, [], prefix="IN")

    assert module.next_value(None, _invoice(date(2025, 1, 15))) == "IN2501-0001"


def test_year_month_last_value(translator):
    module = YearMonthNumbering(translator, lambda: ["FA2404-0007", "FA2405-0012", ""])

    assert module.next_value(None, None, MODE_LAST) == "FA2405-0012"
    assert YearMonthNumbering(translator).next_value(None, None, MODE_LAST) == "Not available"


def test_year_month_rejects_unknown_mode(translator):
    with pytest.raises(ValueError):
        YearMonthNumbering(translator).next_value(None, _invoice(date(2024, 1, 1)), "first")


def test_year_month_needs_an_invoice(translator):
    with pytest.raises(ValueError):
        YearMonthNumbering(translator).next_value(None, None, MODE_NEXT)


def test_year_month_description(translator):
    module = YearMonthNumbering(translator, prefix="FA", platform_version="1.2.0")

    assert module.example() == "FA0501-0001"
    assert "FAyymm-nnnn" in module.info()
    assert module.version() == "1.2.0"


def test_conflicting_references_block_activation(translator):
    module = YearMonthNumbering(translator, ["FA2405-0001", "FA24AB-0002", "FAC-1"])

    assert module.find_conflicts() == ["FA24AB-0002"]
    assert not module.can_activate()


def test_clean_references_allow_activation(translator):
    assert YearMonthNumbering(translator, ["FA2405-0001", "AV2405-0001"]).can_activate()


def test_get_numbering(translator):
    assert isinstance(get_numbering("default", translator), DefaultNumbering)
    module = get_numbering("yearmonth", translator, references=["FA2401-0009"], prefix="FA")
    assert isinstance(module, YearMonthNumbering)
    assert module.next_value(None, _invoice(date(2024, 2, 1))) == "FA2402-0010"
    with pytest.raises(ValueError):
        get_numbering("mercure", translator)


def test_get_numbering_reads_the_registry(monkeypatch, translator):
    class FixedNumbering(DefaultNumbering):
        name = "fixed"

        def next_value(self, thirdparty, invoice, mode=MODE_NEXT):
            return "FIX-1"

    monkeypatch.setitem(NUMBERING_MODULES, FixedNumbering.name, FixedNumbering)

    module = get_numbering("fixed", translator, platform_version="3.0")

    assert isinstance(module, FixedNumbering)
    assert module.next_value(None, None) == "FIX-1"
    assert module.platform_version == "3.0"
    assert sorted(NUMBERING_MODULES) == ["default", "fixed", "yearmonth"]
