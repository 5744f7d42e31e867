"""Invoice reference numbering modules.

A numbering module implements :class:`NumberingModule`. :class:`DefaultNumbering`
supplies the fallback answers of a module that has nothing to offer;
:class:`YearMonthNumbering` produces ``<prefix><yymm>-<nnnn>`` references.
Modules are picked by name through :func:`get_numbering`.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Protocol

from . import __version__
from .invoices import Invoice, Party
from .translation import Translator

LOGGER = logging.getLogger("qrinvoice.numbering")

MODE_NEXT = "next"
MODE_LAST = "last"

VERSION_DEVELOPMENT = "development"
VERSION_EXPERIMENTAL = "experimental"
VERSION_PLATFORM = "platform"


class NumberingModule(Protocol):
    """Capabilities of an invoice reference numbering strategy."""

    def is_enabled(self) -> bool: ...

    def info(self) -> str: ...

    def example(self) -> str: ...

    def can_activate(self) -> bool: ...

    def next_value(self, thirdparty: Party | None, invoice: Invoice | None, mode: str = MODE_NEXT) -> str: ...

    def version(self) -> str: ...


def describe_version(
    tag: str | None, translator: Translator, *, platform_version: str = __version__
) -> str:
    """Return the label shown for a module maturity ``tag``."""

    if tag == VERSION_DEVELOPMENT:
        return translator.trans("VersionDevelopment")
    if tag == VERSION_EXPERIMENTAL:
        return translator.trans("VersionExperimental")
    if tag == VERSION_PLATFORM:
        return platform_version
    if tag:
        return tag
    return translator.trans("NotAvailable")


class DefaultNumbering:
    """Numbering module without a pattern; every answer is a fallback."""

    name = "default"

    def __init__(
        self,
        translator: Translator,
        *,
        version_tag: str | None = None,
        platform_version: str = __version__,
    ) -> None:
        self.translator = translator
        self.version_tag = version_tag
        self.platform_version = platform_version

    def is_enabled(self) -> bool:
        return True

    def info(self) -> str:
        return self.translator.trans("NoDescription")

    def example(self) -> str:
        return self.translator.trans("NoExample")

    def can_activate(self) -> bool:
        return True

    def next_value(self, thirdparty: Party | None, invoice: Invoice | None, mode: str = MODE_NEXT) -> str:
        return self.translator.trans("NotAvailable")

    @classmethod
    def create(
        cls,
        translator: Translator,
        *,
        references: Callable[[], Iterable[str]] | Iterable[str] = (),
        prefix: str = "FA",
        platform_version: str = __version__,
    ) -> "DefaultNumbering":
        """Build the module from the options shared by every numbering module."""

        return cls(translator, platform_version=platform_version)

    def version(self) -> str:
        return describe_version(
            self.version_tag, self.translator, platform_version=self.platform_version
        )


class YearMonthNumbering:
    """References shaped ``<prefix><yymm>-<nnnn>``.

    The counter is shared by every month: it never restarts at 1. The date
    part comes from the invoice issue date.
    """

    name = "yearmonth"

    def __init__(
        self,
        translator: Translator,
        references: Callable[[], Iterable[str]] | Iterable[str] = (),
        *,
        prefix: str = "FA",
        width: int = 4,
        version_tag: str | None = VERSION_PLATFORM,
        platform_version: str = __version__,
    ) -> None:
        self.translator = translator
        self._references = references
        self.prefix = prefix
        self.width = width
        self.version_tag = version_tag
        self.platform_version = platform_version
        escaped = re.escape(prefix)
        self._candidate = re.compile(rf"^{escaped}.{{4}}-", re.IGNORECASE)
        self._pattern = re.compile(rf"^{escaped}(\d{{4}})-(\d+)$", re.IGNORECASE)

    @classmethod
    def create(
        cls,
        translator: Translator,
        *,
        references: Callable[[], Iterable[str]] | Iterable[str] = (),
        prefix: str = "FA",
        platform_version: str = __version__,
    ) -> "YearMonthNumbering":
        return cls(translator, references, prefix=prefix, platform_version=platform_version)

    def _stored(self) -> list[str]:
        source = self._references() if callable(self._references) else self._references
        return [ref for ref in source if ref]

    def is_enabled(self) -> bool:
        return True

    def info(self) -> str:
        return self.translator.trans("NumberingYearMonthInfo", self.prefix)

    def example(self) -> str:
        return f"{self.prefix}0501-{1:0{self.width}d}"

    def find_conflicts(self) -> list[str]:
        """Stored references that look like ours but cannot be parsed."""

        return [
            ref
            for ref in self._stored()
            if self._candidate.match(ref) and not self._pattern.match(ref)
        ]

    def can_activate(self) -> bool:
        conflicts = self.find_conflicts()
        if conflicts:
            LOGGER.warning(
                "Numbering %s cannot be activated: %s",
                self.name,
                self.translator.trans("NumberingConflict", ", ".join(conflicts)),
            )
            return False
        return True

    def _highest(self) -> tuple[int, str | None]:
        best, best_ref = 0, None
        for ref in self._stored():
            match = self._pattern.match(ref)
            if match is None:
                continue
            counter = int(match.group(2))
            if counter > best:
                best, best_ref = counter, ref
        return best, best_ref

    def next_value(self, thirdparty: Party | None, invoice: Invoice | None, mode: str = MODE_NEXT) -> str:
        highest, last_ref = self._highest()
        if mode == MODE_LAST:
            return last_ref if last_ref is not None else self.translator.trans("NotAvailable")
        if mode != MODE_NEXT:
            raise ValueError(f"Unknown numbering mode: {mode}")

        if invoice is None:
            raise ValueError("An invoice is required to compute the next reference")
        yymm = invoice.issue_date.strftime("%y%m")
        value = f"{self.prefix}{yymm}-{highest + 1:0{self.width}d}"
        LOGGER.debug("Next reference for %s: %s", thirdparty.name if thirdparty else "-", value)
        return value

    def version(self) -> str:
        return describe_version(
            self.version_tag, self.translator, platform_version=self.platform_version
        )


NUMBERING_MODULES: dict[str, type[DefaultNumbering] | type[YearMonthNumbering]] = {
    DefaultNumbering.name: DefaultNumbering,
    YearMonthNumbering.name: YearMonthNumbering,
}


def get_numbering(
    name: str,
    translator: Translator,
    *,
    references: Callable[[], Iterable[str]] | Iterable[str] = (),
    prefix: str = "FA",
    platform_version: str = __version__,
) -> NumberingModule:
    """Instantiate the numbering module registered as ``name``."""

    try:
        module_class = NUMBERING_MODULES[name]
    except KeyError:
        raise ValueError(f"Unknown numbering module: {name}") from None
    return module_class.create(
        translator, references=references, prefix=prefix, platform_version=platform_version
    )


__all__ = [
    "DefaultNumbering",
    "MODE_LAST",
    "MODE_NEXT",
    "NUMBERING_MODULES",
    "NumberingModule",
    "YearMonthNumbering",
    "describe_version",
    "get_numbering",
]
