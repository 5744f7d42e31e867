"""Editable PDF document used while finishing invoice pages.

:class:`PdfContext` wraps a :class:`pypdf.PdfWriter` and keeps the drawing
state the QR panel needs: the current page and the text colour. Edits that
may fail half-way go through :meth:`PdfContext.transaction`, which restores
the document as it was before the edit started.
"""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from pypdf import PageObject, PdfReader, PdfWriter

LOGGER = logging.getLogger("qrinvoice.pdf")

BLACK = (0, 0, 0)


@dataclass(frozen=True)
class TransactionOutcome:
    """Result of :meth:`PdfContext.attempt`."""

    committed: bool
    error: Exception | None = None


class PdfContext:
    """Pages of a PDF document with a current page and a text colour."""

    def __init__(self, writer: PdfWriter | None = None) -> None:
        self.writer = writer if writer is not None else PdfWriter()
        self.page_number = 1
        self.text_color: tuple[int, int, int] = BLACK

    @classmethod
    def from_bytes(cls, data: bytes) -> "PdfContext":
        return cls(PdfWriter(clone_from=PdfReader(io.BytesIO(data))))

    @property
    def page_count(self) -> int:
        return len(self.writer.pages)

    def set_page(self, page_number: int) -> None:
        """Select the page subsequent drawing applies to (1-based)."""

        if not 1 <= page_number <= self.page_count:
            raise IndexError(f"Page {page_number} out of range 1..{self.page_count}")
        self.page_number = page_number

    @property
    def current_page(self) -> PageObject:
        return self.writer.pages[self.page_number - 1]

    def set_text_color(self, red: int, green: int, blue: int) -> None:
        """Set the text colour as 0-255 RGB components."""

        for component in (red, green, blue):
            if not 0 <= component <= 255:
                raise ValueError(f"Colour component {component} out of range 0..255")
        self.text_color = (red, green, blue)

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.writer.write(buffer)
        return buffer.getvalue()

    def save(self, destination: Path) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.to_bytes())
        return destination

    @contextmanager
    def transaction(self) -> Iterator["PdfContext"]:
        """Run an edit that is rolled back if it raises.

        The exception is re-raised after the document, the current page and
        the text colour are restored.
        """

        snapshot = self.to_bytes()
        page_number = self.page_number
        text_color = self.text_color
        try:
            yield self
        except Exception:
            self.writer = PdfWriter(clone_from=PdfReader(io.BytesIO(snapshot)))
            self.page_number = page_number
            self.text_color = text_color
            LOGGER.debug("PDF edit rolled back")
            raise

    def attempt(self, draw: Callable[["PdfContext"], None]) -> TransactionOutcome:
        """Run ``draw`` inside :meth:`transaction` and report the outcome."""

        try:
            with self.transaction():
                draw(self)
        except Exception as exc:  # noqa: BLE001 - reported through the outcome
            LOGGER.warning("PDF edit failed and was rolled back: %s", exc, exc_info=True)
            return TransactionOutcome(committed=False, error=exc)
        return TransactionOutcome(committed=True)


__all__ = ["BLACK", "PdfContext", "TransactionOutcome"]
