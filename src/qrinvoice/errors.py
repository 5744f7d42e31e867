"""Exceptions raised by the qrinvoice package."""

from __future__ import annotations


class QrInvoiceError(Exception):
    """Base class for configuration and input problems."""


class SettingsError(QrInvoiceError, RuntimeError):
    """Raised when the settings file cannot be parsed."""


class CatalogError(QrInvoiceError, RuntimeError):
    """Raised when a translation catalogue is unreadable."""


class InputError(QrInvoiceError, ValueError):
    """Raised when invoice or account data cannot be loaded."""


__all__ = ["CatalogError", "InputError", "QrInvoiceError", "SettingsError"]
