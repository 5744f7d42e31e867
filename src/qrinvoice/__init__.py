"""Top level package for invoice documents with Swiss QR-bill payment parts.

The package bundles the QR payload builder, the invoice document models and
the invoice reference numbering strategies used by the host application.
"""

__version__ = "1.2.0"

__all__ = [
    "accounts",
    "cli",
    "commands",
    "documents",
    "errors",
    "invoices",
    "logging",
    "numbering",
    "payload",
    "pdf",
    "rendering",
    "settings",
    "swissqr",
    "translation",
    "utils",
]
