"""Command implementations exposed by :mod:`qrinvoice.cli`."""

__all__ = ["check_qr", "numbering", "render"]
