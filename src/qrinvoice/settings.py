"""Runtime settings for invoice document generation.

Settings live in a small JSON document. The path is taken from the caller,
then from the ``QRINVOICE_SETTINGS_PATH`` environment variable; without
either the built-in defaults apply. The resulting :class:`InvoiceSettings`
is passed explicitly to every operation that needs it.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from . import __version__
from .errors import SettingsError
from .invoices import Party

_SETTINGS_ENV_VAR = "QRINVOICE_SETTINGS_PATH"

PLACEMENT_BOTTOM = "bottom"
PLACEMENT_NONE = "none"


@dataclass(frozen=True)
class InvoiceSettings:
    """Configuration consumed by the document models and numbering modules."""

    qr_code_placement: str = PLACEMENT_NONE
    enabled_document_models: tuple[str, ...] = ("plain",)
    numbering_module: str = "default"
    numbering_prefix: str = "FA"
    platform_version: str = __version__
    issuer: Party | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def qr_enabled(self) -> bool:
        """Whether the QR payment part is placed at the bottom of page 1."""

        return self.qr_code_placement == PLACEMENT_BOTTOM

    def with_placement(self, placement: str) -> "InvoiceSettings":
        """Return a copy of the settings using ``placement``."""

        return replace(self, qr_code_placement=placement)


_KNOWN_KEYS = {
    "qr_code_placement",
    "enabled_document_models",
    "numbering_module",
    "numbering_prefix",
    "platform_version",
    "issuer",
}


def _resolve_settings_path(path: Path | None) -> Path | None:
    if path is not None:
        return path
    candidate = os.getenv(_SETTINGS_ENV_VAR)
    if candidate:
        return Path(candidate)
    return None


def settings_from_mapping(payload: dict[str, Any]) -> InvoiceSettings:
    """Build :class:`InvoiceSettings` from a decoded JSON object."""

    if not isinstance(payload, dict):
        raise SettingsError("Settings must be a JSON object")

    placement = payload.get("qr_code_placement", PLACEMENT_NONE)
    if not isinstance(placement, str):
        raise SettingsError("'qr_code_placement' must be a string")

    models = payload.get("enabled_document_models", ["plain"])
    if isinstance(models, str) or not all(isinstance(item, str) for item in models):
        raise SettingsError("'enabled_document_models' must be a list of names")

    issuer = payload.get("issuer")
    if issuer is not None and not isinstance(issuer, dict):
        raise SettingsError("'issuer' must be a JSON object")

    defaults = InvoiceSettings()
    return InvoiceSettings(
        qr_code_placement=placement.strip().lower(),
        enabled_document_models=tuple(models),
        numbering_module=str(payload.get("numbering_module", defaults.numbering_module)),
        numbering_prefix=str(payload.get("numbering_prefix", defaults.numbering_prefix)),
        platform_version=str(payload.get("platform_version", defaults.platform_version)),
        issuer=Party.from_dict(issuer) if issuer else None,
        extra={key: value for key, value in payload.items() if key not in _KNOWN_KEYS},
    )


def load_settings(path: Path | None = None) -> InvoiceSettings:
    """Load the settings document, falling back to defaults when unset."""

    settings_path = _resolve_settings_path(path)
    if settings_path is None:
        return InvoiceSettings()

    if not settings_path.exists():
        msg = f"Settings file '{settings_path}' not found"
        raise SettingsError(msg)

    with settings_path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            msg = f"Settings file '{settings_path}' is not valid JSON"
            raise SettingsError(msg) from exc

    return settings_from_mapping(payload)


__all__ = [
    "InvoiceSettings",
    "PLACEMENT_BOTTOM",
    "PLACEMENT_NONE",
    "load_settings",
    "settings_from_mapping",
]
