"""Translation catalogues for user-facing messages.

Catalogues are JSON objects mapping a message key to a text with ``{}``
placeholders, shipped in the ``langs`` directory of the package. Missing
keys fall back to English and then to the key itself.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Mapping

from .errors import CatalogError
from .utils import short_language

LOGGER = logging.getLogger("qrinvoice.translation")

FALLBACK_LANGUAGE = "en"


@lru_cache(maxsize=None)
def load_catalog(language: str) -> Mapping[str, str]:
    """Return the catalogue for ``language`` or an empty mapping."""

    resource = resources.files("qrinvoice").joinpath("langs").joinpath(f"{language}.json")
    if not resource.is_file():
        LOGGER.debug("No catalogue for language %s", language)
        return {}

    try:
        payload = json.loads(resource.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Catalogue '{language}.json' is not valid JSON"
        raise CatalogError(msg) from exc

    if not isinstance(payload, dict):
        raise CatalogError(f"Catalogue '{language}.json' must be a JSON object")
    return {str(key): str(value) for key, value in payload.items()}


class Translator:
    """Localisation context passed to every operation producing messages."""

    def __init__(
        self,
        language: str = FALLBACK_LANGUAGE,
        *,
        catalog: Mapping[str, str] | None = None,
    ) -> None:
        self.language = language
        self.short_language = short_language(language, default=FALLBACK_LANGUAGE)
        if catalog is None:
            catalog = load_catalog(self.short_language)
        self._catalog = dict(catalog)
        self._fallback = (
            {} if self.short_language == FALLBACK_LANGUAGE else load_catalog(FALLBACK_LANGUAGE)
        )

    def trans(self, key: str, *args: object) -> str:
        """Return the translated text for ``key`` formatted with ``args``."""

        template = self._catalog.get(key)
        if template is None:
            template = self._fallback.get(key, key)
        if not args:
            return template
        try:
            return template.format(*args)
        except (IndexError, KeyError, ValueError):
            LOGGER.warning("Catalogue entry %s does not accept %d arguments", key, len(args))
            return " ".join([template, *(str(arg) for arg in args)])

    def has(self, key: str) -> bool:
        return key in self._catalog or key in self._fallback


__all__ = ["FALLBACK_LANGUAGE", "Translator", "load_catalog"]
