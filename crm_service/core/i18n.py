"""Message catalogs and the per-request localizer.

Catalogs are flat JSON objects shipped in ``crm_service/locales/<locale>.json``.
Keys missing from a locale fall back to the default locale, then to the key
itself.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from typing import Any

logger = logging.getLogger(__name__)

CATALOG_PACKAGE = "crm_service.locales"


@lru_cache(maxsize=16)
def load_catalog(locale: str) -> dict[str, str]:
    """Load and cache the message catalog for ``locale``.

    Unknown locales yield an empty catalog.
    """
    resource = resources.files(CATALOG_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        logger.warning("Message catalog not found", extra={"locale": locale})
        return {}
    return json.loads(resource.read_text(encoding="utf-8"))


class Localizer:
    """Translate message keys for one locale.

    Example:
        >>> _ = Localizer("es")
        >>> _("reminders")
        'Recordatorios'
        >>> _("validation.required", attribute=_("attribute.reminder_title"))
        'El campo título es obligatorio.'
    """

    def __init__(self, locale: str, default_locale: str = "en") -> None:
        self.locale = locale
        self.default_locale = default_locale
        self._catalog = load_catalog(locale)
        self._fallback = load_catalog(default_locale) if default_locale != locale else {}

    def gettext(self, key: str, **params: Any) -> str:
        message = self._catalog.get(key) or self._fallback.get(key) or key
        return message.format(**params) if params else message

    __call__ = gettext

    def __repr__(self) -> str:
        return f"Localizer(locale={self.locale!r})"


__all__ = ["Localizer", "load_catalog"]
