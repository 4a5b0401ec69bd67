"""Localizer dependency."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from crm_service.core.dependencies.auth import ActorDep
from crm_service.core.i18n import Localizer
from crm_service.core.settings import I18nSettings, get_i18n_settings


async def get_localizer(
    request: Request,
    actor: ActorDep,
    settings: Annotated[I18nSettings, Depends(get_i18n_settings)],
) -> Localizer:
    """Localizer for the actor's preferred language, else the detected locale."""
    locale = getattr(request.state, "locale", None) or settings.default_locale
    if actor.language and actor.language in settings.supported_locales:
        locale = actor.language
        request.state.locale = locale
    return Localizer(locale, settings.default_locale)


LocalizerDep = Annotated[Localizer, Depends(get_localizer)]

__all__ = ["LocalizerDep", "get_localizer"]
