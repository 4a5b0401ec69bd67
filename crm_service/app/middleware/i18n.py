"""Locale detection middleware.

Priority order for locale detection:
1. Query parameter (?lang=es) - explicit override
2. Accept-Language header (with quality value parsing)
3. Default fallback

The authenticated actor's preferred language, when supported, is applied
later by the localizer dependency because the actor is resolved per route.

Example:
    app.add_middleware(
        I18nMiddleware,
        default_locale="en",
        supported_locales=["en", "es"],
    )

    @app.get("/hello")
    async def hello(request: Request):
        return {"locale": request.state.locale}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware

from crm_service.infra.logging.context import set_log_context

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response


class I18nMiddleware(BaseHTTPMiddleware):
    """Detect the request locale and store it in ``request.state.locale``.

    Attributes:
        default_locale: Locale used when detection fails
        supported_locales: Locale codes with a message catalog
        query_param: Query parameter name for locale override
        use_accept_language: Enable Accept-Language header parsing
    """

    def __init__(
        self,
        app: Any,
        default_locale: str = "en",
        supported_locales: list[str] | None = None,
        query_param: str = "lang",
        use_accept_language: bool = True,
    ) -> None:
        super().__init__(app)
        self.default_locale = default_locale
        self.supported_locales = supported_locales or [default_locale]
        self.query_param = query_param
        self.use_accept_language = use_accept_language

    def detect_locale(self, request: Request) -> str:
        query_locale = request.query_params.get(self.query_param)
        if query_locale and query_locale in self.supported_locales:
            return query_locale

        if self.use_accept_language:
            accept_language = request.headers.get("accept-language", "")
            if accept_language:
                locale = self._parse_accept_language(accept_language)
                if locale:
                    return locale

        return self.default_locale

    def _parse_accept_language(self, accept_language: str) -> str | None:
        """Return the best supported locale from "en-US,es;q=0.9,fr;q=0.8"."""
        preferences: list[tuple[float, list[str]]] = []

        for lang_part_raw in accept_language.split(","):
            lang_part = lang_part_raw.strip()
            if not lang_part:
                continue

            parts = lang_part.split(";")
            lang = parts[0].strip()

            quality = 1.0
            for param in parts[1:]:
                if param.strip().startswith("q="):
                    try:
                        quality = float(param.strip()[2:])
                    except ValueError:
                        quality = 1.0
                    break

            # en-US also matches en
            lang_codes = [lang.lower()]
            if "-" in lang:
                lang_codes.append(lang.split("-")[0].lower())

            preferences.append((quality, lang_codes))

        preferences.sort(key=lambda x: x[0], reverse=True)

        for _quality, lang_codes in preferences:
            for lang_code in lang_codes:
                if lang_code in self.supported_locales:
                    return lang_code

        return None

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        locale = self.detect_locale(request)
        request.state.locale = locale
        set_log_context(locale=locale)

        response = await call_next(request)
        # The localizer dependency may switch to the actor's preferred language
        response.headers.setdefault("Content-Language", getattr(request.state, "locale", locale))
        return response
