"""Tests for I18nMiddleware locale detection."""

from __future__ import annotations

import pytest
from starlette.requests import Request
from starlette.responses import Response

from crm_service.app.middleware.i18n import I18nMiddleware


def _request(headers: list[tuple[bytes, bytes]] | None = None, query_string: bytes = b"") -> Request:
    return Request(
        {
            "type": "http",
            "path": "/",
            "method": "GET",
            "headers": headers or [],
            "query_string": query_string,
        }
    )


@pytest.fixture
def middleware() -> I18nMiddleware:
    return I18nMiddleware(app=None, default_locale="en", supported_locales=["en", "es"])


@pytest.mark.unit
class TestDetectLocale:
    def test_query_param_wins(self, middleware: I18nMiddleware) -> None:
        request = _request([(b"accept-language", b"en")], b"lang=es")

        assert middleware.detect_locale(request) == "es"

    def test_unsupported_query_param_ignored(self, middleware: I18nMiddleware) -> None:
        assert middleware.detect_locale(_request(query_string=b"lang=de")) == "en"

    def test_accept_language_by_quality(self, middleware: I18nMiddleware) -> None:
        request = _request([(b"accept-language", b"fr-CA, es;q=0.9, en;q=0.8")])

        assert middleware.detect_locale(request) == "es"

    def test_region_falls_back_to_language(self, middleware: I18nMiddleware) -> None:
        assert middleware.detect_locale(_request([(b"accept-language", b"es-MX")])) == "es"

    def test_default_when_nothing_matches(self, middleware: I18nMiddleware) -> None:
        assert middleware.detect_locale(_request([(b"accept-language", b"de")])) == "en"


@pytest.mark.unit
async def test_dispatch_sets_state_and_content_language(middleware: I18nMiddleware) -> None:
    request = _request(query_string=b"lang=es")

    async def call_next(req: Request) -> Response:
        return Response("ok")

    response = await middleware.dispatch(request, call_next)

    assert request.state.locale == "es"
    assert response.headers["Content-Language"] == "es"
