"""HTTP middleware."""

from crm_service.app.middleware.i18n import I18nMiddleware
from crm_service.app.middleware.request_id import RequestIDMiddleware

__all__ = ["I18nMiddleware", "RequestIDMiddleware"]
