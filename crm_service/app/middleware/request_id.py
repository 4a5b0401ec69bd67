"""Request ID middleware for per-request tracking.

1. Takes the request ID from X-Request-ID or generates a UUID
2. Stores it in request.state.request_id and the logging context
3. Echoes X-Request-ID on the response
4. Clears the logging context when the request completes
"""

from __future__ import annotations

from crm_service.app.middleware.base import HeaderContextMiddleware, generate_uuid


class RequestIDMiddleware(HeaderContextMiddleware):
    """Add a unique request ID to every request.

    Usage:
        app.add_middleware(RequestIDMiddleware)

        @app.get("/")
        async def root(request: Request):
            return {"request_id": request.state.request_id}
    """

    header_name = "x-request-id"
    state_key = "request_id"
    log_context_key = "request_id"
    should_clear_context_on_finish = True

    def generate_value(self) -> str:
        return generate_uuid()
