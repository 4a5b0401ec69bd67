"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions inherit from this class and are rendered as
    RFC 7807 Problem Details by the global exception handler.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message (may be empty for bare aborts).
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=409,
            detail="Reminder not found",
            type="not-found",
            extra={"reminder_id": 12},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str = "",
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")


class ConflictException(AppException):
    """Request cannot be completed against the current state (409).

    The CRM answers 409 for validation failures, missing entities, malformed
    bulk requests and failed writes; ``type`` tells them apart.

    Example:
        raise ConflictException(detail="<li>The title field is required.</li>",
                                type="validation-error")
    """

    def __init__(
        self,
        detail: str = "",
        type: str = "conflict",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=409,
            detail=detail,
            type=type,
            title="Conflict",
            instance=instance,
            extra=extra,
        )


class ForbiddenException(AppException):
    """Actor lacks the permission required for an entity (403)."""

    def __init__(
        self,
        detail: str = "Forbidden",
        type: str = "permission-denied",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=403,
            detail=detail,
            type=type,
            title="Forbidden",
            instance=instance,
            extra=extra,
        )


class UnauthorizedException(AppException):
    """No actor could be resolved for the request (401)."""

    def __init__(
        self,
        detail: str = "Authentication required",
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


__all__ = [
    "AppException",
    "ConflictException",
    "ForbiddenException",
    "UnauthorizedException",
]
