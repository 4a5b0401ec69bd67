"""RFC 7807 Problem Details schema for error responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://datatracker.ietf.org/doc/html/rfc7807

    Example:
        return JSONResponse(
            status_code=409,
            content=ProblemDetail(
                type="not-found",
                title="Conflict",
                status=409,
                detail="Reminder not found",
                instance="/api/v1/reminders/12",
            ).model_dump(exclude_none=True),
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(min_length=1, max_length=200, description="Short summary of the problem")
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str = Field(
        default="",
        description="Human-readable explanation; empty for bare aborts",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )
    request_id: str | None = Field(default=None, description="X-Request-ID of the failing request")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "validation-error",
                "title": "Conflict",
                "status": 409,
                "detail": "<li>The title field is required.</li>",
                "instance": "/api/v1/reminders",
            }
        },
    )


class ValidationProblemDetail(ProblemDetail):
    """Problem detail for framework-level request validation (malformed path/query types)."""

    errors: list[dict[str, Any]] = Field(default_factory=list)


__all__ = ["ProblemDetail", "ValidationProblemDetail"]
