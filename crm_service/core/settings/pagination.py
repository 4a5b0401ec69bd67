"""Pagination settings for list endpoints.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=50, PAGINATION_MAX_LIMIT=100
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Highest accepted ?page= value on list endpoints
MAX_PAGE = 100_000


class PaginationSettings(BaseSettings):
    """Default and maximum page sizes for list endpoints."""

    default_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size when limit not specified",
    )
    max_limit: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum allowed page size (hard limit)",
    )

    @model_validator(mode="after")
    def validate_limits(self) -> PaginationSettings:
        if self.default_limit > self.max_limit:
            msg = "default_limit cannot exceed max_limit"
            raise ValueError(msg)
        return self

    def clamp(self, limit: int | None) -> int:
        """Return a page size within [1, max_limit], defaulting when unset."""
        if limit is None:
            return self.default_limit
        return max(1, min(limit, self.max_limit))

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
