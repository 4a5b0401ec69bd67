"""Internationalization (I18n) settings.

Settings are configured via environment variables with the I18N_ prefix.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class I18nSettings(BaseSettings):
    """Locale detection and translation settings.

    Environment variables use I18N_ prefix.
    Example: I18N_DEFAULT_LOCALE="es", I18N_SUPPORTED_LOCALES='["en","es"]'

    Attributes:
        default_locale: Locale used when detection fails
        supported_locales: Locale codes with a message catalog
        query_param: Query parameter name for locale override
        use_accept_language: Enable Accept-Language header parsing
    """

    default_locale: str = Field(
        default="en",
        min_length=2,
        max_length=10,
        pattern=r"^[a-z]{2}(-[A-Z]{2})?$",
        description="Default locale (ISO 639-1 format, e.g. 'en', 'es')",
    )
    supported_locales: list[str] = Field(
        default_factory=lambda: ["en", "es"],
        min_length=1,
        description="List of supported locale codes (JSON array)",
    )
    query_param: str = Field(
        default="lang",
        min_length=1,
        max_length=20,
        pattern=r"^[a-z_]+$",
        description="Query parameter name for locale override (e.g. ?lang=es)",
    )
    use_accept_language: bool = Field(default=True, description="Parse Accept-Language")

    @field_validator("supported_locales")
    @classmethod
    def strip_locales(cls, v: list[str]) -> list[str]:
        """Drop blank entries and surrounding whitespace."""
        return [code.strip() for code in v if code.strip()]

    model_config = SettingsConfigDict(
        env_prefix="I18N_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
