"""Database layer: declarative base, generic repository and its exceptions."""

from crm_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampedBase,
    TimestampMixin,
)
from crm_service.core.database.exceptions import NotFoundError, RepositoryError
from crm_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "IntegerPKMixin",
    "NotFoundError",
    "RepositoryError",
    "SearchResult",
    "TimestampMixin",
    "TimestampedBase",
]
