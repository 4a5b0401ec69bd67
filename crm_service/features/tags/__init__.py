"""Tags attached to CRM resources."""

from crm_service.features.tags.models import Tag
from crm_service.features.tags.repository import TagRepository, get_tag_repository

__all__ = ["Tag", "TagRepository", "get_tag_repository"]
