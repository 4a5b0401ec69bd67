"""Tasks feature."""

from crm_service.features.tasks.models import Task
from crm_service.features.tasks.router import router

__all__ = ["Task", "router"]
