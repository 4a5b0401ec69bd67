"""Import every model so Base.metadata knows all tables."""

from crm_service.features.reminders.models import Reminder
from crm_service.features.tags.models import Tag
from crm_service.features.tasks.models import Task

__all__ = ["Reminder", "Tag", "Task"]
