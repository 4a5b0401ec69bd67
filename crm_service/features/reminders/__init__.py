"""Reminders feature."""

from crm_service.features.reminders.models import Reminder
from crm_service.features.reminders.router import router

__all__ = ["Reminder", "router"]
