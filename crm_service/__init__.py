"""CRM reminders and tasks service."""

__version__ = "1.0.0"
