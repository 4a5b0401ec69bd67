"""Command line interface for crm-service."""
