"""Feature modules (one package per resource)."""
