"""ASGI entrypoint: ``uvicorn crm_service.main:app``."""

from crm_service.app.main import create_app

app = create_app()
