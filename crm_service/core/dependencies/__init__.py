"""FastAPI dependencies."""

from crm_service.core.dependencies.auth import ActorDep, get_current_actor
from crm_service.core.dependencies.database import get_db_session
from crm_service.core.dependencies.i18n import LocalizerDep, get_localizer
from crm_service.core.dependencies.request import RequestDataDep, get_request_data

__all__ = [
    "ActorDep",
    "LocalizerDep",
    "RequestDataDep",
    "get_current_actor",
    "get_db_session",
    "get_localizer",
    "get_request_data",
]
