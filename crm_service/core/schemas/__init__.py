"""Shared schemas."""

from crm_service.core.schemas.auth import Actor, Role
from crm_service.core.schemas.problem_details import ProblemDetail, ValidationProblemDetail

__all__ = ["Actor", "ProblemDetail", "Role", "ValidationProblemDetail"]
