"""Resource permission checkers and their registry."""

from crm_service.core.permissions.base import (
    PermissionAction,
    PermissionChecker,
    ResourceType,
    apply_permissions,
)
from crm_service.core.permissions.registry import get_permission_checker, register_checker

__all__ = [
    "PermissionAction",
    "PermissionChecker",
    "ResourceType",
    "apply_permissions",
    "get_permission_checker",
    "register_checker",
]
