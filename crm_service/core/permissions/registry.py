"""Lookup table from resource type to its permission checker."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crm_service.core.permissions.base import PermissionChecker, ResourceType

_CHECKERS: dict[ResourceType, PermissionChecker[Any]] = {}


def register_checker(checker: PermissionChecker[Any]) -> PermissionChecker[Any]:
    """Register ``checker`` under its resource type (last registration wins)."""
    _CHECKERS[checker.resource_type] = checker
    return checker


def get_permission_checker(resource_type: ResourceType) -> PermissionChecker[Any]:
    """Return the checker for ``resource_type``.

    Raises:
        LookupError: If no checker was registered for the resource type.
    """
    try:
        return _CHECKERS[resource_type]
    except KeyError:
        msg = f"No permission checker registered for {resource_type!s}"
        raise LookupError(msg) from None


__all__ = ["get_permission_checker", "register_checker"]
