"""
Role permissions, hierarchy and actor guards.
"""

from .role_permissions import (  # noqa: F401
    ACTIONS,
    RESOURCES,
    ROLES,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    effective_permissions,
    has_permission,
    is_valid_role,
    outranks,
    validate_permission_set,
)
from .guards import actor_can, ensure_permission, is_moderator  # noqa: F401

__all__ = [
    "ACTIONS",
    "RESOURCES",
    "ROLES",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "actor_can",
    "effective_permissions",
    "ensure_permission",
    "has_permission",
    "is_moderator",
    "is_valid_role",
    "outranks",
    "validate_permission_set",
]
