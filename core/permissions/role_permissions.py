"""
CodeVault — Role Permissions

Defines:
- Available roles
- Role hierarchy
- Allowed actions per role and resource
- Permission validation helpers
"""

from typing import Dict, List, Optional


# ============================================================
# ROLE HIERARCHY
# ============================================================

"""
Hierarchy principle:
A member may only moderate members ranked strictly below them.

owner > admin > editor > viewer
"""

ROLE_HIERARCHY = {
    "owner": 4,
    "admin": 3,
    "editor": 2,
    "viewer": 1
}

ROLES = tuple(sorted(ROLE_HIERARCHY, key=ROLE_HIERARCHY.get, reverse=True))


# ============================================================
# RESOURCE ACCESS RULES
# ============================================================

RESOURCES = ("snippets", "users", "settings")
ACTIONS = ("create", "read", "update", "delete", "manage")

_CRUD = ["create", "read", "update", "delete"]

ROLE_PERMISSIONS: Dict[str, Dict[str, List[str]]] = {
    "owner": {
        "snippets": list(_CRUD),
        "users": list(_CRUD),
        "settings": ["manage"],
    },
    "admin": {
        "snippets": list(_CRUD),
        "users": list(_CRUD),
        "settings": ["manage"],
    },
    "editor": {
        "snippets": list(_CRUD),
    },
    "viewer": {
        "snippets": ["read"],
    },
}


# ============================================================
# PERMISSION CHECK HELPERS
# ============================================================

def is_valid_role(role) -> bool:
    return isinstance(role, str) and role in ROLE_HIERARCHY


def outranks(actor_role: Optional[str], target_role: Optional[str]) -> bool:
    """
    True when actor_role sits strictly above target_role.
    Unknown actor roles outrank nobody; unknown targets rank lowest.
    """

    if not is_valid_role(actor_role):
        return False

    target_rank = ROLE_HIERARCHY[target_role] if is_valid_role(target_role) else 0
    return ROLE_HIERARCHY[actor_role] > target_rank


def validate_permission_set(permissions) -> Dict[str, List[str]]:
    """
    Check a custom role permission map and return a normalized copy.
    Raises ValueError on unknown resources or actions.
    """

    if permissions is None:
        return {}

    if not isinstance(permissions, dict):
        raise ValueError("permissions must be an object of resource -> actions")

    normalized = {}
    for resource, actions in permissions.items():
        if resource not in RESOURCES:
            raise ValueError(f"unknown resource: {resource}")
        if not isinstance(actions, (list, tuple)):
            raise ValueError(f"actions for {resource} must be a list")

        cleaned = []
        for action in actions:
            if action not in ACTIONS:
                raise ValueError(f"unknown action for {resource}: {action}")
            if action not in cleaned:
                cleaned.append(action)

        normalized[resource] = cleaned

    return normalized


def effective_permissions(
    role: Optional[str],
    custom_permissions: Optional[Dict[str, List[str]]] = None
) -> Dict[str, List[str]]:
    """
    Union of the built-in role table and an optional custom role set.
    """

    merged: Dict[str, List[str]] = {}

    if not is_valid_role(role):
        return merged

    for resource, actions in ROLE_PERMISSIONS.get(role, {}).items():
        merged[resource] = list(actions)

    for resource, actions in (custom_permissions or {}).items():
        bucket = merged.setdefault(resource, [])
        for action in actions:
            if action not in bucket:
                bucket.append(action)

    return merged


def has_permission(
    role: Optional[str],
    resource: str,
    action: str,
    custom_permissions: Optional[Dict[str, List[str]]] = None
) -> bool:
    """
    Check if role (plus any custom role grants) allows action on resource.
    A missing role yields no permissions.
    """

    if not is_valid_role(role):
        return False

    if action in ROLE_PERMISSIONS.get(role, {}).get(resource, ()):
        return True

    if custom_permissions:
        return action in custom_permissions.get(resource, ())

    return False
