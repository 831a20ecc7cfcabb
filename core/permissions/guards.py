"""
Permission guards for an authenticated actor.

An actor is the dict the auth middleware attaches to the request:
{"user_id", "email", "full_name", "role", "custom_permissions"}.
"""

from typing import Dict

from core.errors import PermissionDeniedError
from core.permissions.role_permissions import has_permission


def actor_can(actor: Dict, resource: str, action: str) -> bool:
    if not actor:
        return False

    return has_permission(
        actor.get("role"),
        resource,
        action,
        actor.get("custom_permissions"),
    )


def ensure_permission(actor: Dict, resource: str, action: str) -> None:
    if not actor_can(actor, resource, action):
        raise PermissionDeniedError("Insufficient permissions")


def is_moderator(actor: Dict) -> bool:
    """Moderators may act on other members' content."""
    return actor_can(actor, "users", "update")
