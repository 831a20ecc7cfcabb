"""
CodeVault — Custom Roles

Custom roles carry a label, a color and an additive permission set.
They never change a member's rank in the built-in hierarchy.
"""

from typing import Dict, Optional

from config.system_loader import get_setting
from core.errors import ConflictError, NotFoundError, ValidationError
from core.members.badges import normalize_color
from core.members.moderation import ensure_can_moderate, load_member, public_profile
from core.permissions.guards import ensure_permission
from core.permissions.role_permissions import (
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    ROLES,
    validate_permission_set,
)
from core.utils.logging_utils import get_component_logger
from database import app_store


logger = get_component_logger("CustomRoles", component="members")

MAX_ROLE_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 500


def list_roles(actor: Dict) -> Dict:
    ensure_permission(actor, "users", "read")

    builtin = [
        {
            "name": role,
            "rank": ROLE_HIERARCHY[role],
            "permissions": ROLE_PERMISSIONS[role],
        }
        for role in ROLES
    ]

    return {"builtin": builtin, "custom": app_store.list_custom_roles()}


def create_custom_role(actor: Dict, data: Dict) -> Dict:
    ensure_permission(actor, "settings", "manage")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is required")
    name = name.strip()
    if len(name) > MAX_ROLE_NAME_LENGTH:
        raise ValidationError(f"name must be at most {MAX_ROLE_NAME_LENGTH} characters")
    if name.lower() in ROLE_HIERARCHY:
        raise ValidationError(f"'{name}' is a built-in role")

    color = normalize_color(
        data.get("color"),
        get_setting("custom_roles", "default_color", "#3b82f6"),
    )

    description = data.get("description") or ""
    if not isinstance(description, str):
        raise ValidationError("description must be a string")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"description must be at most {MAX_DESCRIPTION_LENGTH} characters"
        )

    raw_permissions = data.get("permissions")
    if raw_permissions is None:
        raw_permissions = get_setting("custom_roles", "default_permissions", {})

    try:
        permissions = validate_permission_set(raw_permissions)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc

    try:
        role = app_store.create_custom_role(
            name=name,
            color=color,
            description=description.strip(),
            permissions=permissions,
            created_by=actor["user_id"],
        )
    except ValueError as exc:
        raise ConflictError(str(exc)) from exc

    logger.info(f"Custom role created: {name} by {actor['user_id']}")
    return role


def delete_custom_role(actor: Dict, role_id: str) -> None:
    ensure_permission(actor, "settings", "manage")

    if not app_store.delete_custom_role(role_id):
        raise NotFoundError("custom role not found")

    logger.info(f"Custom role deleted: {role_id} by {actor['user_id']}")


def assign_custom_role(actor: Dict, member_id: str, custom_role_id: Optional[str]) -> Dict:
    ensure_permission(actor, "users", "update")

    member = load_member(member_id)
    ensure_can_moderate(actor, member)

    if custom_role_id is not None:
        if not isinstance(custom_role_id, str) or not app_store.get_custom_role(custom_role_id):
            raise NotFoundError("custom role not found")

    updated = app_store.update_profile(member_id, custom_role_id=custom_role_id)

    logger.info(
        f"Custom role for {member_id} set to {custom_role_id} by {actor['user_id']}"
    )
    return public_profile(updated)
