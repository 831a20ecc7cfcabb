"""
CodeVault — Member Badges
"""

import re
from typing import Dict, List

from config.system_loader import get_setting
from core.errors import NotFoundError, ValidationError
from core.members.moderation import load_member
from core.permissions.guards import ensure_permission
from core.utils.logging_utils import get_component_logger
from database import app_store


logger = get_component_logger("Badges", component="members")

HEX_COLOR_REGEX = re.compile(r"^#[0-9a-fA-F]{6}$")
MAX_BADGE_NAME_LENGTH = 50
MAX_BADGE_ICON_LENGTH = 8


def normalize_color(value, default: str) -> str:
    if value is None or value == "":
        return default
    if not isinstance(value, str) or not HEX_COLOR_REGEX.match(value.strip()):
        raise ValidationError("color must be a hex value like #3b82f6")
    return value.strip().lower()


def list_member_badges(actor: Dict, member_id: str) -> List[Dict]:
    ensure_permission(actor, "users", "read")
    load_member(member_id)
    return app_store.list_badges(member_id)


def add_badge(actor: Dict, member_id: str, data: Dict) -> Dict:
    ensure_permission(actor, "users", "update")

    name = data.get("badge_name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("badge_name is required")
    name = name.strip()
    if len(name) > MAX_BADGE_NAME_LENGTH:
        raise ValidationError(
            f"badge_name must be at most {MAX_BADGE_NAME_LENGTH} characters"
        )

    color = normalize_color(
        data.get("badge_color"),
        get_setting("badges", "default_color", "#3b82f6"),
    )

    icon = data.get("badge_icon") or get_setting("badges", "default_icon", "⭐")
    if not isinstance(icon, str) or len(icon) > MAX_BADGE_ICON_LENGTH:
        raise ValidationError("badge_icon must be a short string")

    load_member(member_id)

    badge = app_store.create_badge(
        user_id=member_id,
        badge_name=name,
        badge_color=color,
        badge_icon=icon,
        issued_by=actor["user_id"],
    )

    logger.info(f"Badge '{name}' issued to {member_id} by {actor['user_id']}")
    return badge


def remove_badge(actor: Dict, member_id: str, badge_id: str) -> None:
    ensure_permission(actor, "users", "update")

    badge = app_store.get_badge(badge_id)
    if not badge or badge["user_id"] != member_id:
        raise NotFoundError("badge not found")

    app_store.delete_badge(badge_id)
    logger.info(f"Badge {badge_id} removed from {member_id} by {actor['user_id']}")
