"""
CodeVault — Membership Moderation

Handles:
- Member listing & detail
- Role changes (bounded by the role hierarchy)
- Bans / unbans and the ban notice shown at sign-in
"""

from typing import Dict, List, Optional

from core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.permissions.guards import ensure_permission
from core.permissions.role_permissions import ROLE_HIERARCHY, is_valid_role, outranks
from core.utils.logging_utils import get_component_logger
from database import app_store


# ============================================================
# Logger
# ============================================================

logger = get_component_logger("Moderation", component="members")

MAX_BAN_REASON_LENGTH = 500


# ============================================================
# Helpers
# ============================================================

def public_profile(profile: Optional[Dict]) -> Optional[Dict]:
    """
    Profile without credential material.
    """

    if profile is None:
        return None
    return {k: v for k, v in profile.items() if k != "password_hash"}


def load_member(member_id: str) -> Dict:
    member = app_store.get_profile(member_id)
    if not member:
        raise NotFoundError("member not found")
    return member


def ensure_can_moderate(actor: Dict, member: Dict) -> None:
    """
    Actors never moderate themselves and only act on lower ranks.
    """

    if member["id"] == actor["user_id"]:
        logger.warning(f"Self-moderation refused for {actor['user_id']}")
        raise PermissionDeniedError("you cannot moderate your own account")

    if not outranks(actor.get("role"), member["role"]):
        logger.warning(
            f"Moderation refused: {actor['user_id']} ({actor.get('role')}) "
            f"-> {member['id']} ({member['role']})"
        )
        raise PermissionDeniedError(
            "cannot moderate a member with an equal or higher role"
        )


def ban_message(profile: Dict) -> str:
    reason = profile.get("ban_reason") or "No reason provided"

    moderator = "Unknown moderator"
    banned_by = profile.get("banned_by")
    if banned_by:
        issuer = app_store.get_profile(banned_by)
        moderator = (issuer and issuer.get("full_name")) or banned_by

    banned_at = profile.get("banned_at") or "Unknown"

    return (
        "Your account has been banned.\n\n"
        f"Reason: {reason}\n"
        f"Banned by: {moderator}\n"
        f"Date: {banned_at}"
    )


# ============================================================
# Members
# ============================================================

def list_members(actor: Dict) -> List[Dict]:
    ensure_permission(actor, "users", "read")
    return [public_profile(p) for p in app_store.list_profiles()]


def get_member(actor: Dict, member_id: str) -> Dict:
    ensure_permission(actor, "users", "read")

    member = load_member(member_id)
    return {
        "profile": public_profile(member),
        "badges": app_store.list_badges(member_id),
        "ban": app_store.get_ban(member_id),
    }


# ============================================================
# Roles
# ============================================================

def change_role(actor: Dict, member_id: str, new_role) -> Dict:
    ensure_permission(actor, "users", "update")

    if not is_valid_role(new_role):
        raise ValidationError(
            f"role must be one of: {', '.join(ROLE_HIERARCHY)}"
        )

    member = load_member(member_id)
    ensure_can_moderate(actor, member)

    if ROLE_HIERARCHY[new_role] > ROLE_HIERARCHY[actor["role"]]:
        raise PermissionDeniedError("cannot grant a role above your own")

    updated = app_store.update_profile(member_id, role=new_role)

    logger.info(
        f"Role changed: {member_id} {member['role']} -> {new_role} by {actor['user_id']}"
    )
    return public_profile(updated)


# ============================================================
# Bans
# ============================================================

def ban_member(actor: Dict, member_id: str, reason) -> Dict:
    ensure_permission(actor, "users", "update")

    if not isinstance(reason, str) or not reason.strip():
        raise ValidationError("ban reason is required")

    reason = reason.strip()
    if len(reason) > MAX_BAN_REASON_LENGTH:
        raise ValidationError(
            f"ban reason must be at most {MAX_BAN_REASON_LENGTH} characters"
        )

    member = load_member(member_id)
    ensure_can_moderate(actor, member)

    if member["is_banned"]:
        raise ConflictError("member is already banned")

    try:
        ban = app_store.create_ban(member_id, reason=reason, banned_by=actor["user_id"])
    except ValueError as exc:
        raise ConflictError(str(exc)) from exc

    logger.info(f"Member banned: {member_id} by {actor['user_id']} ({reason})")
    return {"profile": public_profile(app_store.get_profile(member_id)), "ban": ban}


def unban_member(actor: Dict, member_id: str) -> Dict:
    ensure_permission(actor, "users", "update")

    member = load_member(member_id)
    ensure_can_moderate(actor, member)

    if not member["is_banned"]:
        raise ConflictError("member is not banned")

    app_store.delete_ban(member_id)

    logger.info(f"Member unbanned: {member_id} by {actor['user_id']}")
    return public_profile(app_store.get_profile(member_id))
