"""
CodeVault — Auth Middleware

Provides:
- require_auth decorator
- require_permission decorator
- Automatic Bearer token validation
- Live profile lookup (role changes and bans apply to issued tokens)
"""

from functools import wraps
from flask import request, jsonify, g

from api.auth.jwt_handler import (
    verify_token,
    TokenExpiredError,
    InvalidTokenError
)

from core.members.moderation import ban_message
from core.permissions.guards import actor_can
from database.app_store import get_custom_role, get_profile


# ============================================================
# EXTRACT TOKEN
# ============================================================

def _extract_token():
    """
    Extract Bearer token from Authorization header.
    """

    auth_header = request.headers.get("Authorization")

    if not auth_header:
        return None

    if not auth_header.startswith("Bearer "):
        return None

    return auth_header.split(" ", 1)[1].strip() or None


# ============================================================
# BUILD ACTOR
# ============================================================

def build_actor(profile: dict) -> dict:
    """
    Request-scoped view of a profile used by every permission check.
    """

    custom_permissions = {}
    if profile.get("custom_role_id"):
        custom_role = get_custom_role(profile["custom_role_id"])
        if custom_role:
            custom_permissions = custom_role["permissions"]

    return {
        "user_id": profile["id"],
        "email": profile["email"],
        "full_name": profile["full_name"],
        "role": profile["role"],
        "custom_role_id": profile.get("custom_role_id"),
        "custom_permissions": custom_permissions
    }


# ============================================================
# VERIFY + ATTACH USER
# ============================================================

def _authenticate_request():
    """
    Verifies JWT, reloads the profile and attaches it to Flask's g.
    """

    token = _extract_token()

    if not token:
        return None, ("Authorization token required", 401)

    try:
        payload = verify_token(token, expected_type="access")

    except TokenExpiredError as e:
        return None, (str(e), 401)

    except InvalidTokenError as e:
        return None, (str(e), 401)

    profile = get_profile(payload.get("user_id"))

    if not profile:
        return None, ("Account not found", 401)

    if profile["is_banned"]:
        return None, (ban_message(profile), 403)

    g.user = build_actor(profile)
    return g.user, None


# ============================================================
# REQUIRE AUTH
# ============================================================

def require_auth(f):
    """
    Ensures user is authenticated and not banned.
    """

    @wraps(f)
    def decorated(*args, **kwargs):

        _, error = _authenticate_request()

        if error:
            message, status_code = error
            return jsonify({"error": message}), status_code

        return f(*args, **kwargs)

    return decorated


# ============================================================
# REQUIRE PERMISSION
# ============================================================

def require_permission(resource, action):
    """
    Ensures authenticated user may perform action on resource.
    """

    def decorator(f):

        @wraps(f)
        def decorated(*args, **kwargs):

            actor, error = _authenticate_request()

            if error:
                message, status_code = error
                return jsonify({"error": message}), status_code

            if not actor_can(actor, resource, action):
                return jsonify({"error": "Insufficient permissions"}), 403

            return f(*args, **kwargs)

        return decorated

    return decorator
