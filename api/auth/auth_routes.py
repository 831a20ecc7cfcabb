"""
Auth Routes.

Endpoints:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- GET  /auth/me
"""

import re
import time
from flask import g, jsonify, request

from api.auth import auth_blueprint
from api.auth.middleware import require_auth
from api.auth.jwt_handler import create_access_token, create_refresh_token, verify_token
from api.auth.password_utils import hash_password, verify_password
from config.system_loader import get_setting
from core.members.moderation import ban_message, public_profile
from core.permissions.role_permissions import effective_permissions, is_valid_role
from core.utils.logging_utils import get_component_logger
from database.app_store import (
    create_profile,
    get_profile,
    get_profile_by_email,
    list_badges,
    touch_last_login,
)


logger = get_component_logger("AuthRoutes", component="auth")

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_NAME_LENGTH = 100


def _is_valid_email(value: str) -> bool:
    return bool(value and EMAIL_REGEX.match(value))


def _json_object():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _string_fields(data: dict, *names):
    """
    Pull string fields from the body; None marks a non-string value.
    Missing or null fields come back as "".
    """

    values = {}
    for name in names:
        value = data.get(name)
        if value is None:
            value = ""
        if not isinstance(value, str):
            return None
        values[name] = value
    return values


def _default_role() -> str:
    role = get_setting("auth", "default_role", "editor")
    return role if is_valid_role(role) else "viewer"


@auth_blueprint.route("/register", methods=["POST"])
def register():
    start_time = time.time()
    data = _json_object()
    if data is None:
        return jsonify({"error": "JSON object body required"}), 400

    fields = _string_fields(data, "full_name", "email", "password")
    if fields is None:
        return jsonify({"error": "full_name, email and password must be strings"}), 400

    full_name = fields["full_name"].strip()
    email = fields["email"].strip().lower()
    password = fields["password"]
    min_length = int(get_setting("auth", "password_min_length", 6))

    if not full_name or not email or not password:
        return jsonify({"error": "full_name, email and password are required"}), 400
    if not _is_valid_email(email):
        return jsonify({"error": "invalid email format"}), 400
    if len(full_name) > MAX_NAME_LENGTH:
        return jsonify({"error": f"full_name must be at most {MAX_NAME_LENGTH} characters"}), 400
    if len(password) < min_length:
        return jsonify({"error": f"password must be at least {min_length} characters"}), 400

    try:
        # The very first profile is promoted to owner inside the insert
        profile = create_profile(
            email=email,
            full_name=full_name,
            password_hash=hash_password(password),
            role=_default_role(),
            first_profile_role="owner",
        )
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 409

    logger.info(f"Registered {profile['email']} as {profile['role']}")

    latency = round(time.time() - start_time, 4)
    return jsonify(
        {
            "status": "registered",
            "user": public_profile(profile),
            "latency_seconds": latency,
        }
    ), 201


@auth_blueprint.route("/login", methods=["POST"])
def login():
    start_time = time.time()
    data = _json_object()
    if data is None:
        return jsonify({"error": "JSON object body required"}), 400

    fields = _string_fields(data, "email", "password")
    if fields is None:
        return jsonify({"error": "email and password must be strings"}), 400

    email = fields["email"].strip().lower()
    password = fields["password"]
    if not email or not password:
        return jsonify({"error": "email and password are required"}), 400

    profile = get_profile_by_email(email)
    if not profile or not verify_password(password, profile["password_hash"]):
        logger.warning(f"Failed sign-in for {email}")
        return jsonify({"error": "Invalid credentials"}), 401

    if profile["is_banned"]:
        logger.warning(f"Banned account refused at sign-in: {profile['id']}")
        return jsonify({"error": ban_message(profile)}), 403

    touch_last_login(profile["id"])
    profile = get_profile(profile["id"])

    access_token = create_access_token(user_id=profile["id"], email=profile["email"], role=profile["role"])
    refresh_token = create_refresh_token(user_id=profile["id"], email=profile["email"], role=profile["role"])

    logger.info(f"Signed in: {profile['id']}")

    latency = round(time.time() - start_time, 4)
    return jsonify(
        {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "user": public_profile(profile),
            "latency_seconds": latency,
        }
    ), 200


@auth_blueprint.route("/refresh", methods=["POST"])
def refresh():
    fields = _string_fields(_json_object() or {}, "refresh_token")
    if fields is None:
        return jsonify({"error": "refresh_token must be a string"}), 400

    refresh_token = fields["refresh_token"].strip()
    if not refresh_token:
        return jsonify({"error": "refresh_token is required"}), 400

    try:
        payload = verify_token(refresh_token, expected_type="refresh")
    except Exception as exc:
        return jsonify({"error": str(exc)}), 401

    profile = get_profile(payload.get("user_id"))
    if not profile:
        return jsonify({"error": "Account not found"}), 401
    if profile["is_banned"]:
        return jsonify({"error": ban_message(profile)}), 403

    access_token = create_access_token(
        user_id=profile["id"],
        email=profile["email"],
        role=profile["role"],
    )
    return jsonify({"access_token": access_token}), 200


@auth_blueprint.route("/logout", methods=["POST"])
def logout():
    return jsonify({"status": "ok"}), 200


@auth_blueprint.route("/me", methods=["GET"])
@require_auth
def me():
    profile = get_profile(g.user["user_id"])
    return jsonify(
        {
            "user": public_profile(profile),
            "permissions": effective_permissions(
                g.user["role"], g.user["custom_permissions"]
            ),
            "badges": list_badges(g.user["user_id"]),
        }
    ), 200
