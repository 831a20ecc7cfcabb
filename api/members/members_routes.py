"""
Members Routes.

Endpoints:
- GET    /members
- GET    /members/<id>
- PUT    /members/<id>/role
- POST   /members/<id>/ban
- DELETE /members/<id>/ban
- GET    /members/<id>/badges
- POST   /members/<id>/badges
- DELETE /members/<id>/badges/<badge_id>
- PUT    /members/<id>/custom-role
- GET    /roles
- POST   /roles
- DELETE /roles/<id>
"""

from flask import g, jsonify, request

from api.auth.middleware import require_permission
from api.members import members_blueprint
from core.members import badges, custom_roles, moderation


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# ============================================================
# MEMBERS
# ============================================================

@members_blueprint.route("/members", methods=["GET"])
@require_permission("users", "read")
def list_members():
    members = moderation.list_members(g.user)
    return jsonify({"count": len(members), "members": members})


@members_blueprint.route("/members/<member_id>", methods=["GET"])
@require_permission("users", "read")
def get_member(member_id: str):
    return jsonify(moderation.get_member(g.user, member_id))


@members_blueprint.route("/members/<member_id>/role", methods=["PUT"])
@require_permission("users", "update")
def change_role(member_id: str):
    member = moderation.change_role(g.user, member_id, _json_body().get("role"))
    return jsonify({"member": member})


# ============================================================
# BANS
# ============================================================

@members_blueprint.route("/members/<member_id>/ban", methods=["POST"])
@require_permission("users", "update")
def ban_member(member_id: str):
    result = moderation.ban_member(g.user, member_id, _json_body().get("reason"))
    return jsonify(result), 201


@members_blueprint.route("/members/<member_id>/ban", methods=["DELETE"])
@require_permission("users", "update")
def unban_member(member_id: str):
    member = moderation.unban_member(g.user, member_id)
    return jsonify({"member": member})


# ============================================================
# BADGES
# ============================================================

@members_blueprint.route("/members/<member_id>/badges", methods=["GET"])
@require_permission("users", "read")
def list_badges(member_id: str):
    return jsonify({"badges": badges.list_member_badges(g.user, member_id)})


@members_blueprint.route("/members/<member_id>/badges", methods=["POST"])
@require_permission("users", "update")
def add_badge(member_id: str):
    badge = badges.add_badge(g.user, member_id, _json_body())
    return jsonify({"badge": badge}), 201


@members_blueprint.route("/members/<member_id>/badges/<badge_id>", methods=["DELETE"])
@require_permission("users", "update")
def remove_badge(member_id: str, badge_id: str):
    badges.remove_badge(g.user, member_id, badge_id)
    return jsonify({"status": "deleted", "badge_id": badge_id})


# ============================================================
# CUSTOM ROLES
# ============================================================

@members_blueprint.route("/members/<member_id>/custom-role", methods=["PUT"])
@require_permission("users", "update")
def assign_custom_role(member_id: str):
    member = custom_roles.assign_custom_role(
        g.user, member_id, _json_body().get("custom_role_id")
    )
    return jsonify({"member": member})


@members_blueprint.route("/roles", methods=["GET"])
@require_permission("users", "read")
def list_roles():
    return jsonify(custom_roles.list_roles(g.user))


@members_blueprint.route("/roles", methods=["POST"])
@require_permission("settings", "manage")
def create_role():
    role = custom_roles.create_custom_role(g.user, _json_body())
    return jsonify({"role": role}), 201


@members_blueprint.route("/roles/<role_id>", methods=["DELETE"])
@require_permission("settings", "manage")
def delete_role(role_id: str):
    custom_roles.delete_custom_role(g.user, role_id)
    return jsonify({"status": "deleted", "role_id": role_id})
