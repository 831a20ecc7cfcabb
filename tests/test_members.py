import pytest

from database import app_store


# ============================================================
# LISTING
# ============================================================

def test_editor_cannot_list_members(client, editor):
    assert client.get("/members", headers=editor["headers"]).status_code == 403


def test_admin_lists_members_without_credentials(client, admin, editor):
    resp = client.get("/members", headers=admin["headers"])
    assert resp.status_code == 200

    body = resp.get_json()
    assert body["count"] == 3
    assert [m["email"] for m in body["members"]][0] == editor["email"]
    assert all("password_hash" not in m for m in body["members"])


def test_member_detail(client, admin, editor):
    resp = client.get(f"/members/{editor['id']}", headers=admin["headers"])
    body = resp.get_json()

    assert body["profile"]["id"] == editor["id"]
    assert body["badges"] == []
    assert body["ban"] is None

    assert client.get("/members/missing", headers=admin["headers"]).status_code == 404


# ============================================================
# ROLES
# ============================================================

def test_admin_changes_editor_role(client, admin, editor):
    resp = client.put(
        f"/members/{editor['id']}/role", json={"role": "viewer"}, headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert resp.get_json()["member"]["role"] == "viewer"


def test_admin_may_promote_up_to_own_rank(client, admin, editor):
    resp = client.put(
        f"/members/{editor['id']}/role", json={"role": "admin"}, headers=admin["headers"]
    )
    assert resp.status_code == 200

    other = app_store.create_profile("x@example.com", "X", "hash", "viewer")
    resp = client.put(
        f"/members/{other['id']}/role", json={"role": "owner"}, headers=admin["headers"]
    )
    assert resp.status_code == 403


@pytest.mark.parametrize("target", ["owner", "admin_self"])
def test_admin_cannot_touch_owner_or_self(client, owner, admin, target):
    member_id = owner["id"] if target == "owner" else admin["id"]
    resp = client.put(
        f"/members/{member_id}/role", json={"role": "viewer"}, headers=admin["headers"]
    )
    assert resp.status_code == 403


def test_admin_cannot_demote_peer_admin(client, admin, make_member):
    peer = make_member("peer@example.com", role="admin")
    resp = client.put(
        f"/members/{peer['id']}/role", json={"role": "viewer"}, headers=admin["headers"]
    )
    assert resp.status_code == 403


def test_owner_can_demote_admin(client, owner, admin):
    resp = client.put(
        f"/members/{admin['id']}/role", json={"role": "editor"}, headers=owner["headers"]
    )
    assert resp.status_code == 200


@pytest.mark.parametrize("role", ["superuser", ["viewer"], {"name": "viewer"}, 3, None])
def test_role_change_rejects_invalid_roles(client, admin, editor, role):
    resp = client.put(
        f"/members/{editor['id']}/role", json={"role": role}, headers=admin["headers"]
    )
    assert resp.status_code == 400
    assert app_store.get_profile(editor["id"])["role"] == "editor"


def test_role_change_unknown_member(client, admin):
    resp = client.put("/members/missing/role", json={"role": "viewer"}, headers=admin["headers"])
    assert resp.status_code == 404


def test_editor_cannot_change_roles(client, editor, viewer):
    resp = client.put(
        f"/members/{viewer['id']}/role", json={"role": "editor"}, headers=editor["headers"]
    )
    assert resp.status_code == 403


# ============================================================
# BANS
# ============================================================

def test_ban_requires_reason(client, admin, editor):
    for payload in ({}, {"reason": "   "}):
        resp = client.post(f"/members/{editor['id']}/ban", json=payload, headers=admin["headers"])
        assert resp.status_code == 400


def test_ban_and_unban(client, admin, editor):
    resp = client.post(
        f"/members/{editor['id']}/ban", json={"reason": " spam "}, headers=admin["headers"]
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["profile"]["is_banned"] is True
    assert body["profile"]["ban_reason"] == "spam"
    assert body["ban"]["banned_by"] == admin["id"]

    resp = client.post(
        f"/members/{editor['id']}/ban", json={"reason": "again"}, headers=admin["headers"]
    )
    assert resp.status_code == 409

    detail = client.get(f"/members/{editor['id']}", headers=admin["headers"]).get_json()
    assert detail["ban"]["reason"] == "spam"

    resp = client.delete(f"/members/{editor['id']}/ban", headers=admin["headers"])
    assert resp.status_code == 200
    assert resp.get_json()["member"]["is_banned"] is False

    resp = client.delete(f"/members/{editor['id']}/ban", headers=admin["headers"])
    assert resp.status_code == 409

    assert client.get("/auth/me", headers=editor["headers"]).status_code == 200


def test_cannot_ban_self_or_higher_rank(client, owner, admin):
    resp = client.post(f"/members/{admin['id']}/ban", json={"reason": "x"}, headers=admin["headers"])
    assert resp.status_code == 403

    resp = client.post(f"/members/{owner['id']}/ban", json={"reason": "x"}, headers=admin["headers"])
    assert resp.status_code == 403
    assert app_store.get_profile(owner["id"])["is_banned"] is False


# ============================================================
# BADGES
# ============================================================

def test_badges_lifecycle(client, admin, editor):
    resp = client.post(
        f"/members/{editor['id']}/badges", json={"badge_name": "Helper"}, headers=admin["headers"]
    )
    assert resp.status_code == 201
    badge = resp.get_json()["badge"]
    assert badge["badge_color"] == "#3b82f6"
    assert badge["badge_icon"] == "⭐"
    assert badge["issued_by"] == admin["id"]

    resp = client.get(f"/members/{editor['id']}/badges", headers=admin["headers"])
    assert [b["id"] for b in resp.get_json()["badges"]] == [badge["id"]]

    me = client.get("/auth/me", headers=editor["headers"]).get_json()
    assert [b["badge_name"] for b in me["badges"]] == ["Helper"]

    resp = client.delete(
        f"/members/{admin['id']}/badges/{badge['id']}", headers=admin["headers"]
    )
    assert resp.status_code == 404

    resp = client.delete(
        f"/members/{editor['id']}/badges/{badge['id']}", headers=admin["headers"]
    )
    assert resp.status_code == 200
    assert app_store.list_badges(editor["id"]) == []


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"badge_name": "  "},
        {"badge_name": "Helper", "badge_color": "blue"},
        {"badge_name": "Helper", "badge_icon": "x" * 20},
    ],
)
def test_badge_validation(client, admin, editor, payload):
    resp = client.post(f"/members/{editor['id']}/badges", json=payload, headers=admin["headers"])
    assert resp.status_code == 400


def test_badge_for_unknown_member(client, admin):
    resp = client.post("/members/missing/badges", json={"badge_name": "Helper"}, headers=admin["headers"])
    assert resp.status_code == 404


def test_editor_cannot_issue_badges(client, editor, viewer):
    resp = client.post(
        f"/members/{viewer['id']}/badges", json={"badge_name": "Helper"}, headers=editor["headers"]
    )
    assert resp.status_code == 403


# ============================================================
# CUSTOM ROLES
# ============================================================

def test_roles_listing(client, admin):
    body = client.get("/roles", headers=admin["headers"]).get_json()
    assert [r["name"] for r in body["builtin"]] == ["owner", "admin", "editor", "viewer"]
    assert body["custom"] == []


def test_create_custom_role_defaults(client, admin):
    resp = client.post("/roles", json={"name": "Reviewer"}, headers=admin["headers"])
    assert resp.status_code == 201

    role = resp.get_json()["role"]
    assert role["color"] == "#3b82f6"
    assert role["permissions"] == {"snippets": ["read", "create"], "users": ["read"]}
    assert role["created_by"] == admin["id"]

    resp = client.post("/roles", json={"name": "Reviewer"}, headers=admin["headers"])
    assert resp.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"name": "Admin"},
        {"name": "Ops", "permissions": {"billing": ["read"]}},
        {"name": "Ops", "color": "#12"},
    ],
)
def test_create_custom_role_validation(client, admin, payload):
    resp = client.post("/roles", json=payload, headers=admin["headers"])
    assert resp.status_code == 400


def test_editor_cannot_manage_roles(client, editor):
    resp = client.post("/roles", json={"name": "Reviewer"}, headers=editor["headers"])
    assert resp.status_code == 403


def test_custom_role_grants_are_additive_and_revocable(client, admin, viewer):
    assert client.get("/members", headers=viewer["headers"]).status_code == 403

    role = client.post(
        "/roles", json={"name": "Reviewer", "permissions": {"users": ["read"]}}, headers=admin["headers"]
    ).get_json()["role"]

    resp = client.put(
        f"/members/{viewer['id']}/custom-role",
        json={"custom_role_id": role["id"]},
        headers=admin["headers"],
    )
    assert resp.status_code == 200
    assert resp.get_json()["member"]["custom_role_id"] == role["id"]

    assert client.get("/members", headers=viewer["headers"]).status_code == 200
    me = client.get("/auth/me", headers=viewer["headers"]).get_json()
    assert me["permissions"]["users"] == ["read"]

    resp = client.delete(f"/roles/{role['id']}", headers=admin["headers"])
    assert resp.status_code == 200
    assert client.get("/members", headers=viewer["headers"]).status_code == 403

    assert client.delete(f"/roles/{role['id']}", headers=admin["headers"]).status_code == 404


def test_assign_unknown_custom_role(client, admin, viewer):
    resp = client.put(
        f"/members/{viewer['id']}/custom-role",
        json={"custom_role_id": "missing"},
        headers=admin["headers"],
    )
    assert resp.status_code == 404


def test_clear_custom_role(client, admin, viewer):
    role = client.post("/roles", json={"name": "Reviewer"}, headers=admin["headers"]).get_json()["role"]
    client.put(
        f"/members/{viewer['id']}/custom-role",
        json={"custom_role_id": role["id"]},
        headers=admin["headers"],
    )

    resp = client.put(
        f"/members/{viewer['id']}/custom-role", json={"custom_role_id": None}, headers=admin["headers"]
    )
    assert resp.get_json()["member"]["custom_role_id"] is None
