import pytest

from tests.conftest import bearer, login, signup


def test_first_signup_is_owner_then_default_role(client):
    first = signup(client, "first@example.com")
    second = signup(client, "second@example.com")

    assert first["role"] == "owner"
    assert second["role"] == "editor"
    assert "password_hash" not in first


def test_register_validation(client):
    resp = client.post("/auth/register", json={"email": "a@example.com"})
    assert resp.status_code == 400

    resp = client.post(
        "/auth/register",
        json={"email": "not-an-email", "password": "secret123", "full_name": "A"},
    )
    assert resp.status_code == 400

    resp = client.post(
        "/auth/register",
        json={"email": "a@example.com", "password": "123", "full_name": "A"},
    )
    assert resp.status_code == 400
    assert "at least 6" in resp.get_json()["error"]


def test_duplicate_email_conflicts(client):
    signup(client, "dup@example.com")
    resp = client.post(
        "/auth/register",
        json={"email": "DUP@example.com", "password": "secret123", "full_name": "Dup"},
    )
    assert resp.status_code == 409


def test_login_and_me(client):
    signup(client, "ada@example.com", full_name="Ada")

    assert login(client, "ada@example.com", password="wrong-pass").status_code == 401
    assert login(client, "nobody@example.com").status_code == 401

    resp = login(client, "ADA@example.com")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user"]["last_login_at"]
    assert body["access_token"] and body["refresh_token"]

    me = client.get("/auth/me", headers=bearer(body["access_token"]))
    assert me.status_code == 200
    data = me.get_json()
    assert data["user"]["full_name"] == "Ada"
    assert data["permissions"]["settings"] == ["manage"]
    assert data["badges"] == []


def test_me_requires_valid_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers=bearer("garbage")).status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Token abc"}).status_code == 401


def test_refresh_issues_access_token(client):
    signup(client, "ada@example.com")
    tokens = login(client, "ada@example.com").get_json()

    resp = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    assert client.get("/auth/me", headers=bearer(resp.get_json()["access_token"])).status_code == 200

    # access tokens are not refresh tokens and vice versa
    resp = client.post("/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert resp.status_code == 401
    assert client.get("/auth/me", headers=bearer(tokens["refresh_token"])).status_code == 401


def test_logout_is_stateless(client):
    assert client.post("/auth/logout").get_json() == {"status": "ok"}


def test_banned_member_cannot_sign_in(client, admin, editor):
    resp = client.post(
        f"/members/{editor['id']}/ban",
        json={"reason": "spamming snippets"},
        headers=admin["headers"],
    )
    assert resp.status_code == 201

    resp = login(client, editor["email"])
    assert resp.status_code == 403
    message = resp.get_json()["error"]
    assert message.startswith("Your account has been banned.")
    assert "Reason: spamming snippets" in message
    assert "Banned by: Adam Admin" in message


def test_ban_applies_to_issued_tokens(client, admin, editor):
    assert client.get("/auth/me", headers=editor["headers"]).status_code == 200

    client.post(
        f"/members/{editor['id']}/ban", json={"reason": "abuse"}, headers=admin["headers"]
    )

    resp = client.get("/snippets", headers=editor["headers"])
    assert resp.status_code == 403
    assert "Reason: abuse" in resp.get_json()["error"]


def test_role_change_applies_to_issued_tokens(client, owner, editor):
    resp = client.post(
        "/snippets", json={"title": "a", "language": "Go"}, headers=editor["headers"]
    )
    assert resp.status_code == 201

    client.put(
        f"/members/{editor['id']}/role", json={"role": "viewer"}, headers=owner["headers"]
    )

    resp = client.post(
        "/snippets", json={"title": "b", "language": "Go"}, headers=editor["headers"]
    )
    assert resp.status_code == 403


@pytest.mark.parametrize(
    "payload",
    [
        ["x"],
        "just a string",
        {"email": 123, "password": "secret123", "full_name": "A"},
        {"email": "a@example.com", "password": 12345678, "full_name": "A"},
        {"email": "a@example.com", "password": "secret123", "full_name": ["A"]},
    ],
)
def test_register_rejects_malformed_payloads(client, payload):
    resp = client.post("/auth/register", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


@pytest.mark.parametrize(
    "payload",
    [
        ["x"],
        {"email": "ada@example.com", "password": 12345678},
        {"email": {"$ne": ""}, "password": "secret123"},
    ],
)
def test_login_rejects_malformed_payloads(client, payload):
    signup(client, "ada@example.com")
    resp = client.post("/auth/login", json=payload)
    assert resp.status_code == 400


def test_refresh_rejects_non_string_token(client):
    resp = client.post("/auth/refresh", json={"refresh_token": 42})
    assert resp.status_code == 400


def test_banned_member_cannot_refresh(client, admin, make_member):
    make_member("ada@example.com", full_name="Ada")
    tokens = login(client, "ada@example.com").get_json()

    member_id = tokens["user"]["id"]
    resp = client.post(
        f"/members/{member_id}/ban", json={"reason": "token farming"}, headers=admin["headers"]
    )
    assert resp.status_code == 201

    resp = client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 403
    message = resp.get_json()["error"]
    assert message.startswith("Your account has been banned.")
    assert "Reason: token farming" in message
    assert "access_token" not in resp.get_json()
