import os
import tempfile

import pytest

# jwt_handler refuses to import without a secret
os.environ["JWT_SECRET"] = "test-secret"
os.environ.setdefault("CODEVAULT_LOG_DIR", tempfile.mkdtemp(prefix="codevault-logs-"))

PASSWORD = "secret123"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "codevault.db"
    monkeypatch.setenv("CODEVAULT_DB_PATH", str(path))
    return path


@pytest.fixture
def store(db_path):
    from database import app_store

    app_store.init_db()
    return app_store


@pytest.fixture
def app(db_path):
    from api import create_app

    flask_app = create_app()
    flask_app.testing = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def signup(client, email, full_name=None, password=PASSWORD):
    resp = client.post(
        "/auth/register",
        json={
            "email": email,
            "password": password,
            "full_name": full_name or email.split("@")[0].title(),
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["user"]


def login(client, email, password=PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_member(client):
    """
    Sign up, force a role in the store, sign in.
    Returns {"id", "email", "headers"}.
    """

    from database import app_store

    def _make(email, role=None, full_name=None):
        user = signup(client, email, full_name=full_name)
        if role and user["role"] != role:
            app_store.update_profile(user["id"], role=role)

        resp = login(client, email)
        assert resp.status_code == 200, resp.get_json()
        return {
            "id": user["id"],
            "email": email,
            "headers": bearer(resp.get_json()["access_token"]),
        }

    return _make


@pytest.fixture
def owner(make_member):
    # First profile created is promoted to owner
    return make_member("owner@example.com", full_name="Olivia Owner")


@pytest.fixture
def admin(owner, make_member):
    return make_member("admin@example.com", role="admin", full_name="Adam Admin")


@pytest.fixture
def editor(owner, make_member):
    return make_member("editor@example.com", full_name="Eve Editor")


@pytest.fixture
def viewer(owner, make_member):
    return make_member("viewer@example.com", role="viewer", full_name="Vic Viewer")
