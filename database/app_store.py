"""
CodeVault — Application Store

sqlite3-backed persistence for:
- profiles
- code_snippets
- banned_users
- user_badges
- custom_roles

Every public helper opens its own connection and returns plain dicts.
"""

import json
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional

from config.system_loader import get_database_config
from core.utils.logging_utils import get_logger


# =====================================================
# LOGGER SETUP
# =====================================================

logger = get_logger("AppStore")


PROFILE_COLUMNS = {
    "email",
    "full_name",
    "password_hash",
    "role",
    "is_banned",
    "banned_by",
    "ban_reason",
    "banned_at",
    "custom_role_id",
    "last_login_at",
}

SNIPPET_COLUMNS = {"title", "language", "code", "is_public"}


SCHEMA = """
    CREATE TABLE IF NOT EXISTS profiles (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        full_name TEXT NOT NULL DEFAULT '',
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'viewer'
            CHECK (role IN ('owner', 'admin', 'editor', 'viewer')),
        is_banned INTEGER NOT NULL DEFAULT 0,
        banned_by TEXT,
        ban_reason TEXT,
        banned_at TEXT,
        custom_role_id TEXT REFERENCES custom_roles(id) ON DELETE SET NULL,
        last_login_at TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS code_snippets (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        language TEXT NOT NULL,
        code TEXT NOT NULL DEFAULT '',
        user_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
        is_public INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS banned_users (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE REFERENCES profiles(id) ON DELETE CASCADE,
        reason TEXT NOT NULL,
        banned_by TEXT,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS user_badges (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
        badge_name TEXT NOT NULL,
        badge_color TEXT NOT NULL,
        badge_icon TEXT NOT NULL,
        issued_by TEXT,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS custom_roles (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        color TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        permissions TEXT NOT NULL DEFAULT '{}',
        created_by TEXT,
        created_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_snippets_user ON code_snippets(user_id);
    CREATE INDEX IF NOT EXISTS idx_badges_user ON user_badges(user_id);
"""


# =====================================================
# CONNECTION
# =====================================================

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def get_db_path() -> str:
    """
    Resolve the sqlite file: CODEVAULT_DB_PATH wins over db.yaml.
    """

    env_path = os.getenv("CODEVAULT_DB_PATH")
    if env_path:
        return os.path.abspath(env_path)

    store_cfg = get_database_config().get("app_store", {})
    return os.path.abspath(store_cfg.get("path", "data/codevault.db"))


@contextmanager
def _connect():
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    db_path = get_db_path()

    try:
        os.makedirs(os.path.dirname(db_path), exist_ok=True)

        with _connect() as conn:
            conn.executescript(SCHEMA)

        logger.info(f"App store initialized at: {db_path}")

    except Exception:
        logger.exception("Failed to initialize app store")
        raise


# =====================================================
# ROW MAPPERS
# =====================================================

def _profile_row(row) -> Optional[Dict]:
    if row is None:
        return None
    data = dict(row)
    data["is_banned"] = bool(data["is_banned"])
    return data


def _snippet_row(row) -> Optional[Dict]:
    if row is None:
        return None
    data = dict(row)
    data["is_public"] = bool(data["is_public"])
    return data


def _custom_role_row(row) -> Optional[Dict]:
    if row is None:
        return None
    data = dict(row)
    data["permissions"] = json.loads(data["permissions"] or "{}")
    return data


def _row(row) -> Optional[Dict]:
    return dict(row) if row is not None else None


def _assignments(fields: Dict, allowed: set) -> tuple[str, list]:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Unknown columns: {', '.join(sorted(unknown))}")

    values = []
    for value in fields.values():
        values.append(int(value) if isinstance(value, bool) else value)

    clause = ", ".join(f"{column} = ?" for column in fields)
    return clause, values


# =====================================================
# PROFILES
# =====================================================

def create_profile(
    email: str,
    full_name: str,
    password_hash: str,
    role: str,
    first_profile_role: Optional[str] = None
) -> Dict:
    """
    Insert a profile. When first_profile_role is given it replaces role
    if the table is empty; the count and the insert are one statement,
    so concurrent first sign-ups cannot both receive it.
    """

    now = _now_iso()
    profile_id = _new_id()

    try:
        with _connect() as conn:
            conn.execute(
                """
                INSERT INTO profiles
                (id, email, full_name, password_hash, role, created_at, updated_at)
                SELECT ?, ?, ?, ?,
                       CASE WHEN (SELECT COUNT(*) FROM profiles) = 0 THEN ? ELSE ? END,
                       ?, ?
                """,
                (
                    profile_id, email, full_name, password_hash,
                    first_profile_role or role, role,
                    now, now,
                ),
            )
    except sqlite3.IntegrityError as exc:
        raise ValueError("email already registered") from exc

    return get_profile(profile_id)


def get_profile(user_id: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return _profile_row(row)


def get_profile_by_email(email: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute(
            "SELECT * FROM profiles WHERE email = ?",
            ((email or "").strip().lower(),),
        ).fetchone()
    return _profile_row(row)


def count_profiles() -> int:
    with _connect() as conn:
        return conn.execute("SELECT COUNT(*) FROM profiles").fetchone()[0]


def list_profiles() -> List[Dict]:
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM profiles ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
    return [_profile_row(r) for r in rows]


def update_profile(user_id: str, **fields) -> Optional[Dict]:
    if not fields:
        return get_profile(user_id)

    clause, values = _assignments(fields, PROFILE_COLUMNS)

    with _connect() as conn:
        cursor = conn.execute(
            f"UPDATE profiles SET {clause}, updated_at = ? WHERE id = ?",
            (*values, _now_iso(), user_id),
        )
        if cursor.rowcount == 0:
            return None

    return get_profile(user_id)


def touch_last_login(user_id: str) -> None:
    with _connect() as conn:
        conn.execute(
            "UPDATE profiles SET last_login_at = ? WHERE id = ?",
            (_now_iso(), user_id),
        )


# =====================================================
# SNIPPETS
# =====================================================

def create_snippet(
    user_id: str,
    title: str,
    language: str,
    code: str,
    is_public: bool = False
) -> Dict:
    now = _now_iso()
    snippet_id = _new_id()

    with _connect() as conn:
        conn.execute(
            """
            INSERT INTO code_snippets
            (id, title, language, code, user_id, is_public, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (snippet_id, title, language, code, user_id, int(bool(is_public)), now, now),
        )

    return get_snippet(snippet_id)


def get_snippet(snippet_id: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute(
            "SELECT * FROM code_snippets WHERE id = ?", (snippet_id,)
        ).fetchone()
    return _snippet_row(row)


def list_snippets(
    visible_to: Optional[str] = None,
    owner_id: Optional[str] = None,
    language: Optional[str] = None,
    search: Optional[str] = None
) -> List[Dict]:
    """
    List snippets newest first.

    :param visible_to: restrict to this user's snippets plus public ones
                       (None means no visibility restriction)
    :param owner_id: restrict to one owner
    :param language: case-insensitive exact language label
    :param search: case-insensitive substring of the title
    """

    clauses = []
    params: list = []

    if visible_to is not None:
        clauses.append("(user_id = ? OR is_public = 1)")
        params.append(visible_to)

    if owner_id is not None:
        clauses.append("user_id = ?")
        params.append(owner_id)

    if language:
        clauses.append("LOWER(language) = LOWER(?)")
        params.append(language.strip())

    if search:
        clauses.append("INSTR(LOWER(title), LOWER(?)) > 0")
        params.append(search.strip())

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

    with _connect() as conn:
        rows = conn.execute(
            f"SELECT * FROM code_snippets {where} ORDER BY created_at DESC, rowid DESC",
            params,
        ).fetchall()

    return [_snippet_row(r) for r in rows]


def update_snippet(snippet_id: str, **fields) -> Optional[Dict]:
    """
    Apply fields and always stamp updated_at, even for an empty update.
    """

    clause, values = _assignments(fields, SNIPPET_COLUMNS)
    assignments = f"{clause}, updated_at = ?" if clause else "updated_at = ?"

    with _connect() as conn:
        cursor = conn.execute(
            f"UPDATE code_snippets SET {assignments} WHERE id = ?",
            (*values, _now_iso(), snippet_id),
        )
        if cursor.rowcount == 0:
            return None

    return get_snippet(snippet_id)


def delete_snippet(snippet_id: str) -> bool:
    with _connect() as conn:
        cursor = conn.execute("DELETE FROM code_snippets WHERE id = ?", (snippet_id,))
        return cursor.rowcount > 0


# =====================================================
# BANS
# =====================================================

def create_ban(user_id: str, reason: str, banned_by: Optional[str]) -> Dict:
    """
    Record a ban and flag the profile in a single transaction.
    """

    now = _now_iso()
    ban_id = _new_id()

    try:
        with _connect() as conn:
            conn.execute(
                """
                INSERT INTO banned_users (id, user_id, reason, banned_by, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (ban_id, user_id, reason, banned_by, now),
            )
            conn.execute(
                """
                UPDATE profiles
                SET is_banned = 1, banned_by = ?, ban_reason = ?, banned_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (banned_by, reason, now, now, user_id),
            )
    except sqlite3.IntegrityError as exc:
        raise ValueError("user is already banned") from exc

    return get_ban(user_id)


def get_ban(user_id: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute(
            "SELECT * FROM banned_users WHERE user_id = ?", (user_id,)
        ).fetchone()
    return _row(row)


def delete_ban(user_id: str) -> bool:
    with _connect() as conn:
        cursor = conn.execute("DELETE FROM banned_users WHERE user_id = ?", (user_id,))
        conn.execute(
            """
            UPDATE profiles
            SET is_banned = 0, banned_by = NULL, ban_reason = NULL, banned_at = NULL, updated_at = ?
            WHERE id = ?
            """,
            (_now_iso(), user_id),
        )
        return cursor.rowcount > 0


# =====================================================
# BADGES
# =====================================================

def create_badge(
    user_id: str,
    badge_name: str,
    badge_color: str,
    badge_icon: str,
    issued_by: Optional[str]
) -> Dict:
    badge_id = _new_id()

    with _connect() as conn:
        conn.execute(
            """
            INSERT INTO user_badges
            (id, user_id, badge_name, badge_color, badge_icon, issued_by, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (badge_id, user_id, badge_name, badge_color, badge_icon, issued_by, _now_iso()),
        )

    return get_badge(badge_id)


def get_badge(badge_id: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM user_badges WHERE id = ?", (badge_id,)).fetchone()
    return _row(row)


def list_badges(user_id: str) -> List[Dict]:
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM user_badges WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
        ).fetchall()
    return [dict(r) for r in rows]


def delete_badge(badge_id: str) -> bool:
    with _connect() as conn:
        cursor = conn.execute("DELETE FROM user_badges WHERE id = ?", (badge_id,))
        return cursor.rowcount > 0


# =====================================================
# CUSTOM ROLES
# =====================================================

def create_custom_role(
    name: str,
    color: str,
    description: str,
    permissions: Dict,
    created_by: Optional[str]
) -> Dict:
    role_id = _new_id()

    try:
        with _connect() as conn:
            conn.execute(
                """
                INSERT INTO custom_roles
                (id, name, color, description, permissions, created_by, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (role_id, name, color, description, json.dumps(permissions), created_by, _now_iso()),
            )
    except sqlite3.IntegrityError as exc:
        raise ValueError(f"custom role already exists: {name}") from exc

    return get_custom_role(role_id)


def get_custom_role(role_id: str) -> Optional[Dict]:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM custom_roles WHERE id = ?", (role_id,)).fetchone()
    return _custom_role_row(row)


def list_custom_roles() -> List[Dict]:
    with _connect() as conn:
        rows = conn.execute(
            "SELECT * FROM custom_roles ORDER BY created_at DESC, rowid DESC"
        ).fetchall()
    return [_custom_role_row(r) for r in rows]


def delete_custom_role(role_id: str) -> bool:
    with _connect() as conn:
        conn.execute(
            "UPDATE profiles SET custom_role_id = NULL WHERE custom_role_id = ?",
            (role_id,),
        )
        cursor = conn.execute("DELETE FROM custom_roles WHERE id = ?", (role_id,))
        return cursor.rowcount > 0
