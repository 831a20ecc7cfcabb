"""
CodeVault — Snippet Service

Handles:
- Visibility (own snippets + public ones; moderators see everything)
- Ownership checks on update / delete
- Title, language and visibility normalization
"""

from typing import Dict, List, Optional

from config.system_loader import get_setting
from core.errors import NotFoundError, PermissionDeniedError, ValidationError
from core.permissions.guards import ensure_permission, is_moderator
from core.snippets.languages import normalize_language
from core.utils.logging_utils import get_component_logger
from database import app_store


# ============================================================
# Logger
# ============================================================

logger = get_component_logger("SnippetService", component="snippets")

MAX_TITLE_LENGTH = 200


# ============================================================
# Normalization
# ============================================================

def _normalize_title(title) -> str:
    if title is None:
        title = ""
    if not isinstance(title, str):
        raise ValidationError("title must be a string")

    title = title.strip() or get_setting("snippets", "default_title", "Untitled")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"title must be at most {MAX_TITLE_LENGTH} characters")
    return title


def _normalize_code(code) -> str:
    if code is None:
        return ""
    if not isinstance(code, str):
        raise ValidationError("code must be a string")
    return code


def _normalize_visibility(value) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("is_public must be a boolean")
    return value


# ============================================================
# Access rules
# ============================================================

def can_view(actor: Dict, snippet: Dict) -> bool:
    return (
        snippet["is_public"]
        or snippet["user_id"] == actor["user_id"]
        or is_moderator(actor)
    )


def can_modify(actor: Dict, snippet: Dict) -> bool:
    return snippet["user_id"] == actor["user_id"] or is_moderator(actor)


def _load_visible(actor: Dict, snippet_id: str) -> Dict:
    snippet = app_store.get_snippet(snippet_id)
    if not snippet or not can_view(actor, snippet):
        raise NotFoundError("snippet not found")
    return snippet


# ============================================================
# Operations
# ============================================================

def list_snippets(
    actor: Dict,
    language: Optional[str] = None,
    search: Optional[str] = None,
    mine: bool = False
) -> List[Dict]:
    ensure_permission(actor, "snippets", "read")

    visible_to = None if is_moderator(actor) else actor["user_id"]
    owner_id = actor["user_id"] if mine else None

    return app_store.list_snippets(
        visible_to=visible_to,
        owner_id=owner_id,
        language=language,
        search=search,
    )


def get_snippet(actor: Dict, snippet_id: str) -> Dict:
    ensure_permission(actor, "snippets", "read")
    return _load_visible(actor, snippet_id)


def create_snippet(actor: Dict, data: Dict) -> Dict:
    ensure_permission(actor, "snippets", "create")

    snippet = app_store.create_snippet(
        user_id=actor["user_id"],
        title=_normalize_title(data.get("title")),
        language=normalize_language(data.get("language")),
        code=_normalize_code(data.get("code")),
        is_public=_normalize_visibility(data.get("is_public", False)),
    )

    logger.info(f"Snippet created: {snippet['id']} by {actor['user_id']}")
    return snippet


def update_snippet(actor: Dict, snippet_id: str, data: Dict) -> Dict:
    ensure_permission(actor, "snippets", "update")

    snippet = _load_visible(actor, snippet_id)
    if not can_modify(actor, snippet):
        logger.warning(f"Update refused on snippet {snippet_id} for {actor['user_id']}")
        raise PermissionDeniedError("only the owner can edit this snippet")

    fields = {}
    if "title" in data:
        fields["title"] = _normalize_title(data["title"])
    if "language" in data:
        fields["language"] = normalize_language(data["language"])
    if "code" in data:
        fields["code"] = _normalize_code(data["code"])
    if "is_public" in data:
        fields["is_public"] = _normalize_visibility(data["is_public"])

    updated = app_store.update_snippet(snippet_id, **fields)
    if not updated:
        raise NotFoundError("snippet not found")

    logger.info(f"Snippet updated: {snippet_id} by {actor['user_id']}")
    return updated


def delete_snippet(actor: Dict, snippet_id: str) -> None:
    ensure_permission(actor, "snippets", "delete")

    snippet = _load_visible(actor, snippet_id)
    if not can_modify(actor, snippet):
        logger.warning(f"Delete refused on snippet {snippet_id} for {actor['user_id']}")
        raise PermissionDeniedError("only the owner can delete this snippet")

    if not app_store.delete_snippet(snippet_id):
        raise NotFoundError("snippet not found")

    logger.info(f"Snippet deleted: {snippet_id} by {actor['user_id']}")
