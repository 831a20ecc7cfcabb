"""
Application API routes.

Includes:
- health
- languages (picker search / starter text)
- snippets CRUD (JWT protected, permission checked)
"""

from flask import g, jsonify, request

from api.auth.middleware import require_permission
from config.system_loader import get_setting
from core.snippets import snippet_service
from core.snippets.languages import placeholder_for, search_languages


def _flag(value) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


def register_routes(app):

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "service": get_setting("service", "name", "CodeVault API")
        })

    # --------------------------------------------------------
    # Languages
    # --------------------------------------------------------

    @app.route("/languages", methods=["GET"])
    def languages():
        query = request.args.get("q", "")
        return jsonify({"query": query, "languages": search_languages(query)})

    @app.route("/languages/placeholder", methods=["GET"])
    def language_placeholder():
        language = request.args.get("language", "")
        return jsonify({"language": language, "placeholder": placeholder_for(language)})

    # --------------------------------------------------------
    # Snippets
    # --------------------------------------------------------

    @app.route("/snippets", methods=["GET"])
    @require_permission("snippets", "read")
    def list_snippets():
        snippets = snippet_service.list_snippets(
            g.user,
            language=request.args.get("language"),
            search=request.args.get("q"),
            mine=_flag(request.args.get("mine")),
        )
        return jsonify({"count": len(snippets), "snippets": snippets})

    @app.route("/snippets", methods=["POST"])
    @require_permission("snippets", "create")
    def create_snippet():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object body required"}), 400

        snippet = snippet_service.create_snippet(g.user, data)
        return jsonify({"snippet": snippet}), 201

    @app.route("/snippets/<snippet_id>", methods=["GET"])
    @require_permission("snippets", "read")
    def get_snippet(snippet_id: str):
        return jsonify({"snippet": snippet_service.get_snippet(g.user, snippet_id)})

    @app.route("/snippets/<snippet_id>", methods=["PUT", "PATCH"])
    @require_permission("snippets", "update")
    def update_snippet(snippet_id: str):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "JSON object body required"}), 400

        snippet = snippet_service.update_snippet(g.user, snippet_id, data)
        return jsonify({"snippet": snippet})

    @app.route("/snippets/<snippet_id>", methods=["DELETE"])
    @require_permission("snippets", "delete")
    def delete_snippet(snippet_id: str):
        snippet_service.delete_snippet(g.user, snippet_id)
        return jsonify({"status": "deleted", "snippet_id": snippet_id})
