"""
CodeVault — Members Module

Member management (roles, bans, badges) and custom role endpoints.

Usage:
    from api.members import members_blueprint
"""

from flask import Blueprint

members_blueprint = Blueprint("members", __name__)

from . import members_routes  # noqa: F401,E402

__all__ = ["members_blueprint"]
