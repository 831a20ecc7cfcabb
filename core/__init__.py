"""
Core package for CodeVault.

This package contains the domain logic behind the API:
- Role permissions & hierarchy
- Snippet storage rules & language labels
- Membership moderation (roles, bans, badges, custom roles)
"""
