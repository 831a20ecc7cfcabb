"""
Membership moderation: roles, bans, badges and custom roles.
"""
