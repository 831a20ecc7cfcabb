"""
CodeVault — persistence layer (sqlite3).
"""
