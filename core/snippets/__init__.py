"""
Snippet storage rules and language labels.
"""
