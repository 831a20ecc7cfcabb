"""
CodeVault — Service Errors

Every domain failure raised by the service layer derives from
CodeVaultError and carries the HTTP status the API answers with.
"""


class CodeVaultError(Exception):
    """Base class for expected, user-facing failures."""
    status_code = 400


class ValidationError(CodeVaultError):
    """Raised when request input is missing or malformed."""
    status_code = 400


class AuthenticationError(CodeVaultError):
    """Raised when credentials are wrong or the caller is unknown."""
    status_code = 401


class PermissionDeniedError(CodeVaultError):
    """Raised when the role table or hierarchy forbids an action."""
    status_code = 403


class AccountBannedError(CodeVaultError):
    """Raised when a banned profile tries to sign in or use a session."""
    status_code = 403


class NotFoundError(CodeVaultError):
    status_code = 404


class ConflictError(CodeVaultError):
    status_code = 409
