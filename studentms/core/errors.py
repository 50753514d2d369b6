"""Domain errors raised by services and the auth gate.

Each error carries a stable machine-readable ``code`` and the HTTP status the
API layer responds with; the handlers in ``studentms.main`` render them as
``{"success": false, "error": {"message", "code", "details"?}}``.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map to a structured error response."""

    status_code: int = 500
    default_code: str = "SERVER_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationFailedError(AppError):
    """Malformed or missing input; the caller can correct and retry."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class DuplicateEntryError(AppError):
    """Unique constraint violated (email or username already taken)."""

    status_code = 400
    default_code = "DUPLICATE_ENTRY"


class AuthenticationError(AppError):
    """Caller is not authenticated; re-authenticating may succeed."""

    status_code = 401
    default_code = "AUTH_ERROR"


class MissingTokenError(AuthenticationError):
    default_code = "MISSING_TOKEN"

    def __init__(self) -> None:
        super().__init__("No token provided")


class TokenExpiredError(AuthenticationError):
    default_code = "TOKEN_EXPIRED"

    def __init__(self) -> None:
        super().__init__("Token has expired")


class TokenInvalidError(AuthenticationError):
    default_code = "INVALID_TOKEN"

    def __init__(self) -> None:
        super().__init__("Invalid token")


class AccountLockedError(AuthenticationError):
    default_code = "ACCOUNT_LOCKED"

    def __init__(self) -> None:
        super().__init__(
            "Account is temporarily locked due to too many failed login attempts. "
            "Please try again later."
        )


class AuthorizationError(AppError):
    """Authenticated, but not allowed to perform the action."""

    status_code = 403
    default_code = "INSUFFICIENT_PERMISSIONS"


class NotFoundError(AppError):
    status_code = 404
    default_code = "NOT_FOUND"
