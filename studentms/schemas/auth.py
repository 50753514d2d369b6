"""Request/response schemas for auth endpoints."""

from pydantic import Field

from studentms.schemas.base import ApiModel


class LoginRequest(ApiModel):
    """Credentials for login: email or username, plus password.

    Fields are optional here so missing values surface as MISSING_CREDENTIALS /
    MISSING_PASSWORD rather than a generic validation error.
    """

    email: str | None = Field(default=None, max_length=255)
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=1024)


class RegisterRequest(ApiModel):
    """New account data. role is ignored for self-registration."""

    username: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=1024)
    role: str | None = None


class UserSummary(ApiModel):
    """Identity summary returned by auth endpoints (no secrets)."""

    id: str
    username: str
    email: str
    role: str


class CurrentUser(UserSummary):
    """Authenticated user resolved by the auth gate for dependency injection."""


class AuthResponse(ApiModel):
    success: bool = True
    message: str
    user: UserSummary
