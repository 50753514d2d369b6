"""Schemas for self-service profile, preferences and the full user view."""

from datetime import date, datetime

from pydantic import Field

from studentms.models import User
from studentms.schemas.base import ApiModel


class ProfileUpdate(ApiModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    contact: str | None = None
    date_of_birth: date | None = None
    address: str | None = Field(default=None, max_length=500)


class ProfileUpdateRequest(ApiModel):
    profile: ProfileUpdate = Field(default_factory=ProfileUpdate)


class PreferencesUpdate(ApiModel):
    # Range and enum checks happen in the service so they get their own error codes.
    theme: str | None = None
    language: str | None = Field(default=None, max_length=16)
    date_format: str | None = Field(default=None, max_length=16)
    items_per_page: int | None = None
    email_notifications: bool | None = None


class PreferencesUpdateRequest(ApiModel):
    preferences: PreferencesUpdate = Field(default_factory=PreferencesUpdate)


class ChangePasswordRequest(ApiModel):
    current_password: str | None = Field(default=None, max_length=1024)
    new_password: str | None = Field(default=None, max_length=1024)


class AvatarRequest(ApiModel):
    profile_picture: str | None = None


class ProfileView(ApiModel):
    first_name: str | None = None
    last_name: str | None = None
    contact: str | None = None
    profile_picture: str | None = None
    date_of_birth: date | None = None
    address: str | None = None


class PreferencesView(ApiModel):
    theme: str
    language: str
    date_format: str
    items_per_page: int
    email_notifications: bool


class SecurityView(ApiModel):
    """Security metadata safe to expose: no history hashes, no 2FA secret."""

    password_changed_at: datetime | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    two_factor_enabled: bool = False


class UserView(ApiModel):
    """Full account view for the owner or an Admin."""

    id: str
    username: str
    email: str
    role: str
    profile: ProfileView
    preferences: PreferencesView
    security: SecurityView
    last_login: datetime | None = None
    is_banned: bool = False
    banned_at: datetime | None = None
    banned_by: str | None = None
    ban_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            profile=ProfileView.model_validate(user),
            preferences=PreferencesView.model_validate(user),
            security=SecurityView.model_validate(user),
            last_login=user.last_login,
            is_banned=user.is_banned,
            banned_at=user.banned_at,
            banned_by=user.banned_by,
            ban_reason=user.ban_reason,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserResponse(ApiModel):
    success: bool = True
    message: str | None = None
    user: UserView


class PreferencesResponse(ApiModel):
    success: bool = True
    message: str | None = None
    preferences: PreferencesView


class AvatarResponse(ApiModel):
    success: bool = True
    message: str
    profile_picture: str
