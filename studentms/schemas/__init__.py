"""Pydantic request/response schemas."""

from studentms.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserSummary,
)
from studentms.schemas.base import ApiModel, HealthResponse, MessageResponse
from studentms.schemas.profile import (
    AvatarRequest,
    AvatarResponse,
    ChangePasswordRequest,
    PreferencesResponse,
    PreferencesUpdate,
    PreferencesUpdateRequest,
    ProfileUpdate,
    ProfileUpdateRequest,
    UserResponse,
    UserView,
)
from studentms.schemas.users import (
    BanRequest,
    BanResponse,
    DeleteResponse,
    UserDetailResponse,
    UsersListResponse,
    UserStatsResponse,
)

__all__ = [
    "ApiModel",
    "AuthResponse",
    "AvatarRequest",
    "AvatarResponse",
    "BanRequest",
    "BanResponse",
    "ChangePasswordRequest",
    "CurrentUser",
    "DeleteResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PreferencesResponse",
    "PreferencesUpdate",
    "PreferencesUpdateRequest",
    "ProfileUpdate",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "UserDetailResponse",
    "UserResponse",
    "UserStatsResponse",
    "UserSummary",
    "UserView",
    "UsersListResponse",
]
