"""Self-service profile, preferences, password and avatar endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_current_user
from studentms.core.database import get_db
from studentms.models import User
from studentms.schemas.auth import CurrentUser
from studentms.schemas.base import MessageResponse
from studentms.schemas.profile import (
    AvatarRequest,
    AvatarResponse,
    ChangePasswordRequest,
    PreferencesResponse,
    PreferencesUpdateRequest,
    PreferencesView,
    ProfileUpdateRequest,
    UserResponse,
    UserView,
)
from studentms.services.accounts import get_user
from studentms.services.passwords import change_password
from studentms.services.profile import set_avatar, update_preferences, update_profile

router = APIRouter()


def _load(db: Session, current_user: CurrentUser) -> User:
    return get_user(db, current_user.id)


@router.get("", response_model=UserResponse)
def get_profile(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse(user=UserView.from_user(_load(db, current_user)))


@router.put("", response_model=UserResponse)
def put_profile(
    body: ProfileUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    user = update_profile(db, _load(db, current_user), body.profile)
    return UserResponse(message="Profile updated successfully", user=UserView.from_user(user))


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PreferencesResponse:
    user = _load(db, current_user)
    return PreferencesResponse(preferences=PreferencesView.model_validate(user))


@router.put("/preferences", response_model=PreferencesResponse)
def put_preferences(
    body: PreferencesUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PreferencesResponse:
    user = update_preferences(db, _load(db, current_user), body.preferences)
    return PreferencesResponse(
        message="Preferences updated successfully",
        preferences=PreferencesView.model_validate(user),
    )


@router.post("/change-password", response_model=MessageResponse)
def post_change_password(
    body: ChangePasswordRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Change the caller's password. Recent passwords cannot be reused."""
    change_password(db, _load(db, current_user), body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post("/upload-avatar", response_model=AvatarResponse)
def post_avatar(
    body: AvatarRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> AvatarResponse:
    user = set_avatar(db, _load(db, current_user), body.profile_picture)
    return AvatarResponse(
        message="Profile picture updated successfully",
        profile_picture=user.profile_picture,
    )
