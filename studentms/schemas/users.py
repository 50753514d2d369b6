"""Schemas for Admin user management endpoints."""

from datetime import datetime

from pydantic import Field

from studentms.schemas.base import ApiModel
from studentms.schemas.profile import UserView


class BanRequest(ApiModel):
    reason: str | None = Field(default=None, max_length=500)


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    pages: int


class UsersPage(ApiModel):
    users: list[UserView]
    pagination: Pagination


class UsersListResponse(ApiModel):
    """Response for GET /admin/users."""

    success: bool = True
    data: UsersPage


class UserDetailResponse(ApiModel):
    success: bool = True
    data: UserView


class BanStatus(ApiModel):
    id: str
    username: str
    is_banned: bool
    banned_at: datetime | None = None
    ban_reason: str | None = None


class BanResponse(ApiModel):
    success: bool = True
    message: str
    data: BanStatus


class DeletedUser(ApiModel):
    id: str
    username: str


class DeleteResponse(ApiModel):
    success: bool = True
    message: str
    data: DeletedUser


class UserStatsData(ApiModel):
    total_users: int
    total_admins: int
    total_faculty: int
    banned_users: int
    active_users: int
    recent_users: int


class UserStatsResponse(ApiModel):
    success: bool = True
    data: UserStatsData
    cached: bool = False
