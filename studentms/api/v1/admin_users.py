"""Admin user management: list, inspect, ban/unban, delete, statistics."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_stats_cache, require_admin
from studentms.core.clock import utcnow
from studentms.core.database import get_db
from studentms.schemas.auth import CurrentUser
from studentms.schemas.profile import UserView
from studentms.schemas.users import (
    BanRequest,
    BanResponse,
    BanStatus,
    DeletedUser,
    DeleteResponse,
    Pagination,
    UserDetailResponse,
    UsersListResponse,
    UsersPage,
    UserStatsData,
    UserStatsResponse,
)
from studentms.services.accounts import (
    ban_user,
    delete_user,
    get_user,
    list_users,
    unban_user,
)
from studentms.services.user_stats import StatsCache, compute_user_stats

# Every route here requires an Admin.
router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=UserStatsResponse)
def get_user_stats(
    db: Annotated[Session, Depends(get_db)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
) -> UserStatsResponse:
    """User counts by role and status; cached for STATS_CACHE_TTL_SEC."""
    now = utcnow()
    stats, cached = stats_cache.get_or_compute(now, lambda: compute_user_stats(db, now))
    return UserStatsResponse(data=UserStatsData.model_validate(stats), cached=cached)


@router.get("", response_model=UsersListResponse)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    role: str | None = None,
    search: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> UsersListResponse:
    result = list_users(db, role=role, search=search, page=page, limit=limit)
    return UsersListResponse(
        data=UsersPage(
            users=[UserView.from_user(u) for u in result.users],
            pagination=Pagination(
                page=result.page,
                limit=result.limit,
                total=result.total,
                pages=result.pages,
            ),
        )
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
def get_user_by_id(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> UserDetailResponse:
    return UserDetailResponse(data=UserView.from_user(get_user(db, user_id)))


@router.post("/{user_id}/ban", response_model=BanResponse)
def post_ban(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[CurrentUser, Depends(require_admin)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
    body: BanRequest | None = None,
) -> BanResponse:
    """Ban a user. Admins cannot ban themselves."""
    user = ban_user(db, admin.id, user_id, reason=body.reason if body else None)
    stats_cache.invalidate()
    return BanResponse(message="User banned successfully", data=BanStatus.model_validate(user))


@router.post("/{user_id}/unban", response_model=BanResponse)
def post_unban(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
) -> BanResponse:
    user = unban_user(db, user_id)
    stats_cache.invalidate()
    return BanResponse(message="User unbanned successfully", data=BanStatus.model_validate(user))


@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user_by_id(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[CurrentUser, Depends(require_admin)],
    stats_cache: Annotated[StatsCache, Depends(get_stats_cache)],
) -> DeleteResponse:
    """Permanently delete a user. Admins cannot delete themselves."""
    deleted = delete_user(db, admin.id, user_id)
    stats_cache.invalidate()
    return DeleteResponse(message="User deleted successfully", data=DeletedUser(**deleted))
