"""User statistics for the Admin console, served through a small TTL cache."""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from studentms.models import Role, User

T = TypeVar("T")

RECENT_USERS_DAYS = 7


@dataclass(frozen=True)
class UserStats:
    total_users: int
    total_admins: int
    total_faculty: int
    banned_users: int
    active_users: int
    recent_users: int


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    computed_at: datetime


class StatsCache(Generic[T]):
    """
    Holds one computed value and the time it was computed.

    get_or_compute(now, compute) returns (value, cached). The value is recomputed
    when the cache is empty or at least ``ttl`` has elapsed since computed_at.
    A ttl of zero disables caching.
    """

    def __init__(self, ttl: timedelta) -> None:
        self.ttl = ttl
        self._entry: CacheEntry[T] | None = None
        self._lock = threading.Lock()

    @property
    def entry(self) -> CacheEntry[T] | None:
        return self._entry

    def get_or_compute(self, now: datetime, compute: Callable[[], T]) -> tuple[T, bool]:
        with self._lock:
            entry = self._entry
            if entry is not None and now - entry.computed_at < self.ttl:
                return entry.value, True
            value = compute()
            self._entry = CacheEntry(value=value, computed_at=now)
            return value, False

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None


def compute_user_stats(session: Session, now: datetime) -> UserStats:
    """Count users by role and ban status, plus those created in the last week."""

    def count(*conditions) -> int:
        return session.scalar(select(func.count()).select_from(User).where(*conditions)) or 0

    recent_cutoff = now - timedelta(days=RECENT_USERS_DAYS)
    return UserStats(
        total_users=count(),
        total_admins=count(User.role == Role.ADMIN.value),
        total_faculty=count(User.role == Role.FACULTY.value),
        banned_users=count(User.is_banned.is_(True)),
        active_users=count(User.is_banned.is_(False)),
        recent_users=count(User.created_at >= recent_cutoff),
    )
