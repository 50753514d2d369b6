"""Account lockout: count failed logins per user and lock after a threshold."""

import logging
from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.orm import Session

from studentms.core.clock import as_utc
from studentms.core.config import get_settings
from studentms.core.errors import AccountLockedError
from studentms.models import User

logger = logging.getLogger(__name__)


def is_locked(user: User, now: datetime) -> bool:
    locked_until = as_utc(user.locked_until)
    return locked_until is not None and locked_until > now


def check_not_locked(user: User, now: datetime) -> None:
    """
    Refuse a login attempt for a locked account before the password is looked at.

    A lapsed lock keeps its counter: only a successful login resets it, so one
    more failure after the lock expires locks the account again.
    """
    if is_locked(user, now):
        raise AccountLockedError()


def record_failed_attempt(session: Session, user: User, now: datetime) -> int:
    """
    Atomically increment the failed-attempt counter; lock when it reaches the limit.

    Returns the post-increment count.
    """
    settings = get_settings()
    attempts = session.execute(
        update(User)
        .where(User.id == user.id)
        .values(failed_login_attempts=User.failed_login_attempts + 1)
        .returning(User.failed_login_attempts)
        .execution_options(synchronize_session=False)
    ).scalar_one()

    if attempts >= settings.LOCKOUT_MAX_ATTEMPTS:
        locked_until = now + timedelta(minutes=settings.LOCKOUT_MINUTES)
        session.execute(
            update(User)
            .where(User.id == user.id)
            .values(locked_until=locked_until)
            .execution_options(synchronize_session=False)
        )
        logger.warning(
            "Account locked after repeated failed logins",
            extra={
                "user_id": user.id,
                "failed_login_attempts": attempts,
                "locked_until": locked_until.isoformat(),
            },
        )
    else:
        logger.warning(
            "Failed login attempt",
            extra={"user_id": user.id, "failed_login_attempts": attempts},
        )
    session.commit()
    session.refresh(user)
    return attempts


def reset_failed_attempts(session: Session, user: User) -> None:
    """Clear the counter and any lock; caller commits."""
    user.failed_login_attempts = 0
    user.locked_until = None
