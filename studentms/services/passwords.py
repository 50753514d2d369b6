"""Password lifecycle: history capture, reuse checks and the change-password flow."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from studentms.core.clock import utcnow
from studentms.core.config import get_settings
from studentms.core.errors import ValidationFailedError
from studentms.core.security import (
    BCRYPT_MAX_BYTES,
    PASSWORD_MIN_LEN,
    hash_password,
    password_too_long,
    verify_password,
)
from studentms.models import User

logger = logging.getLogger(__name__)


def password_in_history(candidate: str, history: list[str] | None) -> bool:
    """True if candidate matches any stored previous hash."""
    for old_hash in history or []:
        if verify_password(candidate, old_hash):
            return True
    return False


def push_password_history(user: User, old_hash: str, now: datetime) -> None:
    """Prepend old_hash to the user's history (no duplicates), keeping the newest N."""
    limit = get_settings().PASSWORD_HISTORY_SIZE
    history = list(user.password_history or [])
    if old_hash not in history:
        history.insert(0, old_hash)
    # Reassign so SQLAlchemy sees the JSON column change.
    user.password_history = history[:limit]
    user.password_changed_at = now


def set_password(user: User, plain_password: str, now: datetime | None = None) -> None:
    """
    Hash and store a new password.

    For an existing account the current hash is captured into history before it
    is overwritten; new accounts start with an empty history. Hashing errors
    propagate to the caller and nothing is written.
    """
    new_hash = hash_password(plain_password)
    if user.password_hash:
        push_password_history(user, user.password_hash, now or utcnow())
    user.password_hash = new_hash


def validate_password_length(password: str, code_prefix: str = "PASSWORD") -> None:
    if len(password) < PASSWORD_MIN_LEN:
        raise ValidationFailedError(
            f"Password must be at least {PASSWORD_MIN_LEN} characters long",
            code=f"{code_prefix}_TOO_SHORT",
        )
    if password_too_long(password):
        raise ValidationFailedError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes long",
            code=f"{code_prefix}_TOO_LONG",
        )


def change_password(
    session: Session,
    user: User,
    current_password: str | None,
    new_password: str | None,
    now: datetime | None = None,
) -> None:
    """
    Self-service password change: verify current, reject reuse, rotate history, persist.

    The current password counts as reused along with everything in history.
    """
    if not current_password or not new_password:
        raise ValidationFailedError(
            "Current password and new password are required",
            code="MISSING_PASSWORDS",
        )
    validate_password_length(new_password)

    if not verify_password(current_password, user.password_hash):
        raise ValidationFailedError(
            "Current password is incorrect", code="INCORRECT_PASSWORD"
        )
    if verify_password(new_password, user.password_hash) or password_in_history(
        new_password, user.password_history
    ):
        raise ValidationFailedError(
            "Cannot reuse a recent password. Please choose a different password.",
            code="PASSWORD_IN_HISTORY",
        )

    set_password(user, new_password, now)
    session.commit()
    logger.info("Password changed", extra={"user_id": user.id})
