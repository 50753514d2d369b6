"""Account operations: registration, login, and Admin user management."""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studentms.core.clock import utcnow
from studentms.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntryError,
    NotFoundError,
    ValidationFailedError,
)
from studentms.core.security import (
    BCRYPT_MAX_BYTES,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    password_too_long,
    verify_password,
)
from studentms.models import Role, User
from studentms.services.lockout import (
    check_not_locked,
    record_failed_attempt,
    reset_failed_attempts,
)
from studentms.services.passwords import set_password

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")

DEFAULT_BAN_REASON = "No reason provided"
MAX_PAGE_SIZE = 100


@lru_cache
def _dummy_password_hash() -> str:
    # Verified against when the identity is unknown so both failure paths cost one bcrypt check.
    return hash_password("unknown-identity-placeholder")


def like_pattern(text: str) -> str:
    """Case-folded substring LIKE pattern with % _ and the escape character taken literally."""
    escaped = (
        text.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


@dataclass
class UserPage:
    users: list[User]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _identity_errors(username: str, email: str, password: str, role: str) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        errors.append({
            "field": "username",
            "message": f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters",
        })
    elif not USERNAME_PATTERN.match(username):
        errors.append({
            "field": "username",
            "message": "Username can only contain letters, numbers, and underscores",
        })
    if len(email) > 255 or not EMAIL_PATTERN.match(email):
        errors.append({"field": "email", "message": "Please enter a valid email"})
    if len(password) < PASSWORD_MIN_LEN:
        errors.append({
            "field": "password",
            "message": f"Password must be at least {PASSWORD_MIN_LEN} characters long",
        })
    elif password_too_long(password):
        errors.append({
            "field": "password",
            "message": f"Password must be at most {BCRYPT_MAX_BYTES} bytes long",
        })
    if role not in {r.value for r in Role}:
        errors.append({"field": "role", "message": "Role must be either Admin or Faculty"})
    return errors


def register_user(
    session: Session,
    username: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
    *,
    self_service: bool,
) -> User:
    """
    Create an account. Self-service registration always yields a Faculty account;
    Admin-created accounts may choose the role (Faculty by default).
    """
    if not username or not email or not password:
        raise ValidationFailedError(
            "Username, email, and password are required",
            code="MISSING_REQUIRED_FIELDS",
        )
    username = username.strip()
    email = normalize_email(email)
    if self_service:
        role = Role.FACULTY.value
    else:
        role = role or Role.FACULTY.value

    errors = _identity_errors(username, email, password, role)
    if errors:
        raise ValidationFailedError(
            ", ".join(e["message"] for e in errors), details=errors
        )

    if session.scalar(select(User.id).where(User.email == email)) is not None:
        raise DuplicateEntryError(
            "User with this email already exists", code="DUPLICATE_EMAIL"
        )
    if session.scalar(select(User.id).where(User.username == username)) is not None:
        raise DuplicateEntryError(
            "User with this username already exists", code="DUPLICATE_USERNAME"
        )

    user = User(username=username, email=email, role=role, password_history=[])
    set_password(user, password)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent registration for the same key.
        session.rollback()
        raise DuplicateEntryError("Username or email already exists") from e
    session.refresh(user)
    logger.info(
        "User registered",
        extra={"user_id": user.id, "role": user.role, "self_service": self_service},
    )
    return user


def authenticate(
    session: Session,
    email: str | None,
    username: str | None,
    password: str | None,
    now: datetime | None = None,
) -> User:
    """
    Verify credentials with lockout.

    Unknown identity and wrong password produce the same INVALID_CREDENTIALS error.
    """
    if not email and not username:
        raise ValidationFailedError(
            "Email or username is required", code="MISSING_CREDENTIALS"
        )
    if not password:
        raise ValidationFailedError("Password is required", code="MISSING_PASSWORD")
    now = now or utcnow()

    if email:
        query = select(User).where(User.email == normalize_email(email))
    else:
        query = select(User).where(User.username == username.strip())
    user = session.scalar(query)
    if user is None:
        verify_password(password, _dummy_password_hash())
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

    check_not_locked(user, now)

    if not verify_password(password, user.password_hash):
        record_failed_attempt(session, user, now)
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

    reset_failed_attempts(session, user)
    if user.is_banned:
        session.commit()
        raise AuthorizationError("Account has been banned", code="ACCOUNT_BANNED")
    user.last_login = now
    session.commit()
    logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
    return user


def get_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user


def list_users(
    session: Session,
    role: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> UserPage:
    """Filter by role, search username/email/name (case-insensitive), newest first."""
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    conditions = []
    if role in {r.value for r in Role}:
        conditions.append(User.role == role)
    if search and search.strip():
        pattern = like_pattern(search)
        conditions.append(
            or_(
                func.lower(User.username).like(pattern, escape="\\"),
                func.lower(User.email).like(pattern, escape="\\"),
                func.lower(User.first_name).like(pattern, escape="\\"),
                func.lower(User.last_name).like(pattern, escape="\\"),
            )
        )

    total = session.scalar(select(func.count()).select_from(User).where(*conditions)) or 0
    users = session.scalars(
        select(User)
        .where(*conditions)
        .order_by(User.created_at.desc(), User.username)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return UserPage(users=list(users), page=page, limit=limit, total=total)


def ban_user(
    session: Session,
    actor_id: str,
    target_id: str,
    reason: str | None = None,
    now: datetime | None = None,
) -> User:
    if target_id == actor_id:
        raise ValidationFailedError("You cannot ban yourself", code="CANNOT_BAN_SELF")
    user = get_user(session, target_id)
    if user.is_banned:
        raise ValidationFailedError("User is already banned", code="USER_ALREADY_BANNED")

    user.is_banned = True
    user.banned_at = now or utcnow()
    user.banned_by = actor_id
    user.ban_reason = (reason or "").strip() or DEFAULT_BAN_REASON
    session.commit()
    logger.info("User banned", extra={"user_id": user.id, "banned_by": actor_id})
    return user


def unban_user(session: Session, target_id: str) -> User:
    user = get_user(session, target_id)
    if not user.is_banned:
        raise ValidationFailedError("User is not banned", code="USER_NOT_BANNED")

    user.is_banned = False
    user.banned_at = None
    user.banned_by = None
    user.ban_reason = None
    session.commit()
    logger.info("User unbanned", extra={"user_id": user.id})
    return user


def delete_user(session: Session, actor_id: str, target_id: str) -> dict[str, str]:
    """Hard-delete an account. Returns the id and username it had."""
    if target_id == actor_id:
        raise ValidationFailedError("You cannot delete yourself", code="CANNOT_DELETE_SELF")
    user = get_user(session, target_id)
    deleted = {"id": user.id, "username": user.username}
    session.delete(user)
    session.commit()
    logger.info("User deleted", extra={"user_id": target_id, "deleted_by": actor_id})
    return deleted
