"""ORM model for user accounts (credentials, RBAC, profile, preferences, security state)."""

import uuid
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB

from studentms.core.clock import utcnow
from studentms.models.base import Base


class Role(str, Enum):
    """Roles checked by the access control gate."""

    ADMIN = "Admin"
    FACULTY = "Faculty"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


ITEMS_PER_PAGE_MIN = 5
ITEMS_PER_PAGE_MAX = 100


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for cookie/JWT authentication and role-based access control.

    role: 'Admin' or 'Faculty'. email is stored lower-cased so the unique index
    is case-insensitive. password_history holds up to five previous bcrypt
    hashes, most recent first.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('Admin', 'Faculty')", name="ck_users_role"),
        CheckConstraint(
            f"items_per_page BETWEEN {ITEMS_PER_PAGE_MIN} AND {ITEMS_PER_PAGE_MAX}",
            name="ck_users_items_per_page",
        ),
        CheckConstraint("failed_login_attempts >= 0", name="ck_users_failed_login_attempts"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=Role.FACULTY.value)

    # Profile
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    contact = Column(String(10), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    address = Column(String(500), nullable=True)
    profile_picture = Column(Text, nullable=True)

    # Preferences
    theme = Column(String(8), nullable=False, default=Theme.LIGHT.value)
    language = Column(String(16), nullable=False, default="en")
    date_format = Column(String(16), nullable=False, default="MM/DD/YYYY")
    items_per_page = Column(Integer, nullable=False, default=10)
    email_notifications = Column(Boolean, nullable=False, default=True)

    # Security
    password_changed_at = Column(DateTime(timezone=True), nullable=True)
    password_history = Column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=list,
    )
    failed_login_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime(timezone=True), nullable=True)
    two_factor_enabled = Column(Boolean, nullable=False, default=False)
    two_factor_secret = Column(String(255), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Ban record
    is_banned = Column(Boolean, nullable=False, default=False, index=True)
    banned_at = Column(DateTime(timezone=True), nullable=True)
    banned_by = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    ban_reason = Column(String(500), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User username={self.username} role={self.role}>"
