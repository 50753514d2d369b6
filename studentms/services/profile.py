"""Self-service profile, preferences and avatar updates."""

import re
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from studentms.core.errors import ValidationFailedError
from studentms.models import Theme, User
from studentms.models.user import ITEMS_PER_PAGE_MAX, ITEMS_PER_PAGE_MIN

if TYPE_CHECKING:
    from studentms.schemas.profile import PreferencesUpdate, ProfileUpdate

CONTACT_PATTERN = re.compile(r"^\d{10}$")


def update_profile(session: Session, user: User, changes: "ProfileUpdate") -> User:
    """Merge the supplied (non-null) profile fields into the user."""
    fields = changes.model_dump(exclude_none=True)
    contact = fields.get("contact")
    if contact and not CONTACT_PATTERN.match(contact):
        raise ValidationFailedError("Contact must be 10 digits", code="INVALID_CONTACT")
    for name, value in fields.items():
        setattr(user, name, value.strip() if isinstance(value, str) else value)
    session.commit()
    return user


def update_preferences(session: Session, user: User, changes: "PreferencesUpdate") -> User:
    fields = changes.model_dump(exclude_none=True)
    theme = fields.get("theme")
    if theme is not None and theme not in {t.value for t in Theme}:
        raise ValidationFailedError("Invalid theme value", code="INVALID_THEME")
    items = fields.get("items_per_page")
    if items is not None and not (ITEMS_PER_PAGE_MIN <= items <= ITEMS_PER_PAGE_MAX):
        raise ValidationFailedError(
            f"Items per page must be between {ITEMS_PER_PAGE_MIN} and {ITEMS_PER_PAGE_MAX}",
            code="INVALID_ITEMS_PER_PAGE",
        )
    for name, value in fields.items():
        setattr(user, name, value)
    session.commit()
    return user


def set_avatar(session: Session, user: User, picture: str | None) -> User:
    if not picture or not picture.strip():
        raise ValidationFailedError(
            "Profile picture data is required", code="MISSING_PROFILE_PICTURE"
        )
    user.profile_picture = picture.strip()
    session.commit()
    return user
