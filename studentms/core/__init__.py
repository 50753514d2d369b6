"""Core configuration, database, security and error types."""

from studentms.core.config import get_settings, settings
from studentms.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
