"""SQLAlchemy ORM models."""

from studentms.models.base import Base
from studentms.models.department import Department
from studentms.models.section import Section
from studentms.models.student import Student
from studentms.models.user import Role, Theme, User

__all__ = ["Base", "Department", "Role", "Section", "Student", "Theme", "User"]
