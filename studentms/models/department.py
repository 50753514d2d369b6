"""ORM model for academic departments."""

from sqlalchemy import Column, DateTime, String, Text, func

from studentms.core.clock import utcnow
from studentms.models.base import Base
from studentms.models.user import _new_id


class Department(Base):
    """A department owns sections and students. code is stored upper-cased."""

    __tablename__ = "departments"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False, unique=True, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Department code={self.code}>"
