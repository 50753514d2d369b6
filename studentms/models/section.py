"""ORM model for sections within a department."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from studentms.core.clock import utcnow
from studentms.models.base import Base
from studentms.models.user import _new_id

DEFAULT_CAPACITY = 60


class Section(Base):
    """
    A named group of students inside one department.

    Section names are unique per department, not globally.
    """

    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint("department_id", "name", name="uq_sections_department_id_name"),
        CheckConstraint("capacity >= 1", name="ck_sections_capacity"),
        CheckConstraint("current_strength >= 0", name="ck_sections_current_strength"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(50), nullable=False)
    department_id = Column(
        String(36),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    capacity = Column(Integer, nullable=False, default=DEFAULT_CAPACITY)
    current_strength = Column(Integer, nullable=False, default=0)

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

    department = relationship("Department", lazy="joined")

    def __repr__(self) -> str:
        return f"<Section name={self.name} department_id={self.department_id}>"
