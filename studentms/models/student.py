"""ORM model for student records."""

from sqlalchemy import Column, DateTime, ForeignKey, String, func
from sqlalchemy.orm import relationship

from studentms.core.clock import utcnow
from studentms.models.base import Base
from studentms.models.user import _new_id


class Student(Base):
    """
    Student record. roll_number is stored upper-cased and email lower-cased,
    so both unique indexes are case-insensitive. contact is ten digits.
    """

    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    roll_number = Column(String(30), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    contact = Column(String(10), nullable=False)
    department_id = Column(
        String(36),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    section_id = Column(
        String(36),
        ForeignKey("sections.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

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

    department = relationship("Department", lazy="joined")
    section = relationship("Section", lazy="joined")

    def __repr__(self) -> str:
        return f"<Student roll_number={self.roll_number}>"
