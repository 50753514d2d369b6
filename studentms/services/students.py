"""Student records: create, update, delete, filtered listing and search."""

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studentms.core.errors import (
    DuplicateEntryError,
    NotFoundError,
    ValidationFailedError,
)
from studentms.models import Department, Section, Student
from studentms.services.accounts import EMAIL_PATTERN, MAX_PAGE_SIZE, like_pattern
from studentms.services.profile import CONTACT_PATTERN

if TYPE_CHECKING:
    from studentms.schemas.academics import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = (
    "All fields are required: name, rollNumber, department, section, email, contact"
)


@dataclass
class StudentPage:
    students: list[Student]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def _format_errors(email: str | None, contact: str | None) -> None:
    errors = []
    if email is not None and (len(email) > 255 or not EMAIL_PATTERN.match(email)):
        errors.append({"field": "email", "message": "Please enter a valid email"})
    if contact is not None and not CONTACT_PATTERN.match(contact):
        errors.append({
            "field": "contact",
            "message": "Please enter a valid 10-digit contact number",
        })
    if errors:
        raise ValidationFailedError(", ".join(e["message"] for e in errors), details=errors)


def _check_unique(
    session: Session,
    roll_number: str | None,
    email: str | None,
    exclude_id: str | None = None,
) -> None:
    def taken(condition) -> bool:
        query = select(Student.id).where(condition)
        if exclude_id is not None:
            query = query.where(Student.id != exclude_id)
        return session.scalar(query) is not None

    if roll_number and taken(Student.roll_number == roll_number):
        raise DuplicateEntryError("Roll number already exists", code="DUPLICATE_ROLL_NUMBER")
    if email and taken(Student.email == email):
        raise DuplicateEntryError("Email already exists", code="DUPLICATE_EMAIL")


def _check_placement(session: Session, department_id: str, section_id: str) -> None:
    """The department and section must exist and the section must belong to the department."""
    if session.get(Department, department_id) is None:
        raise ValidationFailedError("Department not found", code="DEPARTMENT_NOT_FOUND")
    section = session.get(Section, section_id)
    if section is None:
        raise ValidationFailedError("Section not found", code="SECTION_NOT_FOUND")
    if section.department_id != department_id:
        raise ValidationFailedError(
            "Section does not belong to the specified department",
            code="SECTION_DEPARTMENT_MISMATCH",
        )


def _commit(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent write for the same roll number or email.
        session.rollback()
        raise DuplicateEntryError("Roll number or email already exists") from e


def get_student(session: Session, student_id: str) -> Student:
    student = session.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found", code="STUDENT_NOT_FOUND")
    return student


def create_student(session: Session, body: "StudentCreate") -> Student:
    name = _clean(body.name)
    roll_number = (_clean(body.roll_number) or "").upper() or None
    email = (_clean(body.email) or "").lower() or None
    contact = _clean(body.contact)
    if not all([name, roll_number, body.department_id, body.section_id, email, contact]):
        raise ValidationFailedError(REQUIRED_FIELDS_MESSAGE, code="MISSING_REQUIRED_FIELDS")

    _format_errors(email, contact)
    _check_unique(session, roll_number, email)
    _check_placement(session, body.department_id, body.section_id)

    student = Student(
        name=name,
        roll_number=roll_number,
        email=email,
        contact=contact,
        department_id=body.department_id,
        section_id=body.section_id,
    )
    session.add(student)
    _commit(session)
    session.refresh(student)
    logger.info("Student created", extra={"student_id": student.id})
    return student


def update_student(session: Session, student_id: str, changes: "StudentUpdate") -> Student:
    """
    Apply the non-empty fields. Whenever the department or section changes, the
    resulting pair is checked so a student never sits in another department's section.
    """
    student = get_student(session, student_id)
    name = _clean(changes.name)
    roll_number = (_clean(changes.roll_number) or "").upper() or None
    email = (_clean(changes.email) or "").lower() or None
    contact = _clean(changes.contact)

    _format_errors(email, contact)
    _check_unique(
        session,
        roll_number if roll_number != student.roll_number else None,
        email if email != student.email else None,
        exclude_id=student.id,
    )
    department_id = changes.department_id or student.department_id
    section_id = changes.section_id or student.section_id
    if (department_id, section_id) != (student.department_id, student.section_id):
        _check_placement(session, department_id, section_id)

    if name:
        student.name = name
    if roll_number:
        student.roll_number = roll_number
    if email:
        student.email = email
    if contact:
        student.contact = contact
    student.department_id = department_id
    student.section_id = section_id
    _commit(session)
    session.refresh(student)
    logger.info("Student updated", extra={"student_id": student.id})
    return student


def delete_student(session: Session, student_id: str) -> None:
    student = get_student(session, student_id)
    session.delete(student)
    session.commit()
    logger.info("Student deleted", extra={"student_id": student_id})


def _page(session: Session, conditions: list, page: int, limit: int) -> StudentPage:
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    total = session.scalar(select(func.count()).select_from(Student).where(*conditions)) or 0
    students = session.scalars(
        select(Student)
        .where(*conditions)
        .order_by(Student.created_at.desc(), Student.roll_number)
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return StudentPage(students=list(students), page=page, limit=limit, total=total)


def list_students(
    session: Session,
    department_id: str | None = None,
    section_id: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> StudentPage:
    """Newest first, optionally filtered by department and/or section."""
    conditions = []
    if department_id:
        conditions.append(Student.department_id == department_id)
    if section_id:
        conditions.append(Student.section_id == section_id)
    return _page(session, conditions, page, limit)


def search_students(
    session: Session,
    query: str | None,
    page: int = 1,
    limit: int = 10,
) -> StudentPage:
    """Case-insensitive substring match on name or roll number."""
    if not query or not query.strip():
        raise ValidationFailedError(
            'Search query parameter "q" is required', code="MISSING_SEARCH_QUERY"
        )
    pattern = like_pattern(query)
    conditions = [
        or_(
            func.lower(Student.name).like(pattern, escape="\\"),
            func.lower(Student.roll_number).like(pattern, escape="\\"),
        )
    ]
    return _page(session, conditions, page, limit)
