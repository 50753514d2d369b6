"""Department and section management. Deletes are refused while records still reference the row."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studentms.core.errors import DuplicateEntryError, NotFoundError, ValidationFailedError
from studentms.models import Department, Section, Student
from studentms.models.section import DEFAULT_CAPACITY

if TYPE_CHECKING:
    from studentms.schemas.academics import (
        DepartmentCreate,
        DepartmentUpdate,
        SectionCreate,
        SectionUpdate,
    )

logger = logging.getLogger(__name__)

SECTION_EXISTS = "Section name already exists in this department"


def _count(session: Session, *conditions) -> int:
    return session.scalar(select(func.count()).select_from(Student).where(*conditions)) or 0


def _constraint_violation(kind: str, dependants: str, count: int, key: str) -> ValidationFailedError:
    return ValidationFailedError(
        f"Cannot delete {kind}. {count} {dependants}(s) are associated with this {kind}",
        code="CONSTRAINT_VIOLATION",
        details={key: count},
    )


def list_departments(session: Session) -> list[Department]:
    return list(session.scalars(select(Department).order_by(Department.name)).all())


def get_department(session: Session, department_id: str) -> Department:
    department = session.get(Department, department_id)
    if department is None:
        raise NotFoundError("Department not found")
    return department


def _check_department_unique(
    session: Session,
    name: str | None,
    code: str | None,
    exclude_id: str | None = None,
) -> None:
    candidates = []
    if name:
        candidates.append(Department.name == name)
    if code:
        candidates.append(Department.code == code)
    if not candidates:
        return
    query = select(Department).where(or_(*candidates))
    if exclude_id is not None:
        query = query.where(Department.id != exclude_id)
    existing = session.scalars(query).first()
    if existing is not None:
        what = "name" if existing.name == name else "code"
        raise DuplicateEntryError(f"Department {what} already exists")


def _commit_unique(session: Session, message: str) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent write for the same key.
        session.rollback()
        raise DuplicateEntryError(message) from e


def create_department(session: Session, body: "DepartmentCreate") -> Department:
    name = (body.name or "").strip()
    code = (body.code or "").strip().upper()
    if not name or not code:
        raise ValidationFailedError("Name and code are required")
    _check_department_unique(session, name, code)

    description = body.description.strip() if body.description else None
    department = Department(name=name, code=code, description=description)
    session.add(department)
    _commit_unique(session, "Department name or code already exists")
    session.refresh(department)
    logger.info("Department created", extra={"department_id": department.id, "code": code})
    return department


def update_department(session: Session, department_id: str, changes: "DepartmentUpdate") -> Department:
    """Apply the non-empty name/code and any supplied description (null clears it)."""
    department = get_department(session, department_id)
    name = (changes.name or "").strip() or None
    code = (changes.code or "").strip().upper() or None
    _check_department_unique(session, name, code, exclude_id=department.id)

    if name:
        department.name = name
    if code:
        department.code = code
    if "description" in changes.model_fields_set:
        department.description = changes.description.strip() if changes.description else None
    _commit_unique(session, "Department name or code already exists")
    return department


def delete_department(session: Session, department_id: str) -> None:
    department = get_department(session, department_id)
    student_count = _count(session, Student.department_id == department.id)
    if student_count:
        raise _constraint_violation("department", "student", student_count, "studentCount")
    section_count = session.scalar(
        select(func.count()).select_from(Section).where(Section.department_id == department.id)
    ) or 0
    if section_count:
        raise _constraint_violation("department", "section", section_count, "sectionCount")

    session.delete(department)
    session.commit()
    logger.info("Department deleted", extra={"department_id": department_id})


def list_sections(session: Session, department_id: str | None = None) -> list[Section]:
    """Sections ordered by name; restricted to one (existing) department when given."""
    query = select(Section).order_by(Section.name)
    if department_id is not None:
        get_department(session, department_id)
        query = query.where(Section.department_id == department_id)
    return list(session.scalars(query).all())


def get_section(session: Session, section_id: str) -> Section:
    section = session.get(Section, section_id)
    if section is None:
        raise NotFoundError("Section not found")
    return section


def _check_section_numbers(capacity: int | None, current_strength: int | None) -> None:
    errors = []
    if capacity is not None and capacity < 1:
        errors.append({"field": "capacity", "message": "Capacity must be at least 1"})
    if current_strength is not None and current_strength < 0:
        errors.append({"field": "currentStrength", "message": "Current strength cannot be negative"})
    if errors:
        raise ValidationFailedError(", ".join(e["message"] for e in errors), details=errors)


def _section_name_taken(
    session: Session,
    department_id: str,
    name: str,
    exclude_id: str | None = None,
) -> bool:
    query = select(Section.id).where(Section.department_id == department_id, Section.name == name)
    if exclude_id is not None:
        query = query.where(Section.id != exclude_id)
    return session.scalar(query) is not None


def create_section(session: Session, body: "SectionCreate") -> Section:
    name = (body.name or "").strip()
    if not name or not body.department_id:
        raise ValidationFailedError("Name and department are required")
    capacity = body.capacity or DEFAULT_CAPACITY
    _check_section_numbers(capacity, None)
    department = get_department(session, body.department_id)
    if _section_name_taken(session, department.id, name):
        raise DuplicateEntryError(SECTION_EXISTS)

    section = Section(name=name, department_id=department.id, capacity=capacity, current_strength=0)
    session.add(section)
    _commit_unique(session, SECTION_EXISTS)
    session.refresh(section)
    logger.info("Section created", extra={"section_id": section.id, "department_id": department.id})
    return section


def update_section(session: Session, section_id: str, changes: "SectionUpdate") -> Section:
    section = get_section(session, section_id)
    name = (changes.name or "").strip() or None
    _check_section_numbers(changes.capacity, changes.current_strength)
    if changes.department_id and changes.department_id != section.department_id:
        get_department(session, changes.department_id)

    department_id = changes.department_id or section.department_id
    if (name or changes.department_id) and _section_name_taken(
        session, department_id, name or section.name, exclude_id=section.id
    ):
        raise DuplicateEntryError(SECTION_EXISTS)

    if name:
        section.name = name
    section.department_id = department_id
    if changes.capacity is not None:
        section.capacity = changes.capacity
    if changes.current_strength is not None:
        section.current_strength = changes.current_strength
    _commit_unique(session, SECTION_EXISTS)
    session.refresh(section)
    return section


def delete_section(session: Session, section_id: str) -> None:
    section = get_section(session, section_id)
    student_count = _count(session, Student.section_id == section.id)
    if student_count:
        raise _constraint_violation("section", "student", student_count, "studentCount")

    session.delete(section)
    session.commit()
    logger.info("Section deleted", extra={"section_id": section_id})
