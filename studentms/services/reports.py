"""Student reports by department, by section, or across the whole institution."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from studentms.models import Student
from studentms.services.departments import get_department, get_section

ALL_DEPARTMENTS = "All Departments"


@dataclass(frozen=True)
class Report:
    students: list[Student]
    department_name: str | None = None
    section_name: str | None = None

    @property
    def total_students(self) -> int:
        return len(self.students)


def _date_conditions(start: date | None, end: date | None) -> list:
    """Creation-date window; both bounds are whole days and inclusive."""
    conditions = []
    if start is not None:
        conditions.append(Student.created_at >= datetime.combine(start, time.min, tzinfo=UTC))
    if end is not None:
        next_day = datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC)
        conditions.append(Student.created_at < next_day)
    return conditions


def _students(session: Session, conditions: list) -> list[Student]:
    return list(
        session.scalars(
            select(Student).where(*conditions).order_by(Student.roll_number)
        ).all()
    )


def department_report(
    session: Session,
    department_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> Report:
    conditions = _date_conditions(start, end)
    department_name = ALL_DEPARTMENTS
    if department_id:
        department_name = get_department(session, department_id).name
        conditions.append(Student.department_id == department_id)
    return Report(students=_students(session, conditions), department_name=department_name)


def section_report(
    session: Session,
    section_id: str | None = None,
    department_id: str | None = None,
    start: date | None = None,
    end: date | None = None,
) -> Report:
    """The department name comes from the section when one is given, else from department_id."""
    conditions = _date_conditions(start, end)
    department_name = section_name = None
    if section_id:
        section = get_section(session, section_id)
        section_name = section.name
        department_name = section.department.name
        conditions.append(Student.section_id == section_id)
    if department_id:
        department = get_department(session, department_id)
        department_name = department_name or department.name
        conditions.append(Student.department_id == department_id)
    return Report(
        students=_students(session, conditions),
        department_name=department_name,
        section_name=section_name,
    )


def complete_report(
    session: Session,
    start: date | None = None,
    end: date | None = None,
) -> Report:
    return Report(students=_students(session, _date_conditions(start, end)))
