"""Dashboard statistics: record totals plus per-department and per-section student counts."""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from studentms.models import Department, Role, Section, Student, User


@dataclass(frozen=True)
class Overview:
    total_students: int
    total_departments: int
    total_sections: int
    total_users: int
    total_faculty: int


@dataclass(frozen=True)
class DepartmentCount:
    department_id: str
    department_name: str
    department_code: str
    student_count: int


@dataclass(frozen=True)
class SectionCount:
    section_id: str
    section_name: str
    department_name: str
    capacity: int
    student_count: int


@dataclass(frozen=True)
class DashboardStats:
    overview: Overview
    department_distribution: list[DepartmentCount]
    section_distribution: list[SectionCount]


def _count(session: Session, model, *conditions) -> int:
    return session.scalar(select(func.count()).select_from(model).where(*conditions)) or 0


def compute_dashboard_stats(session: Session) -> DashboardStats:
    """
    Distributions only list departments and sections that have at least one
    student, ordered by department name and then section name.
    """
    overview = Overview(
        total_students=_count(session, Student),
        total_departments=_count(session, Department),
        total_sections=_count(session, Section),
        total_users=_count(session, User),
        total_faculty=_count(session, User, User.role == Role.FACULTY.value),
    )

    by_department = session.execute(
        select(Department.id, Department.name, Department.code, func.count(Student.id))
        .join(Student, Student.department_id == Department.id)
        .group_by(Department.id, Department.name, Department.code)
        .order_by(Department.name)
    ).all()

    by_section = session.execute(
        select(
            Section.id,
            Section.name,
            Department.name,
            Section.capacity,
            func.count(Student.id),
        )
        .join(Student, Student.section_id == Section.id)
        .join(Department, Section.department_id == Department.id)
        .group_by(Section.id, Section.name, Department.name, Section.capacity)
        .order_by(Department.name, Section.name)
    ).all()

    return DashboardStats(
        overview=overview,
        department_distribution=[DepartmentCount(*row) for row in by_department],
        section_distribution=[SectionCount(*row) for row in by_section],
    )
