"""Schemas for dashboard statistics and student reports."""

from studentms.schemas.academics import DepartmentRef, SectionRef
from studentms.schemas.base import ApiModel


class DashboardOverview(ApiModel):
    total_students: int
    total_departments: int
    total_sections: int
    total_users: int
    total_faculty: int


class DepartmentCountView(ApiModel):
    department_id: str
    department_name: str
    department_code: str
    student_count: int


class SectionCountView(ApiModel):
    section_id: str
    section_name: str
    department_name: str
    capacity: int
    student_count: int


class DashboardStatsData(ApiModel):
    overview: DashboardOverview
    department_distribution: list[DepartmentCountView]
    section_distribution: list[SectionCountView]


class DashboardStatsResponse(ApiModel):
    success: bool = True
    data: DashboardStatsData
    cached: bool = False


class ReportStudent(ApiModel):
    id: str
    name: str
    roll_number: str
    email: str
    contact: str
    department: DepartmentRef
    section: SectionRef


class ReportSummary(ApiModel):
    total_students: int
    department_name: str | None = None
    section_name: str | None = None


class ReportData(ApiModel):
    summary: ReportSummary
    students: list[ReportStudent]


class ReportResponse(ApiModel):
    success: bool = True
    data: ReportData
