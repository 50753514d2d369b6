"""Schemas for departments, sections and students.

References to other records travel as ``department`` and ``section`` ids on
the way in and as small nested objects on the way out.
"""

from datetime import datetime

from pydantic import Field

from studentms.schemas.base import ApiModel
from studentms.schemas.users import Pagination


class DepartmentCreate(ApiModel):
    name: str | None = Field(default=None, max_length=100)
    code: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=1000)


class DepartmentUpdate(DepartmentCreate):
    pass


class DepartmentRef(ApiModel):
    id: str
    name: str
    code: str


class DepartmentView(DepartmentRef):
    description: str | None = None
    created_at: datetime
    updated_at: datetime


class DepartmentResponse(ApiModel):
    success: bool = True
    message: str | None = None
    data: DepartmentView


class DepartmentListResponse(ApiModel):
    success: bool = True
    count: int
    data: list[DepartmentView]


class SectionCreate(ApiModel):
    name: str | None = Field(default=None, max_length=50)
    department_id: str | None = Field(default=None, alias="department")
    capacity: int | None = None


class SectionUpdate(SectionCreate):
    current_strength: int | None = None


class SectionRef(ApiModel):
    id: str
    name: str


class SectionView(SectionRef):
    department: DepartmentRef
    capacity: int
    current_strength: int
    created_at: datetime
    updated_at: datetime


class SectionResponse(ApiModel):
    success: bool = True
    message: str | None = None
    data: SectionView


class SectionListResponse(ApiModel):
    success: bool = True
    count: int
    data: list[SectionView]


class StudentCreate(ApiModel):
    # Format checks happen in the service so they share the error envelope codes.
    name: str | None = Field(default=None, max_length=100)
    roll_number: str | None = Field(default=None, max_length=30)
    department_id: str | None = Field(default=None, alias="department")
    section_id: str | None = Field(default=None, alias="section")
    email: str | None = Field(default=None, max_length=255)
    contact: str | None = None


class StudentUpdate(StudentCreate):
    pass


class StudentView(ApiModel):
    id: str
    name: str
    roll_number: str
    email: str
    contact: str
    department: DepartmentRef
    section: SectionRef
    created_at: datetime
    updated_at: datetime


class StudentResponse(ApiModel):
    success: bool = True
    message: str | None = None
    data: StudentView


class StudentsListResponse(ApiModel):
    """Response for GET /students and GET /students/search."""

    success: bool = True
    data: list[StudentView]
    pagination: Pagination
