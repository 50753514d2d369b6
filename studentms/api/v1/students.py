"""Student routes. Any session may read; Admin or Faculty may add; only an Admin may edit or delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from studentms.api.v1.auth import (
    get_current_user,
    get_dashboard_cache,
    require_admin,
    require_roles,
)
from studentms.core.database import get_db
from studentms.models import Role
from studentms.schemas.academics import (
    StudentCreate,
    StudentResponse,
    StudentsListResponse,
    StudentUpdate,
    StudentView,
)
from studentms.schemas.base import MessageResponse
from studentms.schemas.users import Pagination
from studentms.services.students import (
    StudentPage,
    create_student,
    delete_student,
    get_student,
    list_students,
    search_students,
    update_student,
)
from studentms.services.user_stats import StatsCache

router = APIRouter()

require_staff = require_roles(Role.ADMIN, Role.FACULTY)


def _list_response(result: StudentPage) -> StudentsListResponse:
    return StudentsListResponse(
        data=[StudentView.model_validate(s) for s in result.students],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


# Declared before /{student_id} so "search" is not taken for an id.
@router.get("/search", response_model=StudentsListResponse, dependencies=[Depends(get_current_user)])
def get_search(
    db: Annotated[Session, Depends(get_db)],
    q: str | None = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> StudentsListResponse:
    return _list_response(search_students(db, q, page=page, limit=limit))


@router.get("", response_model=StudentsListResponse, dependencies=[Depends(get_current_user)])
def get_students(
    db: Annotated[Session, Depends(get_db)],
    department: str | None = None,
    section: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> StudentsListResponse:
    result = list_students(
        db, department_id=department, section_id=section, page=page, limit=limit
    )
    return _list_response(result)


@router.get(
    "/{student_id}",
    response_model=StudentResponse,
    dependencies=[Depends(get_current_user)],
)
def get_student_by_id(
    student_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> StudentResponse:
    return StudentResponse(data=StudentView.model_validate(get_student(db, student_id)))


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_staff)],
)
def post_student(
    body: StudentCreate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> StudentResponse:
    student = create_student(db, body)
    dashboard_cache.invalidate()
    return StudentResponse(
        message="Student added successfully",
        data=StudentView.model_validate(student),
    )


@router.put("/{student_id}", response_model=StudentResponse, dependencies=[Depends(require_admin)])
def put_student(
    student_id: str,
    body: StudentUpdate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> StudentResponse:
    student = update_student(db, student_id, body)
    dashboard_cache.invalidate()
    return StudentResponse(
        message="Student updated successfully",
        data=StudentView.model_validate(student),
    )


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_student_by_id(
    student_id: str,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> MessageResponse:
    delete_student(db, student_id)
    dashboard_cache.invalidate()
    return MessageResponse(message="Student deleted successfully")
