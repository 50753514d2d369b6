"""Department routes. Reads need a session; writes need an Admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_current_user, get_dashboard_cache, require_admin
from studentms.core.database import get_db
from studentms.schemas.academics import (
    DepartmentCreate,
    DepartmentListResponse,
    DepartmentResponse,
    DepartmentUpdate,
    DepartmentView,
    SectionListResponse,
    SectionView,
)
from studentms.schemas.base import MessageResponse
from studentms.services.departments import (
    create_department,
    delete_department,
    get_department,
    list_departments,
    list_sections,
    update_department,
)
from studentms.services.user_stats import StatsCache

router = APIRouter()


@router.get("", response_model=DepartmentListResponse, dependencies=[Depends(get_current_user)])
def get_departments(db: Annotated[Session, Depends(get_db)]) -> DepartmentListResponse:
    departments = list_departments(db)
    return DepartmentListResponse(
        count=len(departments),
        data=[DepartmentView.model_validate(d) for d in departments],
    )


@router.get(
    "/{department_id}",
    response_model=DepartmentResponse,
    dependencies=[Depends(get_current_user)],
)
def get_department_by_id(
    department_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> DepartmentResponse:
    return DepartmentResponse(data=DepartmentView.model_validate(get_department(db, department_id)))


@router.get(
    "/{department_id}/sections",
    response_model=SectionListResponse,
    dependencies=[Depends(get_current_user)],
)
def get_department_sections(
    department_id: str,
    db: Annotated[Session, Depends(get_db)],
) -> SectionListResponse:
    sections = list_sections(db, department_id)
    return SectionListResponse(
        count=len(sections),
        data=[SectionView.model_validate(s) for s in sections],
    )


@router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def post_department(
    body: DepartmentCreate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> DepartmentResponse:
    department = create_department(db, body)
    dashboard_cache.invalidate()
    return DepartmentResponse(
        message="Department created successfully",
        data=DepartmentView.model_validate(department),
    )


@router.put(
    "/{department_id}",
    response_model=DepartmentResponse,
    dependencies=[Depends(require_admin)],
)
def put_department(
    department_id: str,
    body: DepartmentUpdate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> DepartmentResponse:
    department = update_department(db, department_id, body)
    dashboard_cache.invalidate()
    return DepartmentResponse(
        message="Department updated successfully",
        data=DepartmentView.model_validate(department),
    )


@router.delete(
    "/{department_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_department_by_id(
    department_id: str,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> MessageResponse:
    """Refused with CONSTRAINT_VIOLATION while students or sections reference the department."""
    delete_department(db, department_id)
    dashboard_cache.invalidate()
    return MessageResponse(message="Department deleted successfully")
