"""Section routes. Reads need a session; writes need an Admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_current_user, get_dashboard_cache, require_admin
from studentms.core.database import get_db
from studentms.schemas.academics import (
    SectionCreate,
    SectionListResponse,
    SectionResponse,
    SectionUpdate,
    SectionView,
)
from studentms.schemas.base import MessageResponse
from studentms.services.departments import (
    create_section,
    delete_section,
    list_sections,
    update_section,
)
from studentms.services.user_stats import StatsCache

router = APIRouter()


@router.get("", response_model=SectionListResponse, dependencies=[Depends(get_current_user)])
def get_sections(db: Annotated[Session, Depends(get_db)]) -> SectionListResponse:
    sections = list_sections(db)
    return SectionListResponse(
        count=len(sections),
        data=[SectionView.model_validate(s) for s in sections],
    )


@router.post(
    "",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def post_section(
    body: SectionCreate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> SectionResponse:
    section = create_section(db, body)
    dashboard_cache.invalidate()
    return SectionResponse(
        message="Section created successfully",
        data=SectionView.model_validate(section),
    )


@router.put("/{section_id}", response_model=SectionResponse, dependencies=[Depends(require_admin)])
def put_section(
    section_id: str,
    body: SectionUpdate,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> SectionResponse:
    section = update_section(db, section_id, body)
    dashboard_cache.invalidate()
    return SectionResponse(
        message="Section updated successfully",
        data=SectionView.model_validate(section),
    )


@router.delete(
    "/{section_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_section_by_id(
    section_id: str,
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> MessageResponse:
    delete_section(db, section_id)
    dashboard_cache.invalidate()
    return MessageResponse(message="Section deleted successfully")
