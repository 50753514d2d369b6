"""Student reports for any signed-in user. startDate and endDate filter on creation date."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_current_user
from studentms.core.database import get_db
from studentms.schemas.dashboard import ReportData, ReportResponse, ReportStudent, ReportSummary
from studentms.services.reports import (
    Report,
    complete_report,
    department_report,
    section_report,
)

router = APIRouter(dependencies=[Depends(get_current_user)])

StartDate = Annotated[date | None, Query(alias="startDate")]
EndDate = Annotated[date | None, Query(alias="endDate")]


def _response(report: Report) -> ReportResponse:
    return ReportResponse(
        data=ReportData(
            summary=ReportSummary(
                total_students=report.total_students,
                department_name=report.department_name,
                section_name=report.section_name,
            ),
            students=[ReportStudent.model_validate(s) for s in report.students],
        )
    )


@router.get("/department", response_model=ReportResponse)
def get_department_report(
    db: Annotated[Session, Depends(get_db)],
    start: StartDate = None,
    end: EndDate = None,
    department: str | None = None,
) -> ReportResponse:
    return _response(department_report(db, department, start, end))


@router.get("/section", response_model=ReportResponse)
def get_section_report(
    db: Annotated[Session, Depends(get_db)],
    start: StartDate = None,
    end: EndDate = None,
    section: str | None = None,
    department: str | None = None,
) -> ReportResponse:
    return _response(section_report(db, section, department, start, end))


@router.get("/complete", response_model=ReportResponse)
def get_complete_report(
    db: Annotated[Session, Depends(get_db)],
    start: StartDate = None,
    end: EndDate = None,
) -> ReportResponse:
    return _response(complete_report(db, start, end))
