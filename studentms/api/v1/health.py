"""Liveness and database reachability check for load balancers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from studentms import __version__
from studentms.core.config import get_settings
from studentms.core.database import get_db, ping
from studentms.schemas.base import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> HealthResponse:
    """503 with status "degraded" while the user store is unreachable."""
    if ping(db):
        return HealthResponse(
            status="ok",
            environment=get_settings().APP_ENV,
            database="connected",
            version=__version__,
        )
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(
        status="degraded",
        environment=get_settings().APP_ENV,
        database="disconnected",
        version=__version__,
    )
