"""Dashboard statistics for any signed-in user."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from studentms.api.v1.auth import get_current_user, get_dashboard_cache
from studentms.core.clock import utcnow
from studentms.core.database import get_db
from studentms.schemas.dashboard import DashboardStatsData, DashboardStatsResponse
from studentms.services.dashboard import compute_dashboard_stats
from studentms.services.user_stats import StatsCache

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    db: Annotated[Session, Depends(get_db)],
    dashboard_cache: Annotated[StatsCache, Depends(get_dashboard_cache)],
) -> DashboardStatsResponse:
    """Totals and distributions; cached for STATS_CACHE_TTL_SEC or until a record changes."""
    stats, cached = dashboard_cache.get_or_compute(utcnow(), lambda: compute_dashboard_stats(db))
    return DashboardStatsResponse(data=DashboardStatsData.model_validate(stats), cached=cached)
