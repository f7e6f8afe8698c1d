"""
Analytics endpoints for the leaderboard screen and reviewer dashboards.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.models.analytics import CommunityStats, IncidentAnalytics
from app.routes.deps import get_current_user, require_permission
from app.services.analytics_service import get_analytics_service
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/community", response_model=CommunityStats)
async def community_stats(user: Dict = Depends(get_current_user)):
    """Total users, incidents and points across the community."""
    return get_analytics_service().community_stats()


@router.get("/incidents", response_model=IncidentAnalytics)
async def incident_analytics(
    months: int = Query(6, ge=1, le=24, description="Months in the trend, including the current one"),
    user: Dict = Depends(require_permission("view_analytics")),
):
    """
    Status distribution, monthly trend and top locations.
    """
    try:
        return get_analytics_service().incident_analytics(months=months)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Incident analytics failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute analytics: {str(e)}"
        )
