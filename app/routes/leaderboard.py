"""
Leaderboard endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.models.user import LeaderboardEntry
from app.routes.deps import get_current_user
from app.services.leaderboard_service import get_leaderboard_service
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["Leaderboard"])


@router.get("", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: int = Query(50, ge=1, le=200),
    user: Dict = Depends(get_current_user),
):
    """
    Active users ranked by points, highest first.
    """
    try:
        return get_leaderboard_service().get_leaderboard(limit=limit)
    except Exception as e:
        logger.error(f"❌ Failed to build leaderboard: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve leaderboard: {str(e)}"
        )


@router.get("/me", response_model=LeaderboardEntry)
async def get_my_rank(user: Dict = Depends(get_current_user)):
    entry = get_leaderboard_service().get_user_rank(user["id"])
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User is not ranked")
    return entry
