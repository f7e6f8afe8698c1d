"""
Profile endpoints for the signed-in user.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.models.user import ProfileUpdate, UserResponse, ActivityEntry, BadgeProgress
from app.routes.deps import get_current_user
from app.services import gamification
from app.services.user_service import get_user_service, public_user
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_profile(user: Dict = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserResponse)
async def update_profile(updates: ProfileUpdate, user: Dict = Depends(get_current_user)):
    """
    Update name, phone number, profile image, location or preferences.
    """
    try:
        return public_user(get_user_service().update_profile(user["id"], updates))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Profile update failed for {user['id']}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Profile update failed: {str(e)}"
        )


@router.get("/me/activity", response_model=List[ActivityEntry])
async def get_activity(
    limit: int = Query(20, ge=1, le=100),
    user: Dict = Depends(get_current_user),
):
    """Points history, newest first."""
    return get_user_service().list_activity(user["id"], limit=limit)


@router.get("/me/progress", response_model=BadgeProgress)
async def get_progress(user: Dict = Depends(get_current_user)):
    """Current badge and progress towards the next tier."""
    points = int(user.get("points") or 0)
    upcoming = gamification.next_badge(points)
    return BadgeProgress(
        points=points,
        badge=user.get("badge", ""),
        badge_emoji=user.get("badge_emoji", ""),
        next_badge=upcoming[1] if upcoming else None,
        next_badge_emoji=upcoming[2] if upcoming else None,
        next_threshold=upcoming[0] if upcoming else None,
        progress_percentage=gamification.progress_percentage(points),
    )
