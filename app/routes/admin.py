"""
Admin endpoints - user management and moderation for the admin portal.

SCOPE OF ADMIN:
✅ Dashboard statistics
✅ List users, change roles, activate / deactivate, delete
✅ Create staff accounts (super admin only)
✅ Delete incidents

Reviewing incidents (approve / reject / resolve) lives in /incidents/{id}/review.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.models.analytics import AdminStats
from app.models.base import BaseResponse
from app.models.user import RoleUpdate, StaffCreateRequest, StatusUpdate, UserResponse, UserRole
from app.routes.deps import require_permission
from app.services.analytics_service import get_analytics_service
from app.services.auth_service import AuthError, get_auth_service
from app.services.incident_service import get_incident_service
from app.services.user_service import get_user_service, public_user
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _reject_self(user: Dict, user_id: str, action: str):
    if user["id"] == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Admins cannot {action} their own account"
        )


@router.get("/stats", response_model=AdminStats)
async def get_stats(user: Dict = Depends(require_permission("manage_users"))):
    """
    Totals for the admin dashboard: users by role family, incidents by status
    and points.
    """
    try:
        return get_analytics_service().admin_stats()
    except Exception as e:
        logger.error(f"❌ Admin stats failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute stats: {str(e)}"
        )


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    limit: int = Query(50, ge=1, le=500),
    user: Dict = Depends(require_permission("manage_users")),
):
    """Users, newest first."""
    return [public_user(u) for u in get_user_service().list_users(limit=limit)]


@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    request: RoleUpdate,
    user: Dict = Depends(require_permission("manage_admins")),
):
    """
    Change a user's role. Permissions are reset to the role's defaults.
    """
    _reject_self(user, user_id, "change the role of")
    try:
        return public_user(get_user_service().update_role(user_id, request.role))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    request: StatusUpdate,
    user: Dict = Depends(require_permission("manage_users")),
):
    """
    Activate or deactivate an account. Deactivation ends its sessions.
    """
    if not request.is_active:
        _reject_self(user, user_id, "deactivate")
    try:
        return public_user(get_user_service().set_active(user_id, request.is_active))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/users/{user_id}", response_model=BaseResponse)
async def delete_user(user_id: str, user: Dict = Depends(require_permission("delete_users"))):
    _reject_self(user, user_id, "delete")
    try:
        get_user_service().delete_user(user_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return BaseResponse(message=f"User {user_id} deleted")


@router.post("/staff", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    request: StaffCreateRequest,
    user: Dict = Depends(require_permission("manage_admins")),
):
    """
    Create an NGO, government, researcher or admin account.
    """
    if request.role == UserRole.CITIZEN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Citizens sign up through /auth/signup"
        )
    try:
        created = get_auth_service().create_staff_user(request.email, request.password, request.name, request.role)
        logger.info(f"👤 Staff account {created['id']} ({request.role.value}) created by {user['id']}")
        return created
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": e.code, "message": e.message}
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/incidents/{incident_id}", response_model=BaseResponse)
async def delete_incident(incident_id: str, user: Dict = Depends(require_permission("manage_users"))):
    try:
        get_incident_service().delete_incident(incident_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    logger.info(f"Incident {incident_id} deleted by {user['id']}")
    return BaseResponse(message=f"Incident {incident_id} deleted")
