"""
Incident endpoints - submission, retrieval, review and photo upload.
"""

from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.models.incident import IncidentCreate, IncidentResponse, IncidentStatus, PhotoUploadResult, ReviewRequest
from app.routes.deps import get_current_user, require_permission
from app.services.incident_service import get_incident_service
from app.services.photo_upload_service import get_photo_upload_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/incidents", tags=["Incidents"])

REVIEWER_PERMISSIONS = ("view_incident_reports", "view_reports")


def _get_or_404(incident_id: str) -> Dict:
    try:
        return get_incident_service().get_incident(incident_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _can_view(user: Dict, incident: Dict) -> bool:
    if incident.get("user_id") == user["id"]:
        return True
    return bool(set(user.get("permissions") or []).intersection(REVIEWER_PERMISSIONS))


@router.post("", response_model=IncidentResponse, status_code=status.HTTP_201_CREATED)
async def submit_incident(
    incident: IncidentCreate,
    user: Dict = Depends(require_permission("submit_reports")),
):
    """
    Submit a new incident report.

    This endpoint:
    1. Resolves the address (if missing) and runs the mangrove geofence check
    2. Stores the incident as pending
    3. Awards the reporter points

    Returns the created incident with points_awarded.
    """
    try:
        logger.info(f"📝 POST /incidents - user={user['id']} at ({incident.location.latitude}, {incident.location.longitude})")
        result = get_incident_service().submit_incident(user, incident)
        logger.info(f"✅ Incident created successfully: {result['id']}")
        return result
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"❌ POST /incidents - Incident creation failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Incident creation failed: {str(e)}"
        )


@router.get("", response_model=List[IncidentResponse])
async def list_incidents(
    status_filter: Optional[IncidentStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    user: Dict = Depends(require_permission(*REVIEWER_PERMISSIONS)),
):
    """All incidents (reviewer dashboards), newest first."""
    try:
        return get_incident_service().list_incidents(
            status=status_filter.value if status_filter else None,
            limit=limit,
        )
    except Exception as e:
        logger.error(f"❌ Failed to list incidents: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve incidents: {str(e)}",
        )


@router.get("/mine", response_model=List[IncidentResponse])
async def list_my_incidents(
    limit: int = Query(20, ge=1, le=100),
    user: Dict = Depends(get_current_user),
):
    """The caller's own incidents, newest first."""
    return get_incident_service().list_user_incidents(user["id"], limit=limit)


@router.get("/{incident_id}", response_model=IncidentResponse)
async def get_incident(incident_id: str, user: Dict = Depends(get_current_user)):
    incident = _get_or_404(incident_id)
    if not _can_view(user, incident):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this incident")
    return incident


@router.post("/{incident_id}/review", response_model=IncidentResponse)
async def review_incident(
    incident_id: str,
    request: ReviewRequest,
    user: Dict = Depends(require_permission("approve_reports")),
):
    """
    Approve, reject or resolve an incident.

    Allowed transitions: pending → approved | rejected, approved → resolved.
    """
    try:
        return get_incident_service().review_incident(
            incident_id,
            request.status.value,
            reviewer_id=user["id"],
            admin_notes=request.admin_notes,
        )
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{incident_id}/photo", response_model=PhotoUploadResult, status_code=status.HTTP_201_CREATED)
async def upload_incident_photo(
    incident_id: str,
    photo: UploadFile = File(...),
    user: Dict = Depends(get_current_user),
):
    """
    Upload the photo for one of the caller's incidents and attach its URL.
    """
    incident = _get_or_404(incident_id)
    if incident.get("user_id") != user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the reporter can attach a photo")

    data = await photo.read()
    try:
        result = get_photo_upload_service().upload_photo(
            data,
            user_id=user["id"],
            incident_id=incident_id,
            content_type=photo.content_type or "image/jpeg",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"❌ Photo upload failed for incident {incident_id}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload photo: {str(e)}"
        )

    get_incident_service().attach_photo(incident_id, result["download_url"], result["storage_path"])
    return result
