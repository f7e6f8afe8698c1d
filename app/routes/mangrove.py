"""
Mangrove geofence check - lets clients warn before submitting.
"""

from fastapi import APIRouter, HTTPException, Query, status
from app.models.geo import MangroveDetectionResponse
from app.services.mangrove_detection import detect_mangrove_area, detection_summary

router = APIRouter(prefix="/mangrove", tags=["Mangrove"])


@router.get("/detect", response_model=MangroveDetectionResponse)
async def detect(
    latitude: float = Query(..., description="Latitude in degrees"),
    longitude: float = Query(..., description="Longitude in degrees"),
):
    """
    Classify a coordinate against the known mangrove regions.

    Inside a region: is_in_mangrove_area=true with that region.
    Otherwise: the nearest region and its distance in km.
    """
    try:
        result = detect_mangrove_area(latitude, longitude)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MangroveDetectionResponse(**result.model_dump(), summary=detection_summary(result))
