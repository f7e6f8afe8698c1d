"""
Reverse geocoding endpoint.
"""

from fastapi import APIRouter, HTTPException, Query, status
from app.models.geo import LocationInfo
from app.services.location_service import get_address_from_coordinates
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/location", tags=["Location"])


@router.get("/reverse", response_model=LocationInfo)
async def reverse_geocode(
    latitude: float = Query(...),
    longitude: float = Query(...),
):
    """
    Resolve coordinates to an address with the configured provider.
    Falls back to the raw coordinates when the provider finds nothing.
    """
    try:
        return get_address_from_coordinates(latitude, longitude)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
