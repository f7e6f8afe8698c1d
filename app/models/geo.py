"""
Location and mangrove geofence models.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class DetectionConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MangroveDetectionResult(BaseModel):
    """
    Outcome of the bounding-box geofence check.

    region_name is the containing region when is_in_mangrove_area is true,
    otherwise the nearest region (with distance_to_nearest_mangrove in km).
    """
    is_in_mangrove_area: bool
    region_name: Optional[str] = None
    confidence: DetectionConfidence
    coordinates: Coordinates
    distance_to_nearest_mangrove: Optional[float] = Field(None, ge=0, description="Kilometres to nearest region centre")

    class Config:
        json_schema_extra = {
            "example": {
                "is_in_mangrove_area": False,
                "region_name": "Mumbai Metropolitan",
                "confidence": "medium",
                "coordinates": {"latitude": 19.45, "longitude": 72.85},
                "distance_to_nearest_mangrove": 34.7,
            }
        }


class LocationInfo(BaseModel):
    """Human-readable address resolved from coordinates."""
    coordinates: Coordinates
    address: str = ""
    city: str = "Unknown City"
    state: str = ""
    country: str = ""
    full_address: str
    provider: Optional[str] = None


class MangroveDetectionResponse(MangroveDetectionResult):
    summary: str = ""
