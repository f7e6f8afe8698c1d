"""
Pydantic models for incident reports.
These models handle validation for incident submission, review and responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict
from enum import Enum


class IncidentStatus(str, Enum):
    """
    Review lifecycle of an incident report.

    PENDING → APPROVED | REJECTED, APPROVED → RESOLVED
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    RESOLVED = "resolved"


class IncidentLocation(BaseModel):
    """Where the incident was observed. Address fields are optional and may be resolved server-side."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=300)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    full_address: Optional[str] = Field(None, max_length=500)


class IncidentCreate(BaseModel):
    """
    Model for creating a new incident report (incoming POST request).
    Reporter identity comes from the session, not the body.
    """
    description: str = Field(..., min_length=5, max_length=2000, description="What the reporter observed")
    location: IncidentLocation
    photo_url: Optional[str] = Field(None, max_length=2000, description="Download URL of an uploaded photo")

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Mangrove saplings cut down along the creek bank.",
                "location": {"latitude": 19.05, "longitude": 72.85},
                "photo_url": None,
            }
        }
        extra = "ignore"


class ReviewRequest(BaseModel):
    """Reviewer decision on an incident."""
    status: IncidentStatus = Field(..., description="Target status")
    admin_notes: Optional[str] = Field(None, max_length=1000, description="Optional reviewer notes")


class StatusHistoryEntry(BaseModel):
    """Status transition history entry."""
    from_status: str = Field(..., description="Previous status (empty for creation)")
    to_status: str = Field(..., description="New status")
    changed_by: str = Field(..., description="User ID who made the change")
    timestamp: datetime = Field(..., description="When change occurred")
    note: Optional[str] = Field(None, description="Optional note explaining the change")


class IncidentResponse(BaseModel):
    """
    Model for incident responses (what API returns).
    Includes system-generated fields like ID, timestamps and the geofence result.
    """
    id: str = Field(..., description="Firestore document ID")
    user_id: str
    user_email: str = ""
    user_name: str = ""
    photo_url: Optional[str] = None
    location: IncidentLocation
    description: str
    status: IncidentStatus = IncidentStatus.PENDING
    ai_validated: bool = False
    mangrove_detection: Optional[Dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    # Set on the submission response only
    points_awarded: Optional[int] = None
    reporter_points: Optional[int] = None
    reporter_badge: Optional[str] = None

    class Config:
        extra = "ignore"


class PhotoUploadResult(BaseModel):
    download_url: str
    file_name: str
    size: int = Field(..., ge=0)
    storage_path: str
