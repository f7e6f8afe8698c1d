"""
User models for authentication, profiles and the leaderboard.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict
from enum import Enum


class UserRole(str, Enum):
    """
    Roles decide which routes a user may call.
    Staff roles (everything but CITIZEN) carry a fixed role badge.
    """
    CITIZEN = "citizen"
    NGO = "ngo"
    GOVERNMENT = "government"
    RESEARCHER = "researcher"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


_REVIEWER_VIEW = [
    "view_incident_pictures",
    "view_incident_descriptions",
    "view_user_names",
    "view_ai_validation_status",
    "view_incident_reports",
    "view_analytics",
    "submit_reports",
]

_ADMIN = [
    "manage_users",
    "view_reports",
    "view_incident_reports",
    "approve_reports",
    "manage_leaderboard",
    "view_analytics",
    "system_settings",
]

ROLE_PERMISSIONS: Dict[UserRole, List[str]] = {
    UserRole.CITIZEN: ["submit_reports", "view_own_reports", "view_leaderboard", "view_community_reports"],
    UserRole.NGO: list(_REVIEWER_VIEW),
    UserRole.GOVERNMENT: _REVIEWER_VIEW + ["approve_reports", "manage_reports"],
    UserRole.RESEARCHER: _REVIEWER_VIEW + ["export_data", "view_research_data"],
    UserRole.ADMIN: list(_ADMIN),
    UserRole.SUPER_ADMIN: _ADMIN + ["manage_admins", "reject_reports", "delete_users", "ban_users"],
}

# (badge, emoji) for staff roles; citizens earn tier badges instead
ROLE_BADGES: Dict[UserRole, tuple] = {
    UserRole.NGO: ("NGO Partner", "🌿"),
    UserRole.GOVERNMENT: ("Forestry Official", "🌳"),
    UserRole.RESEARCHER: ("Research Lead", "🔬"),
    UserRole.ADMIN: ("Admin", "🛡️"),
    UserRole.SUPER_ADMIN: ("Super Admin", "👑"),
}

ADMIN_ROLES = {UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value}


class UserLocation(BaseModel):
    city: str = ""
    state: str = ""
    country: str = ""


class UserPreferences(BaseModel):
    notifications: bool = True
    email_updates: bool = True
    language: str = Field(default="en", max_length=10)


class SignupRequest(BaseModel):
    """Citizen self sign-up."""
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6, max_length=128, description="At least 6 characters")
    name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class StaffCreateRequest(SignupRequest):
    """Super admin creating an NGO, government, researcher or admin account."""
    role: UserRole = Field(..., description="Role for the new account")


class ProfileUpdate(BaseModel):
    """
    Fields a user may change on their own profile.
    E-mail, role and creation time are never editable here.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=20)
    profile_image: Optional[str] = Field(None, max_length=1000)
    location: Optional[UserLocation] = None
    preferences: Optional[UserPreferences] = None

    class Config:
        extra = "forbid"


class RoleUpdate(BaseModel):
    role: UserRole


class StatusUpdate(BaseModel):
    is_active: bool


class UserResponse(BaseModel):
    """Public view of a user document (never includes the password hash)."""
    id: str = Field(..., description="Firestore document ID")
    email: str
    name: str
    role: str
    permissions: List[str] = Field(default_factory=list)
    points: int = 0
    badge: str = ""
    badge_emoji: str = ""
    is_active: bool = True
    profile_image: str = ""
    phone_number: str = ""
    location: UserLocation = Field(default_factory=UserLocation)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: Optional[datetime] = None
    last_active: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class AuthResponse(BaseModel):
    """Authentication response."""
    success: bool
    message: str
    user: Optional[UserResponse] = None
    token: Optional[str] = None
    expires_at: Optional[datetime] = None


class BadgeProgress(BaseModel):
    points: int
    badge: str
    badge_emoji: str
    next_badge: Optional[str] = None
    next_badge_emoji: Optional[str] = None
    next_threshold: Optional[int] = None
    progress_percentage: float = Field(..., ge=0, le=100)


class ActivityEntry(BaseModel):
    id: str
    user_id: str
    type: str
    incident_id: Optional[str] = None
    points_awarded: int = 0
    points_after: Optional[int] = None
    badge_after: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class LeaderboardEntry(BaseModel):
    rank: int = Field(..., ge=1)
    user_id: str
    name: str
    points: int
    badge: str = ""
    badge_emoji: str = ""
