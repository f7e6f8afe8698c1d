"""
Aggregate statistics returned to dashboards.
"""

from pydantic import BaseModel, Field
from typing import Dict, List


class CommunityStats(BaseModel):
    total_users: int = 0
    total_incidents: int = 0
    total_points: int = 0
    average_points_per_user: int = 0


class AdminStats(CommunityStats):
    admin_users: int = 0
    regular_users: int = 0
    active_users: int = 0
    pending_incidents: int = 0
    resolved_incidents: int = 0


class MonthlyCount(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    label: str = Field(..., description="Short month name, e.g. 'Mar'")
    count: int = 0


class LocationCount(BaseModel):
    location: str
    count: int


class IncidentAnalytics(BaseModel):
    total_incidents: int = 0
    incidents_this_month: int = 0
    status_distribution: Dict[str, int] = Field(default_factory=dict)
    monthly_trend: List[MonthlyCount] = Field(default_factory=list)
    top_locations: List[LocationCount] = Field(default_factory=list)
    in_mangrove_area: int = Field(0, description="Incidents whose coordinates fall inside a known region")
