"""
Analytics Service - dashboard statistics over users and incidents.
"""

from app.config.firebase import get_db
from app.models.incident import IncidentStatus
from app.models.user import ADMIN_ROLES
from app.services.incident_service import INCIDENTS
from app.services.user_service import USERS
from app.utils.firestore_helpers import to_datetime
from typing import Dict, List, Optional
from datetime import datetime, timezone
from collections import defaultdict
import calendar
import logging

logger = logging.getLogger(__name__)

TOP_LOCATIONS = 5


def _month_keys(now: datetime, months: int) -> List[tuple]:
    """(year, month) pairs for the last `months` months, oldest first."""
    keys = []
    for offset in range(months - 1, -1, -1):
        year, month = now.year, now.month - offset
        while month <= 0:
            month += 12
            year -= 1
        keys.append((year, month))
    return keys


class AnalyticsService:
    """Service for aggregate statistics."""

    def __init__(self):
        self.db = get_db()

    def _all(self, collection: str) -> List[Dict]:
        return [doc.to_dict() for doc in self.db.collection(collection).stream()]

    def community_stats(self) -> Dict:
        """Totals shown on the leaderboard screen."""
        users = self._all(USERS)
        total_incidents = len(self._all(INCIDENTS))
        total_points = sum(int(user.get("points") or 0) for user in users)

        return {
            "total_users": len(users),
            "total_incidents": total_incidents,
            "total_points": total_points,
            "average_points_per_user": round(total_points / len(users)) if users else 0,
        }

    def admin_stats(self) -> Dict:
        users = self._all(USERS)
        incidents = self._all(INCIDENTS)

        admin_users = sum(1 for user in users if user.get("role") in ADMIN_ROLES)
        total_points = sum(int(user.get("points") or 0) for user in users)

        return {
            "total_users": len(users),
            "admin_users": admin_users,
            "regular_users": len(users) - admin_users,
            "active_users": sum(1 for user in users if user.get("is_active", True)),
            "total_incidents": len(incidents),
            "pending_incidents": sum(1 for i in incidents if i.get("status") == IncidentStatus.PENDING.value),
            "resolved_incidents": sum(1 for i in incidents if i.get("status") == IncidentStatus.RESOLVED.value),
            "total_points": total_points,
            "average_points_per_user": round(total_points / len(users)) if users else 0,
        }

    def incident_analytics(self, months: int = 6, now: Optional[datetime] = None) -> Dict:
        """
        Status distribution, monthly trend, top locations and geofence hits.

        Args:
            months: Number of months in the trend (including the current one)
            now: Reference time (defaults to current UTC time)
        """
        if months < 1:
            raise ValueError("months must be at least 1")

        now = now or datetime.now(timezone.utc)
        incidents = self._all(INCIDENTS)

        status_distribution = defaultdict(int)
        monthly_counts = defaultdict(int)
        location_counts = defaultdict(int)
        in_mangrove_area = 0

        for incident in incidents:
            status_distribution[incident.get("status") or IncidentStatus.PENDING.value] += 1

            created_at = to_datetime(incident.get("created_at"))
            if created_at:
                created_at = created_at.astimezone(timezone.utc)
                monthly_counts[(created_at.year, created_at.month)] += 1

            city = (incident.get("location") or {}).get("city") or "Unknown"
            location_counts[city] += 1

            if (incident.get("mangrove_detection") or {}).get("is_in_mangrove_area"):
                in_mangrove_area += 1

        monthly_trend = [
            {
                "month": f"{year:04d}-{month:02d}",
                "label": calendar.month_abbr[month],
                "count": monthly_counts.get((year, month), 0),
            }
            for year, month in _month_keys(now, months)
        ]

        top_locations = sorted(location_counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_LOCATIONS]

        return {
            "total_incidents": len(incidents),
            "incidents_this_month": monthly_counts.get((now.year, now.month), 0),
            "status_distribution": dict(status_distribution),
            "monthly_trend": monthly_trend,
            "top_locations": [{"location": name, "count": count} for name, count in top_locations],
            "in_mangrove_area": in_mangrove_area,
        }


# Global service instance
_analytics_service = None


def get_analytics_service() -> AnalyticsService:
    """Get or create AnalyticsService singleton."""
    global _analytics_service
    if _analytics_service is None:
        _analytics_service = AnalyticsService()
    return _analytics_service
