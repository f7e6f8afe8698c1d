"""
Leaderboard Service - rank active users by points.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.services.user_service import USERS
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)


class LeaderboardService:

    def __init__(self):
        self.db = get_db()

    def _ranked_users(self, limit: Optional[int] = None) -> List[Dict]:
        query = self.db.collection(USERS).order_by("points", direction=firestore.Query.DESCENDING)
        entries = []
        for doc in query.stream():
            data = doc.to_dict()
            if not data.get("is_active", True):
                continue
            entries.append({
                "rank": len(entries) + 1,
                "user_id": doc.id,
                "name": data.get("name", ""),
                "points": int(data.get("points") or 0),
                "badge": data.get("badge", ""),
                "badge_emoji": data.get("badge_emoji", ""),
            })
            if limit is not None and len(entries) >= limit:
                break
        return entries

    def get_leaderboard(self, limit: int = 50) -> List[Dict]:
        """Top active users by points, highest first, ranked from 1."""
        return self._ranked_users(limit)

    def get_user_rank(self, user_id: str) -> Optional[Dict]:
        for entry in self._ranked_users():
            if entry["user_id"] == user_id:
                return entry
        return None


# Global service instance
_leaderboard_service = None


def get_leaderboard_service() -> LeaderboardService:
    """Get or create LeaderboardService singleton."""
    global _leaderboard_service
    if _leaderboard_service is None:
        _leaderboard_service = LeaderboardService()
    return _leaderboard_service
