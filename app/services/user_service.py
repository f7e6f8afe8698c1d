"""
User Service - Manage user profiles, roles and points in Firestore.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.models.user import ProfileUpdate, UserRole, ROLE_PERMISSIONS, ROLE_BADGES
from app.services import gamification
from app.utils.firestore_helpers import where_filter, snapshot_to_dict
from app.utils.security import hash_password, normalize_email, user_id_from_email
from typing import Optional, Dict, List
import logging

logger = logging.getLogger(__name__)

USERS = "users"
ACTIVITIES = "activities"
SESSIONS = "sessions"

USER_TIMESTAMPS = ("created_at", "last_active", "updated_at")

MIN_PASSWORD_LENGTH = 6


class DuplicateEmailError(ValueError):
    """An account already exists for the e-mail."""


def public_user(user_data: Dict) -> Dict:
    """Drop credential fields before a user leaves the service layer."""
    return {key: value for key, value in user_data.items() if key != "password_hash"}


def initial_badge(role: UserRole) -> tuple:
    if role in ROLE_BADGES:
        return ROLE_BADGES[role]
    return gamification.badge_for_points(0)


class UserService:
    """
    Service for user management in Firestore.
    """

    def __init__(self):
        self.db = get_db()

    def get_user(self, user_id: str) -> Optional[Dict]:
        """
        Get a user document by ID.

        Returns:
            User dict (including password_hash) or None if not found
        """
        doc = self.db.collection(USERS).document(user_id).get()
        if not doc.exists:
            return None
        return snapshot_to_dict(doc, USER_TIMESTAMPS)

    def get_user_by_email(self, email: str) -> Optional[Dict]:
        user = self.get_user(user_id_from_email(email))
        if user:
            return user

        # Accounts created outside sign-up may use auto-generated IDs
        query = where_filter(self.db.collection(USERS), "email", "==", normalize_email(email)).limit(1)
        for doc in query.stream():
            return snapshot_to_dict(doc, USER_TIMESTAMPS)
        return None

    def create_user(self, email: str, password: str, name: str, role: UserRole = UserRole.CITIZEN) -> Dict:
        """
        Create a user document keyed by the e-mail derived ID.

        Raises:
            ValueError: If the password is shorter than MIN_PASSWORD_LENGTH
            DuplicateEmailError: If an account already exists for the e-mail
        """
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        normalized_email = normalize_email(email)
        if self.get_user_by_email(normalized_email):
            raise DuplicateEmailError("An account with this email already exists")

        badge, badge_emoji = initial_badge(role)
        user_ref = self.db.collection(USERS).document(user_id_from_email(normalized_email))
        user_ref.set({
            "email": normalized_email,
            "password_hash": hash_password(password),
            "name": name.strip(),
            "role": role.value,
            "permissions": list(ROLE_PERMISSIONS[role]),
            "points": 0,
            "badge": badge,
            "badge_emoji": badge_emoji,
            "is_active": True,
            "profile_image": "",
            "phone_number": "",
            "location": {"city": "", "state": "", "country": ""},
            "preferences": {"notifications": True, "email_updates": True, "language": "en"},
            "created_at": firestore.SERVER_TIMESTAMP,
            "last_active": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })

        logger.info(f"User created: {user_ref.id} (role={role.value})")
        return self.get_user(user_ref.id)

    def _require(self, user_id: str) -> Dict:
        user = self.get_user(user_id)
        if user is None:
            raise LookupError(f"User not found: {user_id}")
        return user

    def _update(self, user_id: str, update_data: Dict) -> Dict:
        self._require(user_id)
        update_data = dict(update_data, updated_at=firestore.SERVER_TIMESTAMP)
        self.db.collection(USERS).document(user_id).update(update_data)
        return self.get_user(user_id)

    def update_profile(self, user_id: str, updates: ProfileUpdate) -> Dict:
        """
        Update the editable profile fields of a user.

        Only fields present in the request are written.
        """
        update_data = updates.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        if not update_data:
            return self._require(user_id)

        user = self._update(user_id, update_data)
        logger.info(f"Profile updated for {user_id}: {sorted(update_data)}")
        return user

    def touch_last_active(self, user_id: str) -> None:
        self.db.collection(USERS).document(user_id).update({"last_active": firestore.SERVER_TIMESTAMP})

    def list_users(self, limit: int = 50) -> List[Dict]:
        """Users ordered by creation time, newest first."""
        query = self.db.collection(USERS).order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [snapshot_to_dict(doc, USER_TIMESTAMPS) for doc in query.stream()]

    def update_role(self, user_id: str, role: UserRole) -> Dict:
        """
        Change a user's role. Permissions are reset to the role's defaults and
        the badge follows the role (tier badge for citizens).
        """
        user = self._require(user_id)
        if role in ROLE_BADGES:
            badge, badge_emoji = ROLE_BADGES[role]
        else:
            badge, badge_emoji = gamification.badge_for_points(user.get("points", 0))

        updated = self._update(user_id, {
            "role": role.value,
            "permissions": list(ROLE_PERMISSIONS[role]),
            "badge": badge,
            "badge_emoji": badge_emoji,
        })
        logger.info(f"Role for {user_id} changed {user.get('role')} → {role.value}")
        return updated

    def set_active(self, user_id: str, is_active: bool) -> Dict:
        updated = self._update(user_id, {"is_active": is_active})
        if not is_active:
            self._delete_sessions(user_id)
        logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'}")
        return updated

    def delete_user(self, user_id: str) -> None:
        self._require(user_id)
        self._delete_sessions(user_id)
        self.db.collection(USERS).document(user_id).delete()
        logger.info(f"User deleted: {user_id}")

    def _delete_sessions(self, user_id: str) -> None:
        query = where_filter(self.db.collection(SESSIONS), "user_id", "==", user_id)
        references = [doc.reference for doc in query.stream()]
        if not references:
            return
        batch = self.db.batch()
        for reference in references:
            batch.delete(reference)
        batch.commit()

    def award_points(
        self,
        user_id: str,
        amount: int,
        activity_type: str = "report_submitted",
        incident_id: Optional[str] = None,
    ) -> Dict:
        """
        Add points to a user and log the activity.

        The new total and badge are computed from the current document, then the
        user update and the activity entry are committed together in one batch.
        Staff keep their role badge; citizens move through the tiers.

        Returns:
            Dict with points_awarded, points, badge, badge_emoji
        """
        if amount <= 0:
            raise ValueError("Points award must be positive")

        user = self._require(user_id)
        new_total = int(user.get("points") or 0) + amount

        if user.get("role") == UserRole.CITIZEN.value:
            badge, badge_emoji = gamification.badge_for_points(new_total)
        else:
            badge, badge_emoji = user.get("badge", ""), user.get("badge_emoji", "")

        user_ref = self.db.collection(USERS).document(user_id)
        activity_ref = self.db.collection(ACTIVITIES).document()

        batch = self.db.batch()
        batch.update(user_ref, {
            "points": firestore.Increment(amount),
            "badge": badge,
            "badge_emoji": badge_emoji,
            "last_active": firestore.SERVER_TIMESTAMP,
        })
        batch.set(activity_ref, {
            "user_id": user_id,
            "type": activity_type,
            "incident_id": incident_id,
            "points_awarded": amount,
            "points_after": new_total,
            "badge_after": badge,
            "created_at": firestore.SERVER_TIMESTAMP,
        })
        batch.commit()

        if badge != user.get("badge"):
            logger.info(f"🏅 {user_id} reached badge {badge} ({new_total} points)")
        logger.info(f"Awarded {amount} points to {user_id} (total {new_total})")

        return {
            "points_awarded": amount,
            "points": new_total,
            "badge": badge,
            "badge_emoji": badge_emoji,
        }

    def list_activity(self, user_id: str, limit: int = 20) -> List[Dict]:
        query = where_filter(self.db.collection(ACTIVITIES), "user_id", "==", user_id)
        entries = [snapshot_to_dict(doc, ("created_at",)) for doc in query.stream()]
        # Sorted in Python to avoid a composite index on (user_id, created_at)
        entries.sort(key=lambda entry: entry.get("created_at").timestamp() if entry.get("created_at") else 0, reverse=True)
        return entries[:limit]


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
