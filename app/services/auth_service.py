"""
Auth Service - credential checks against the users collection and sessions.

Credentials live on the user document (password_hash); sessions live in the
"sessions" collection keyed by a hash of the bearer token and expire after
SESSION_TTL_HOURS.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.settings import settings
from app.models.user import UserRole, ADMIN_ROLES
from app.services.user_service import DuplicateEmailError, get_user_service, public_user, SESSIONS
from app.utils.firestore_helpers import to_datetime
from app.utils.security import (
    generate_session_token,
    mask_email,
    session_key,
    verify_password,
)
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

# Login portals restrict which roles may sign in through them
PORTAL_ROLES = {
    "admin": ADMIN_ROLES,
    "ngo": {UserRole.NGO.value},
    "government": {UserRole.GOVERNMENT.value},
}


class AuthError(Exception):
    """
    Credential failure with a stable code and a user-facing message.
    """

    MESSAGES = {
        "user-not-found": "No account found with this email address.",
        "wrong-password": "Incorrect password. Please try again.",
        "user-disabled": "This account has been disabled. Please contact support.",
        "access-denied": "Access denied. This portal is restricted to authorized accounts.",
        "email-already-in-use": "An account with this email already exists.",
        "invalid-session": "Invalid session. Please log in again.",
        "session-expired": "Your session has expired. Please log in again.",
    }

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = code
        self.message = message or self.MESSAGES.get(code, "Authentication failed.")
        super().__init__(self.message)


class AuthService:
    """
    Service for sign-up, login, logout and session resolution.
    """

    def __init__(self):
        self.db = get_db()
        self.users = get_user_service()

    def signup(self, email: str, password: str, name: str) -> Dict:
        """
        Register a citizen account and open a session for it.

        Returns:
            Dict with user, token and expires_at
        """
        try:
            user = self.users.create_user(email, password, name, UserRole.CITIZEN)
        except DuplicateEmailError:
            raise AuthError("email-already-in-use")

        logger.info(f"📝 Signup complete for {mask_email(user['email'])}")
        return self._open_session(user)

    def create_staff_user(self, email: str, password: str, name: str, role: UserRole) -> Dict:
        """Create a non-citizen account (super admin action). No session is opened."""
        try:
            user = self.users.create_user(email, password, name, role)
        except DuplicateEmailError:
            raise AuthError("email-already-in-use")
        logger.info(f"👑 Staff account created: {mask_email(user['email'])} ({role.value})")
        return public_user(user)

    def login(self, email: str, password: str, portal: Optional[str] = None) -> Dict:
        """
        Verify credentials and open a session.

        Args:
            email: Account e-mail
            password: Plain-text password
            portal: Optional portal name ("admin", "ngo", "government")

        Raises:
            AuthError: user-not-found, wrong-password, user-disabled or access-denied
        """
        user = self.users.get_user_by_email(email)
        if user is None:
            logger.warning(f"Login failed for {mask_email(email)}: user-not-found")
            raise AuthError("user-not-found")

        if not verify_password(password, user.get("password_hash")):
            logger.warning(f"Login failed for {mask_email(email)}: wrong-password")
            raise AuthError("wrong-password")

        if not user.get("is_active", True):
            raise AuthError("user-disabled")

        if portal is not None:
            allowed = PORTAL_ROLES.get(portal)
            if allowed is None:
                raise ValueError(f"Unknown login portal: {portal}")
            if user.get("role") not in allowed:
                logger.warning(f"{mask_email(email)} (role={user.get('role')}) denied at {portal} portal")
                raise AuthError("access-denied", f"Access denied. {portal.capitalize()} privileges required.")

        self.users.touch_last_active(user["id"])
        logger.info(f"🔐 Login successful for {mask_email(email)} via {portal or 'app'}")
        return self._open_session(self.users.get_user(user["id"]))

    def _open_session(self, user: Dict) -> Dict:
        token = generate_session_token()
        expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.SESSION_TTL_HOURS)
        self.db.collection(SESSIONS).document(session_key(token)).set({
            "user_id": user["id"],
            "role": user.get("role"),
            "created_at": firestore.SERVER_TIMESTAMP,
            "expires_at": expires_at,
        })
        return {"user": public_user(user), "token": token, "expires_at": expires_at}

    def resolve_session(self, token: str) -> Dict:
        """
        Return the (public) user behind a bearer token.

        Raises:
            AuthError: invalid-session, session-expired or user-disabled
        """
        session_ref = self.db.collection(SESSIONS).document(session_key(token))
        session = session_ref.get()
        if not session.exists:
            raise AuthError("invalid-session")

        data = session.to_dict()
        expires_at = to_datetime(data.get("expires_at"))
        if expires_at is None or expires_at <= datetime.now(timezone.utc):
            session_ref.delete()
            raise AuthError("session-expired")

        user = self.users.get_user(data["user_id"])
        if user is None:
            session_ref.delete()
            raise AuthError("invalid-session")
        if not user.get("is_active", True):
            raise AuthError("user-disabled")

        return public_user(user)

    def logout(self, token: str) -> None:
        self.db.collection(SESSIONS).document(session_key(token)).delete()
        logger.info("Session closed")


# Global service instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get or create AuthService singleton."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
