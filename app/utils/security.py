"""
Security utilities: password hashing, user document IDs and session tokens.
"""

import base64
import hashlib
import logging
import re
import secrets
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def user_id_from_email(email: str) -> str:
    """
    Derive the Firestore document ID for a user from their e-mail.

    Base64 of the normalized e-mail with everything but letters and digits
    stripped, so "ngo@example.com" always maps to the same document.
    """
    encoded = base64.b64encode(normalize_email(email).encode("utf-8")).decode("ascii")
    return re.sub(r"[^a-zA-Z0-9]", "", encoded)


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt (random salt per hash).

    Returns:
        Hash string stored in the user document
    """
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Not a bcrypt hash (e.g. a legacy document)
        logger.warning("Stored password hash is not in a recognised format")
        return False


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def mask_email(email: Optional[str]) -> Optional[str]:
    """
    Mask an e-mail for logs: jane.doe@example.com → ja***@example.com
    """
    if not email or "@" not in email:
        return email
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


def session_key(token: str) -> str:
    """Document ID for a session; the raw token itself is never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
