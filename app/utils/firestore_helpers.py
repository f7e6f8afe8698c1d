"""
Firestore helpers shared by the services.

NOTE: For firebase_admin SDK, we use positional where() arguments which still work.
The deprecation warning is just a warning - the functionality is still supported.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "user_id", "==", user_id)
        query = where_filter(query, "status", "==", "pending")
    """
    return query.where(field_path, op_string, value)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Convert a stored timestamp to an aware datetime.

    Handles datetime (including Firestore's DatetimeWithNanoseconds),
    objects exposing to_datetime(), and ISO strings. Unknown values become None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if hasattr(value, "to_datetime"):
        return to_datetime(value.to_datetime())
    if isinstance(value, str):
        try:
            return to_datetime(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.warning(f"Unparseable timestamp string: {value}")
            return None
    logger.warning(f"Unknown timestamp type: {type(value)}")
    return None


def snapshot_to_dict(doc, timestamp_fields: Iterable[str] = ()) -> Dict:
    """
    Convert a document snapshot to a dict with its ID and normalized timestamps.
    """
    data = doc.to_dict() or {}
    data["id"] = doc.id
    for field in timestamp_fields:
        if field in data:
            data[field] = to_datetime(data[field])
    return data
