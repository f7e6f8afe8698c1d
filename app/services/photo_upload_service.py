"""
Photo Upload Service - store incident photos in Cloud Storage.

Objects are written to incidents/{user_id}/{incident_id}/incident_{incident_id}_{ms}.jpg
"""

from app.config.firebase import get_bucket
from datetime import datetime, timezone
from typing import Dict
import logging
import time

logger = logging.getLogger(__name__)

MAX_PHOTO_BYTES = 10 * 1024 * 1024
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/heic", "image/webp"}


def photo_storage_path(user_id: str, incident_id: str, file_name: str) -> str:
    return f"incidents/{user_id}/{incident_id}/{file_name}"


class PhotoUploadService:
    """
    Service for uploading and deleting incident photos.
    """

    def __init__(self):
        self.bucket = get_bucket()

    def upload_photo(
        self,
        data: bytes,
        user_id: str,
        incident_id: str,
        content_type: str = "image/jpeg",
    ) -> Dict:
        """
        Upload a photo for an incident.

        Args:
            data: Raw image bytes
            user_id: Uploading user
            incident_id: Incident the photo belongs to
            content_type: MIME type of the image

        Returns:
            Dict with download_url, file_name, size and storage_path

        Raises:
            ValueError: Empty, oversized or non-image payloads
        """
        if not data:
            raise ValueError("Photo is empty")
        if len(data) > MAX_PHOTO_BYTES:
            raise ValueError(f"Photo exceeds {MAX_PHOTO_BYTES // (1024 * 1024)} MB limit")
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ValueError(f"Unsupported photo type: {content_type}")

        file_name = f"incident_{incident_id}_{int(time.time() * 1000)}.jpg"
        storage_path = photo_storage_path(user_id, incident_id, file_name)

        blob = self.bucket.blob(storage_path)
        blob.metadata = {
            "userId": user_id,
            "incidentId": incident_id,
            "uploadedAt": datetime.now(timezone.utc).isoformat(),
            "originalSize": str(len(data)),
        }
        blob.upload_from_string(data, content_type=content_type)
        blob.make_public()

        logger.info(f"📸 Photo uploaded: {storage_path} ({len(data)} bytes)")
        return {
            "download_url": blob.public_url,
            "file_name": file_name,
            "size": len(data),
            "storage_path": storage_path,
        }

    def delete_photo(self, storage_path: str) -> None:
        """
        Raises:
            google.api_core.exceptions.NotFound: If the object does not exist
        """
        self.bucket.blob(storage_path).delete()
        logger.info(f"🗑️ Photo deleted: {storage_path}")


# Global service instance
_photo_upload_service = None


def get_photo_upload_service() -> PhotoUploadService:
    """Get or create PhotoUploadService singleton."""
    global _photo_upload_service
    if _photo_upload_service is None:
        _photo_upload_service = PhotoUploadService()
    return _photo_upload_service
