"""
Incident service - Firestore CRUD for incident reports.

Flow on submission:
1. Resolve a readable address when the client did not send one (best-effort)
2. Classify the coordinates against the mangrove regions
3. Store the incident as pending
4. Award the reporter points (user + activity log in one batch)
"""

from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from app.config.firebase import get_db
from app.core.settings import settings
from app.models.incident import IncidentCreate, IncidentStatus
from app.services import gamification
from app.services.location_service import build_location_info, get_address_from_coordinates
from app.services.mangrove_detection import detect_mangrove_area
from app.services.photo_upload_service import get_photo_upload_service
from app.services.status_workflow import StatusWorkflowEngine
from app.services.user_service import get_user_service
from app.utils.firestore_helpers import where_filter, snapshot_to_dict, to_datetime
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

INCIDENTS = "incidents"

INCIDENT_TIMESTAMPS = ("created_at", "updated_at", "reviewed_at")


def incident_from_snapshot(doc) -> Dict:
    data = snapshot_to_dict(doc, INCIDENT_TIMESTAMPS)
    for entry in data.get("status_history") or []:
        entry["timestamp"] = to_datetime(entry.get("timestamp"))
    return data


class IncidentService:
    """
    Service for incident report submission, retrieval and review.
    """

    def __init__(self):
        self.db = get_db()
        self.workflow = StatusWorkflowEngine()

    def _resolve_location(self, data: IncidentCreate) -> Dict:
        location = data.location.model_dump()
        latitude, longitude = location["latitude"], location["longitude"]

        # Client-supplied addresses win; only compose the display line
        if location.get("address") or location.get("full_address"):
            if not location.get("full_address"):
                location["full_address"] = build_location_info(latitude, longitude, {
                    "street": location.get("address"),
                    "city": location.get("city"),
                    "state": location.get("state"),
                    "country": location.get("country"),
                }).full_address
            return location

        if not settings.REVERSE_GEOCODE_ON_SUBMIT:
            return location

        info = get_address_from_coordinates(latitude, longitude)
        location.update({
            "address": info.address,
            "city": location.get("city") or info.city,
            "state": location.get("state") or info.state,
            "country": location.get("country") or info.country,
            "full_address": info.full_address,
        })
        return location

    def submit_incident(self, user: Dict, data: IncidentCreate) -> Dict:
        """
        Store a new incident for the given reporter and award points.

        Args:
            user: Reporter (public user dict from the session)
            data: Validated incident payload

        Returns:
            Incident dict including points_awarded and the reporter's new point total
        """
        location = self._resolve_location(data)
        detection = detect_mangrove_area(location["latitude"], location["longitude"])

        doc_ref = self.db.collection(INCIDENTS).document()
        doc_ref.set({
            "user_id": user["id"],
            "user_email": user.get("email", ""),
            "user_name": user.get("name", ""),
            "photo_url": data.photo_url,
            "location": location,
            "description": data.description.strip(),
            "status": IncidentStatus.PENDING.value,
            "ai_validated": False,
            "mangrove_detection": detection.model_dump(mode="json"),
            "status_history": [self.workflow.create_status_history_entry(
                from_status="",
                to_status=IncidentStatus.PENDING.value,
                changed_by=user["id"],
                note="Incident reported"
            )],
            "reviewed_by": None,
            "reviewed_at": None,
            "admin_notes": None,
            "created_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })
        logger.info(
            f"✅ Incident {doc_ref.id} stored for {user['id']} "
            f"(in_mangrove_area={detection.is_in_mangrove_area}, region={detection.region_name})"
        )

        incident = self.get_incident(doc_ref.id)

        try:
            award = get_user_service().award_points(
                user["id"],
                gamification.report_award(),
                activity_type="report_submitted",
                incident_id=doc_ref.id,
            )
            incident["points_awarded"] = award["points_awarded"]
            incident["reporter_points"] = award["points"]
            incident["reporter_badge"] = award["badge"]
        except Exception as e:
            # The incident is already stored; points can be reconciled later
            logger.error(f"⚠️ Failed to award points for incident {doc_ref.id}: {e}", exc_info=True)
            incident["points_awarded"] = 0

        return incident

    def get_incident(self, incident_id: str) -> Dict:
        """
        Raises:
            LookupError: If the incident does not exist
        """
        doc = self.db.collection(INCIDENTS).document(incident_id).get()
        if not doc.exists:
            raise LookupError(f"Incident not found: {incident_id}")
        return incident_from_snapshot(doc)

    def list_user_incidents(self, user_id: str, limit: int = 20) -> List[Dict]:
        """A reporter's own incidents, newest first."""
        query = where_filter(self.db.collection(INCIDENTS), "user_id", "==", user_id)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [incident_from_snapshot(doc) for doc in query.stream()]

    def list_incidents(self, status: Optional[str] = None, limit: int = 100) -> List[Dict]:
        """All incidents for reviewer dashboards, newest first, optionally by status."""
        query = self.db.collection(INCIDENTS)
        if status:
            query = where_filter(query, "status", "==", IncidentStatus(status).value)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [incident_from_snapshot(doc) for doc in query.stream()]

    def review_incident(
        self,
        incident_id: str,
        new_status: str,
        reviewer_id: str,
        admin_notes: Optional[str] = None,
    ) -> Dict:
        """
        Move an incident through the review workflow.

        Raises:
            LookupError: If the incident does not exist
            ValueError: If the transition is not allowed
        """
        incident = self.get_incident(incident_id)
        current_status = incident.get("status", IncidentStatus.PENDING.value)

        transition = self.workflow.validate_and_transition(
            current_status=current_status,
            new_status=IncidentStatus(new_status).value,
            changed_by=reviewer_id,
            note=admin_notes,
        )

        update_data = {
            "reviewed_by": reviewer_id,
            "reviewed_at": firestore.SERVER_TIMESTAMP,
            "updated_at": firestore.SERVER_TIMESTAMP,
        }
        if admin_notes:
            update_data["admin_notes"] = admin_notes
        if transition["changed"]:
            update_data["status"] = transition["to_status"]
            update_data["status_history"] = firestore.ArrayUnion([transition["history_entry"]])

        self.db.collection(INCIDENTS).document(incident_id).update(update_data)
        logger.info(f"Incident {incident_id}: {current_status} → {transition['to_status']} by {reviewer_id}")
        return self.get_incident(incident_id)

    def attach_photo(self, incident_id: str, photo_url: str, storage_path: Optional[str] = None) -> Dict:
        self.get_incident(incident_id)
        self.db.collection(INCIDENTS).document(incident_id).update({
            "photo_url": photo_url,
            "photo_storage_path": storage_path,
            "updated_at": firestore.SERVER_TIMESTAMP,
        })
        return self.get_incident(incident_id)

    def delete_incident(self, incident_id: str) -> None:
        """
        Delete an incident together with its uploaded photo, if any.

        Raises:
            LookupError: If the incident does not exist
        """
        incident = self.get_incident(incident_id)
        self.db.collection(INCIDENTS).document(incident_id).delete()

        storage_path = incident.get("photo_storage_path")
        if storage_path:
            try:
                get_photo_upload_service().delete_photo(storage_path)
            except NotFound:
                logger.warning(f"Photo for incident {incident_id} already gone: {storage_path}")

        logger.info(f"🗑️ Incident deleted: {incident_id}")


# Global service instance
_incident_service = None


def get_incident_service() -> IncidentService:
    """Get or create IncidentService singleton."""
    global _incident_service
    if _incident_service is None:
        _incident_service = IncidentService()
    return _incident_service
