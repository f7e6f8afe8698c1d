"""
Status Workflow Engine - review lifecycle for incident reports.

RULES:
- pending → approved | rejected
- approved → resolved
- rejected and resolved are terminal
- Re-applying the current status is a no-op
- Every transition is recorded in status_history
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from app.models.incident import IncidentStatus

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    State machine for incident status transitions.
    """

    # Allowed transitions map: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[IncidentStatus, List[IncidentStatus]] = {
        IncidentStatus.PENDING: [IncidentStatus.APPROVED, IncidentStatus.REJECTED],
        IncidentStatus.APPROVED: [IncidentStatus.RESOLVED],
        IncidentStatus.REJECTED: [],
        IncidentStatus.RESOLVED: [],
    }

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        """
        Check if a status transition is valid.

        Args:
            from_status: Current status
            to_status: Desired new status

        Returns:
            True if transition is allowed, False otherwise
        """
        try:
            from_enum = IncidentStatus(from_status)
            to_enum = IncidentStatus(to_status)
        except ValueError:
            return False

        if from_enum == to_enum:
            return True

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = IncidentStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    @classmethod
    def create_status_history_entry(
        cls,
        from_status: str,
        to_status: str,
        changed_by: str,
        note: Optional[str] = None
    ) -> Dict:
        """
        Create a status history entry for the audit trail.

        Uses a client-side timestamp: Firestore rejects SERVER_TIMESTAMP inside arrays.
        """
        return {
            "from_status": from_status,
            "to_status": to_status,
            "changed_by": changed_by,
            "timestamp": datetime.now(timezone.utc),
            "note": note or "",
        }

    @classmethod
    def validate_and_transition(
        cls,
        current_status: str,
        new_status: str,
        changed_by: str,
        note: Optional[str] = None
    ) -> Dict:
        """
        Validate transition and create history entry.

        Returns:
            Dict with the transition and its history entry

        Raises:
            ValueError: If transition is invalid
        """
        if not cls.is_valid_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise ValueError(
                f"Invalid status transition: {current_status} → {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )

        return {
            "valid": True,
            "changed": current_status != new_status,
            "from_status": current_status,
            "to_status": new_status,
            "history_entry": cls.create_status_history_entry(
                from_status=current_status,
                to_status=new_status,
                changed_by=changed_by,
                note=note
            ),
        }
