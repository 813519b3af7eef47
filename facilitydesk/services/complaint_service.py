"""
Complaint service — CRUD and status handling for complaints.

``resolved_at`` follows the status: stamped when a complaint becomes
``resolved`` or ``closed`` and cleared when it is reopened.
"""

import logging

from facilitydesk.exceptions import InvalidTransitionError, ValidationError
from facilitydesk.models.enums import (
    COMPLAINT_TRANSITIONS,
    RESOLVED_COMPLAINT_STATUSES,
    ComplaintStatus,
    Priority,
    can_transition,
)
from facilitydesk.models.scheduler import Complaint
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.scheduler import ComplaintCreate, ComplaintUpdate
from facilitydesk.services import contact_service, crud

logger = logging.getLogger(__name__)


def get_complaints(
    page: int = 1,
    per_page: int = 10,
    status: ComplaintStatus | None = None,
    priority: Priority | None = None,
):
    """Return a page of complaints, newest first."""
    query = Complaint.query.order_by(Complaint.created_at.desc(), Complaint.id.desc())
    if status is not None:
        query = query.filter(Complaint.status == status)
    if priority is not None:
        query = query.filter(Complaint.priority == priority)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_complaint(complaint_id: int) -> Complaint:
    return crud.get_or_raise(Complaint, complaint_id, "Complaint")


def _resolution_fields(current: ComplaintStatus | None, new: ComplaintStatus) -> dict:
    """Return the ``resolved_at`` change implied by a status move."""
    if new in RESOLVED_COMPLAINT_STATUSES:
        if current not in RESOLVED_COMPLAINT_STATUSES:
            return {"resolved_at": crud.utcnow()}
        return {}
    return {"resolved_at": None}


def create_complaint(payload: ComplaintCreate, user_id: int | None = None) -> Complaint:
    if payload.technician_id is not None:
        contact_service.get_assignable_contact(payload.technician_id)
    values = payload.model_dump()
    values.update(_resolution_fields(None, payload.status))
    return crud.create_record(Complaint, values, user_id=user_id)


def update_complaint(
    complaint_id: int, payload: ComplaintUpdate, user_id: int | None = None
) -> Complaint:
    """
    Apply a partial update.

    Raises:
        InvalidTransitionError: If the status move is not allowed.
        ValidationError: If the resulting end time precedes the start, or
                         the technician cannot be assigned work.
    """
    complaint = get_complaint(complaint_id)
    values = changes(payload)
    status = values.get("status")
    if status is not None and status != complaint.status:
        if not can_transition(COMPLAINT_TRANSITIONS, complaint.status, status):
            raise InvalidTransitionError("Complaint", complaint.status, status)
        values.update(_resolution_fields(complaint.status, status))
    if values.get("technician_id") is not None:
        contact_service.get_assignable_contact(values["technician_id"])

    # Either bound may come from the stored record.
    start = values.get("scheduled_start", complaint.scheduled_start)
    end = values.get("scheduled_end", complaint.scheduled_end)
    if start is not None and end is not None and end < start:
        raise ValidationError("scheduled_end: cannot be before scheduled_start")

    return crud.update_record(complaint, values, user_id=user_id)


def set_status(
    complaint_id: int, status: ComplaintStatus, user_id: int | None = None
) -> Complaint:
    """Move a complaint to ``status`` (used by the scheduler)."""
    return update_complaint(
        complaint_id, ComplaintUpdate(status=status), user_id=user_id
    )


def delete_complaint(complaint_id: int, user_id: int | None = None) -> None:
    """Hard-delete a complaint; jobs raised from it keep existing."""
    crud.delete_record(get_complaint(complaint_id), user_id=user_id)
