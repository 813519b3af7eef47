"""
Leave service — leave requests, approvals and the leave calendar.

Requests move through ``LEAVE_TRANSITIONS``: pending requests can be
approved, rejected or cancelled; approved requests can still be
cancelled.  ``total_days`` always counts both ends of the range.
Approvals and rejections are announced to every active user.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Any

from sqlalchemy import or_

from facilitydesk.exceptions import InvalidTransitionError, ValidationError
from facilitydesk.models.enums import (
    LEAVE_TRANSITIONS,
    LeaveStatus,
    LeaveType,
    can_transition,
)
from facilitydesk.models.staff import LeaveRequest, Staff
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.staff import LeaveCreate, LeaveUpdate
from facilitydesk.services import crud, notification_service, staff_service
from facilitydesk.services.attendance_service import month_bounds

logger = logging.getLogger(__name__)


def inclusive_days(start_date: date, end_date: date) -> int:
    """Number of calendar days in ``[start_date, end_date]``."""
    return (end_date - start_date).days + 1


# =========================================================================
# Queries
# =========================================================================


def get_leave_requests(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    status: LeaveStatus | None = None,
    leave_type: LeaveType | None = None,
    staff_id: int | None = None,
):
    """
    Return a page of leave requests, newest start date first.

    Args:
        search: Case-insensitive match on staff name or employee id.
    """
    query = LeaveRequest.query.join(Staff).order_by(
        LeaveRequest.start_date.desc(), LeaveRequest.id.desc()
    )
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(Staff.name.ilike(pattern), Staff.employee_id.ilike(pattern))
        )
    if status is not None:
        query = query.filter(LeaveRequest.status == status)
    if leave_type is not None:
        query = query.filter(LeaveRequest.leave_type == leave_type)
    if staff_id is not None:
        query = query.filter(LeaveRequest.staff_id == staff_id)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_leave_request(leave_id: int) -> LeaveRequest:
    return crud.get_or_raise(LeaveRequest, leave_id, "Leave request")


def get_leave_calendar(year: int, month: int) -> dict[str, list[dict[str, Any]]]:
    """
    Approved leave overlapping a month, grouped by ISO date.

    Only the days that fall inside the month are listed.
    """
    first, last = month_bounds(year, month)
    requests = (
        LeaveRequest.query.filter(
            LeaveRequest.status == LeaveStatus.APPROVED,
            LeaveRequest.start_date <= last,
            LeaveRequest.end_date >= first,
        )
        .order_by(LeaveRequest.start_date, LeaveRequest.id)
        .all()
    )

    days: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for leave in requests:
        day = max(leave.start_date, first)
        end = min(leave.end_date, last)
        while day <= end:
            days[day.isoformat()].append(
                {
                    "leave_id": leave.id,
                    "staff_id": leave.staff_id,
                    "staff_name": leave.staff.name,
                    "leave_type": leave.leave_type.value,
                }
            )
            day += timedelta(days=1)
    return dict(sorted(days.items()))


# =========================================================================
# Writes
# =========================================================================


def create_leave_request(
    payload: LeaveCreate, user_id: int | None = None
) -> LeaveRequest:
    """Create a pending request for an existing staff member."""
    staff_service.get_staff(payload.staff_id)
    values = payload.model_dump()
    values["total_days"] = inclusive_days(payload.start_date, payload.end_date)
    values["status"] = LeaveStatus.PENDING
    return crud.create_record(LeaveRequest, values, user_id=user_id)


def update_leave_request(
    leave_id: int, payload: LeaveUpdate, user_id: int | None = None
) -> LeaveRequest:
    """
    Edit the type, dates or reason of a pending request.

    Raises:
        ValidationError: If the request is no longer pending or the
            resulting end date precedes the start date.
    """
    leave = get_leave_request(leave_id)
    if leave.status != LeaveStatus.PENDING:
        raise ValidationError(
            f"status: only pending requests can be edited (is '{leave.status.value}')"
        )
    values = changes(payload)
    start_date = values.get("start_date", leave.start_date)
    end_date = values.get("end_date", leave.end_date)
    if end_date < start_date:
        raise ValidationError("end_date: cannot be before start_date")
    values["total_days"] = inclusive_days(start_date, end_date)
    return crud.update_record(leave, values, user_id=user_id)


def _transition(
    leave: LeaveRequest, status: LeaveStatus, values: dict, user_id: int | None
) -> LeaveRequest:
    if not can_transition(LEAVE_TRANSITIONS, leave.status, status) or leave.status == status:
        raise InvalidTransitionError("Leave request", leave.status, status)
    values["status"] = status
    record = crud.update_record(leave, values, user_id=user_id)
    logger.info("Leave request ID %d %s", leave.id, status.value)
    if status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        _notify_decision(record, user_id)
    return record


def _notify_decision(leave: LeaveRequest, user_id: int | None) -> None:
    notification_service.notify(
        module="leave",
        action=leave.status.value,
        entity_id=leave.id,
        message=(
            f"Leave request for {leave.staff.name} "
            f"({leave.start_date.isoformat()} to {leave.end_date.isoformat()}) "
            f"{leave.status.value}"
        ),
        created_by=user_id,
    )


def approve_leave_request(leave_id: int, user_id: int | None = None) -> LeaveRequest:
    """Approve a pending request, recording the approver and time."""
    leave = get_leave_request(leave_id)
    return _transition(
        leave,
        LeaveStatus.APPROVED,
        {"approved_by": user_id, "approved_at": crud.utcnow()},
        user_id,
    )


def reject_leave_request(
    leave_id: int, rejection_reason: str | None = None, user_id: int | None = None
) -> LeaveRequest:
    """Reject a pending request with an optional reason."""
    leave = get_leave_request(leave_id)
    return _transition(
        leave,
        LeaveStatus.REJECTED,
        {"rejection_reason": rejection_reason},
        user_id,
    )


def cancel_leave_request(leave_id: int, user_id: int | None = None) -> LeaveRequest:
    """Cancel a pending or approved request."""
    leave = get_leave_request(leave_id)
    return _transition(leave, LeaveStatus.CANCELLED, {}, user_id)


def delete_leave_request(leave_id: int, user_id: int | None = None) -> None:
    crud.delete_record(get_leave_request(leave_id), user_id=user_id)
