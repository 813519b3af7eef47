"""
Attendance service — daily attendance records and monthly statistics.

A submission is written with a single ``INSERT ... ON CONFLICT
(staff_id, date) DO UPDATE`` statement, so two back-to-back submissions
for the same person and day leave exactly one row holding the second
submission's values.
"""

import calendar
import logging
import math
from datetime import date, datetime, time
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite

from facilitydesk.exceptions import ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.enums import AttendanceStatus, StaffStatus
from facilitydesk.models.staff import Attendance, Staff
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.staff import AttendanceSubmit, AttendanceUpdate
from facilitydesk.services import audit_service, crud, staff_service

logger = logging.getLogger(__name__)

# Share of calendar days assumed to be working days in a month.
WORKING_DAY_RATIO = 0.7

# Dialect-specific INSERT constructs that support ON CONFLICT.
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def calculate_hours(check_in: time | None, check_out: time | None) -> float | None:
    """
    Hours between check-in and check-out, rounded to 2 decimals.

    Returns None unless both times are present.

    Raises:
        ValidationError: If check-out is before check-in.
    """
    if check_in is None or check_out is None:
        return None
    anchor = date(2000, 1, 1)
    delta = datetime.combine(anchor, check_out) - datetime.combine(anchor, check_in)
    if delta.total_seconds() < 0:
        raise ValidationError("check_out: cannot be before check_in")
    return round(delta.total_seconds() / 3600, 2)


# =========================================================================
# Queries
# =========================================================================


def get_attendance_list(
    page: int = 1,
    per_page: int = 10,
    staff_id: int | None = None,
    status: AttendanceStatus | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    """Return a page of attendance records, most recent day first."""
    query = Attendance.query.order_by(Attendance.date.desc(), Attendance.staff_id)
    if staff_id is not None:
        query = query.filter(Attendance.staff_id == staff_id)
    if status is not None:
        query = query.filter(Attendance.status == status)
    if date_from is not None:
        query = query.filter(Attendance.date >= date_from)
    if date_to is not None:
        query = query.filter(Attendance.date <= date_to)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a month."""
    if not 1 <= month <= 12:
        raise ValidationError("month: must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def get_monthly_attendance(
    year: int, month: int, staff_id: int | None = None
) -> list[Attendance]:
    """All attendance records in a month, ordered by day then staff."""
    first, last = month_bounds(year, month)
    query = Attendance.query.filter(
        Attendance.date >= first, Attendance.date <= last
    ).order_by(Attendance.date, Attendance.staff_id)
    if staff_id is not None:
        query = query.filter(Attendance.staff_id == staff_id)
    return query.all()


def get_attendance_stats(year: int, month: int) -> dict[str, Any]:
    """
    Monthly attendance statistics.

    Working days are assumed to be ``floor(days_in_month * 0.7)``; the
    attendance rate is the share of ``present`` records over
    ``working_days * active_staff``, as a whole percentage.
    """
    first, last = month_bounds(year, month)
    records = get_monthly_attendance(year, month)
    working_days = math.floor(last.day * WORKING_DAY_RATIO)
    active_staff = Staff.query.filter(Staff.status == StaffStatus.ACTIVE).count()

    counts = {status.value: 0 for status in AttendanceStatus}
    for record in records:
        counts[record.status.value] += 1

    expected = working_days * active_staff
    rate = round(counts["present"] / expected * 100) if expected else 0

    return {
        "year": year,
        "month": month,
        "period_start": first.isoformat(),
        "period_end": last.isoformat(),
        "working_days": working_days,
        "active_staff": active_staff,
        "present": counts["present"],
        "absent": counts["absent"],
        "late": counts["late"],
        "half_day": counts["half_day"],
        "on_leave": counts["on_leave"],
        "attendance_rate": rate,
    }


def get_attendance(attendance_id: int) -> Attendance:
    return crud.get_or_raise(Attendance, attendance_id, "Attendance")


# =========================================================================
# Writes
# =========================================================================


def submit_attendance(
    payload: AttendanceSubmit, user_id: int | None = None
) -> Attendance:
    """
    Create or replace the attendance record for ``(staff_id, date)``.

    Raises:
        RecordNotFoundError: If the staff member does not exist.
        ValidationError: If check-out is before check-in.
    """
    staff_service.get_staff(payload.staff_id)
    total_hours = calculate_hours(payload.check_in, payload.check_out)

    previous = Attendance.query.filter_by(
        staff_id=payload.staff_id, date=payload.date
    ).first()
    previous_value = previous.to_dict() if previous is not None else None

    now = crud.utcnow()
    values = {
        "staff_id": payload.staff_id,
        "date": payload.date,
        "check_in": payload.check_in,
        "check_out": payload.check_out,
        "total_hours": total_hours,
        "status": payload.status,
        "notes": payload.notes,
        "updated_at": now,
    }
    db.session.execute(_upsert_statement(values))

    record = (
        Attendance.query.filter_by(staff_id=payload.staff_id, date=payload.date)
        .populate_existing()
        .one()
    )
    audit_service.log_change(
        user_id=user_id,
        action_type="UPDATE" if previous_value else "CREATE",
        entity_type=Attendance.__tablename__,
        entity_id=record.id,
        previous_value=previous_value,
        new_value=record.to_dict(),
    )
    db.session.commit()

    logger.info(
        "Recorded attendance for staff ID %d on %s (%s)",
        payload.staff_id,
        payload.date,
        payload.status.value,
    )
    return record


def _upsert_statement(values: dict[str, Any]):
    """Build the ``INSERT ... ON CONFLICT DO UPDATE`` for the bound dialect."""
    dialect = db.session.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Attendance upsert is not supported on '{dialect}'.")

    stmt = insert(Attendance).values(**values)
    updatable = ("check_in", "check_out", "total_hours", "status", "notes", "updated_at")
    return stmt.on_conflict_do_update(
        index_elements=[Attendance.staff_id, Attendance.date],
        set_={column: stmt.excluded[column] for column in updatable},
    )


def update_attendance(
    attendance_id: int, payload: AttendanceUpdate, user_id: int | None = None
) -> Attendance:
    """Partially update a record; ``total_hours`` is recalculated."""
    record = get_attendance(attendance_id)
    values = changes(payload)
    check_in = values.get("check_in", record.check_in)
    check_out = values.get("check_out", record.check_out)
    values["total_hours"] = calculate_hours(check_in, check_out)
    return crud.update_record(record, values, user_id=user_id)


def delete_attendance(attendance_id: int, user_id: int | None = None) -> None:
    crud.delete_record(get_attendance(attendance_id), user_id=user_id)
