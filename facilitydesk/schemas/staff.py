"""Staff, attendance and leave request payloads."""

import datetime as dt

from pydantic import model_validator

from facilitydesk.models.enums import AttendanceStatus, LeaveType, StaffStatus
from facilitydesk.schemas.common import PayloadModel, reject_nulls


# -- Staff -----------------------------------------------------------------


class StaffCreate(PayloadModel):
    employee_id: str
    name: str
    email: str
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    hire_date: dt.date | None = None
    status: StaffStatus = StaffStatus.ACTIVE


class StaffUpdate(PayloadModel):
    employee_id: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    hire_date: dt.date | None = None
    status: StaffStatus | None = None

    _required = reject_nulls("employee_id", "name", "email", "status")


# -- Attendance ------------------------------------------------------------


class AttendanceSubmit(PayloadModel):
    """
    One attendance submission.  Re-submitting for the same staff member
    and date overwrites the earlier record.
    """

    staff_id: int
    date: dt.date
    check_in: dt.time | None = None
    check_out: dt.time | None = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    notes: str | None = None


class AttendanceUpdate(PayloadModel):
    check_in: dt.time | None = None
    check_out: dt.time | None = None
    status: AttendanceStatus | None = None
    notes: str | None = None

    _required = reject_nulls("status")


# -- Leave -----------------------------------------------------------------


class LeaveCreate(PayloadModel):
    staff_id: int
    leave_type: LeaveType = LeaveType.ANNUAL
    start_date: dt.date
    end_date: dt.date
    reason: str | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class LeaveUpdate(PayloadModel):
    leave_type: LeaveType | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    reason: str | None = None

    _required = reject_nulls("leave_type", "start_date", "end_date")


class LeaveReject(PayloadModel):
    rejection_reason: str | None = None
