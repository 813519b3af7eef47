"""Scheduler request payloads: jobs, complaints, contacts, calendar drops."""

from datetime import date, datetime, time
from typing import Literal

from pydantic import model_validator

from facilitydesk.models.enums import ComplaintStatus, ContactType, JobStatus, Priority
from facilitydesk.schemas.common import PayloadModel, reject_nulls


def _check_time_range(start: time | None, end: time | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("scheduled_end cannot be before scheduled_start")


# -- Jobs ------------------------------------------------------------------


class JobCreate(PayloadModel):
    title: str
    description: str | None = None
    status: JobStatus = JobStatus.PENDING
    scheduled_date: date
    scheduled_start: time
    scheduled_end: time
    technician_id: int | None = None
    complaint_id: int | None = None

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


class JobUpdate(PayloadModel):
    title: str | None = None
    description: str | None = None
    status: JobStatus | None = None
    scheduled_date: date | None = None
    scheduled_start: time | None = None
    scheduled_end: time | None = None
    technician_id: int | None = None
    complaint_id: int | None = None

    _required = reject_nulls(
        "title", "status", "scheduled_date", "scheduled_start", "scheduled_end"
    )

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


class JobAssign(PayloadModel):
    technician_id: int


class JobReschedule(PayloadModel):
    scheduled_date: date
    scheduled_start: time
    scheduled_end: time

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


class ComplaintJobCreate(PayloadModel):
    """Body for raising a work order from a complaint."""

    title: str | None = None
    description: str | None = None
    scheduled_date: date
    scheduled_start: time
    scheduled_end: time
    technician_id: int | None = None

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


# -- Calendar --------------------------------------------------------------


class CalendarDrop(PayloadModel):
    """A drag-and-drop gesture: the event's new start and end."""

    kind: Literal["job", "complaint"]
    id: int
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_range(self):
        if self.end < self.start:
            raise ValueError("end cannot be before start")
        return self


# -- Complaints ------------------------------------------------------------


class ComplaintCreate(PayloadModel):
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    status: ComplaintStatus = ComplaintStatus.OPEN
    property_unit: str | None = None
    scheduled_date: date | None = None
    scheduled_start: time | None = None
    scheduled_end: time | None = None
    technician_id: int | None = None

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


class ComplaintUpdate(PayloadModel):
    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    status: ComplaintStatus | None = None
    property_unit: str | None = None
    scheduled_date: date | None = None
    scheduled_start: time | None = None
    scheduled_end: time | None = None
    technician_id: int | None = None

    _required = reject_nulls("title", "priority", "status")

    @model_validator(mode="after")
    def check_times(self):
        _check_time_range(self.scheduled_start, self.scheduled_end)
        return self


# -- Contacts --------------------------------------------------------------


class ContactCreate(PayloadModel):
    name: str
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    contact_type: ContactType = ContactType.OTHERS
    notes: str | None = None


class ContactUpdate(PayloadModel):
    name: str | None = None
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    contact_type: ContactType | None = None
    notes: str | None = None

    _required = reject_nulls("name", "contact_type")
