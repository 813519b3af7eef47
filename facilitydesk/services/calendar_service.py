"""
Calendar service — merges jobs and complaints into one event list and
turns drag-and-drop gestures back into date/time field updates.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable

from facilitydesk.exceptions import ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.scheduler import Complaint, Job
from facilitydesk.services import complaint_service, crud
from facilitydesk.services.scheduler_service import SchedulerService

logger = logging.getLogger(__name__)

KIND_JOB = "job"
KIND_COMPLAINT = "complaint"

# Jobs sort ahead of complaints that start at the same moment.
_KIND_ORDER = {KIND_JOB: 0, KIND_COMPLAINT: 1}


@dataclass
class CalendarEvent:
    """One entry on the scheduler calendar."""

    kind: str
    record_id: int
    title: str
    start: datetime
    end: datetime
    all_day: bool
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": f"{self.kind}-{self.record_id}",
            "kind": self.kind,
            "record_id": self.record_id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "all_day": self.all_day,
            "status": self.status,
        }


def build_calendar_events(
    jobs: Iterable[Job], complaints: Iterable[Complaint]
) -> list[CalendarEvent]:
    """
    Merge jobs and complaints into a list ordered by start.

    A complaint is shown only when it has a ``scheduled_date`` and no job
    references it; one without times becomes an all-day event.
    """
    jobs = list(jobs)
    linked_complaints = {job.complaint_id for job in jobs if job.complaint_id}

    events = [
        CalendarEvent(
            kind=KIND_JOB,
            record_id=job.id,
            title=job.title,
            start=datetime.combine(job.scheduled_date, job.scheduled_start),
            end=datetime.combine(job.scheduled_date, job.scheduled_end),
            all_day=False,
            status=job.status.value,
        )
        for job in jobs
    ]

    for complaint in complaints:
        if complaint.scheduled_date is None or complaint.id in linked_complaints:
            continue
        if complaint.scheduled_start is None or complaint.scheduled_end is None:
            start = datetime.combine(complaint.scheduled_date, time.min)
            end = start + timedelta(days=1)
            all_day = True
        else:
            start = datetime.combine(complaint.scheduled_date, complaint.scheduled_start)
            end = datetime.combine(complaint.scheduled_date, complaint.scheduled_end)
            all_day = False
        events.append(
            CalendarEvent(
                kind=KIND_COMPLAINT,
                record_id=complaint.id,
                title=complaint.title,
                start=start,
                end=end,
                all_day=all_day,
                status=complaint.status.value,
            )
        )

    # sort() is stable, so equal keys keep their insertion order.
    events.sort(key=lambda event: (event.start, _KIND_ORDER[event.kind]))
    return events


def get_calendar_events(
    start: date | None = None, end: date | None = None
) -> list[CalendarEvent]:
    """
    Load jobs and complaints and build the calendar.

    The optional window limits both by ``scheduled_date`` (inclusive).
    Suppression uses every job, so a complaint whose job falls outside
    the window stays hidden.
    """
    if start is not None and end is not None and end < start:
        raise ValidationError("end: cannot be before start")

    all_jobs = Job.query.all()
    linked = {job.complaint_id for job in all_jobs if job.complaint_id}

    complaints = Complaint.query.filter(Complaint.scheduled_date.isnot(None))
    if start is not None:
        complaints = complaints.filter(Complaint.scheduled_date >= start)
    if end is not None:
        complaints = complaints.filter(Complaint.scheduled_date <= end)

    jobs_in_window = [
        job for job in all_jobs
        if (start is None or job.scheduled_date >= start)
        and (end is None or job.scheduled_date <= end)
    ]
    events = build_calendar_events(
        jobs_in_window,
        [complaint for complaint in complaints if complaint.id not in linked],
    )
    return events


def reschedule_event(
    kind: str,
    record_id: int,
    start: datetime,
    end: datetime,
    user_id: int | None = None,
) -> Job | Complaint:
    """
    Apply a drop gesture: ``scheduled_date = start.date()``,
    ``scheduled_start = start.time()``, ``scheduled_end = end.time()``.

    No overlap detection is performed.

    Raises:
        ValidationError: If ``end`` precedes ``start`` or ``kind`` is unknown.
    """
    if end < start:
        raise ValidationError("end: cannot be before start")

    new_date = start.date()
    new_start = start.time().replace(second=0, microsecond=0)
    new_end = end.time().replace(second=0, microsecond=0)
    # A drop that spills past midnight is clipped to the end of the day.
    if end.date() > new_date:
        new_end = time(23, 59)

    if kind == KIND_JOB:
        scheduler = SchedulerService(db.session)
        record = scheduler.reschedule_job(
            record_id, new_date, new_start, new_end, user_id=user_id
        )
    elif kind == KIND_COMPLAINT:
        complaint = complaint_service.get_complaint(record_id)
        record = crud.update_record(
            complaint,
            {
                "scheduled_date": new_date,
                "scheduled_start": new_start,
                "scheduled_end": new_end,
            },
            user_id=user_id,
        )
    else:
        raise ValidationError(f"kind: unknown event kind '{kind}'")

    logger.info(
        "Rescheduled %s ID %d to %s %s-%s",
        kind,
        record_id,
        new_date,
        new_start.strftime("%H:%M"),
        new_end.strftime("%H:%M"),
    )
    return record
