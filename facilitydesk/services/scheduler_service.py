"""
Scheduler service — job (work order) operations behind the calendar.

Unlike the module-level services, the scheduler is an explicit object
constructed with a session and handed to the views that need it, so
the calendar, the job list and the complaint hand-off all share one
set of operations without any module-level state.

Usage::

    scheduler = SchedulerService(db.session)
    job = scheduler.assign_job(job_id, technician_id, user_id=current_user_id())
"""

import logging
from datetime import date, time

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from facilitydesk.exceptions import (
    InvalidTransitionError,
    RecordNotFoundError,
    ValidationError,
)
from facilitydesk.extensions import db
from facilitydesk.models.enums import (
    JOB_TRANSITIONS,
    ComplaintStatus,
    JobStatus,
    can_transition,
)
from facilitydesk.models.scheduler import Contact, Job
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.scheduler import ComplaintJobCreate, JobCreate, JobUpdate
from facilitydesk.services import (
    audit_service,
    complaint_service,
    contact_service,
    crud,
)

logger = logging.getLogger(__name__)

WORK_ORDER_PREFIX = "WO"


def next_work_order_number(issued_on: date | None = None) -> str:
    """
    Return the next free work order number for ``issued_on`` (default:
    today, UTC), e.g. ``WO-20240315-0003``.

    Numbers restart at 0001 each day.  Pending jobs in the session are
    flushed first, so several jobs created in one transaction get
    consecutive numbers.  The unique constraint on the column guards
    against two requests taking the same number.
    """
    issued_on = issued_on or crud.utcnow().date()
    prefix = f"{WORK_ORDER_PREFIX}-{issued_on:%Y%m%d}-"
    latest = (
        db.session.query(func.max(Job.work_order_number))
        .filter(Job.work_order_number.like(f"{prefix}%"))
        .scalar()
    )
    sequence = int(latest.rsplit("-", 1)[1]) + 1 if latest else 1
    return f"{prefix}{sequence:04d}"


class SchedulerService:
    """Job operations used by the scheduler views."""

    def __init__(self, session: Session):
        self.session = session

    # -- Reads -------------------------------------------------------------

    def fetch_all(self) -> dict[str, list]:
        """Return every job (by date and start time) and the assignable contacts."""
        jobs = (
            self.session.query(Job)
            .order_by(Job.scheduled_date, Job.scheduled_start, Job.id)
            .all()
        )
        return {
            "jobs": jobs,
            "contacts": contact_service.get_assignable_contacts(),
        }

    def list_jobs(
        self,
        page: int = 1,
        per_page: int = 10,
        status: JobStatus | None = None,
        technician_id: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        search: str | None = None,
    ):
        """
        Return a page of jobs ordered by date and start time.

        Args:
            search: Case-insensitive match on title, description or
                    work order number.
        """
        query = self.session.query(Job).order_by(
            Job.scheduled_date, Job.scheduled_start, Job.id
        )
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Job.title.ilike(pattern),
                    Job.description.ilike(pattern),
                    Job.work_order_number.ilike(pattern),
                )
            )
        if status is not None:
            query = query.filter(Job.status == status)
        if technician_id is not None:
            query = query.filter(Job.technician_id == technician_id)
        if date_from is not None:
            query = query.filter(Job.scheduled_date >= date_from)
        if date_to is not None:
            query = query.filter(Job.scheduled_date <= date_to)
        return query.paginate(page=page, per_page=per_page, error_out=False)

    def get_job(self, job_id: int) -> Job:
        job = self.session.get(Job, job_id)
        if job is None:
            raise RecordNotFoundError("Job", job_id)
        return job

    def get_job_history(self, job_id: int) -> list[dict]:
        """Audit trail of one work order, newest first."""
        job = self.get_job(job_id)
        return audit_service.get_entity_history(Job.__tablename__, job.id)

    # -- Writes ------------------------------------------------------------

    def add_job(self, payload: JobCreate, user_id: int | None = None) -> Job:
        """
        Create a job with the next work order number.  An assigned
        technician must be assignable.
        """
        if payload.technician_id is not None:
            self._require_assignable(payload.technician_id)
        values = payload.model_dump()
        values["work_order_number"] = next_work_order_number()
        return crud.create_record(Job, values, user_id=user_id)

    def update_job(
        self, job_id: int, payload: JobUpdate, user_id: int | None = None
    ) -> Job:
        """
        Apply a partial update to a job.

        Raises:
            InvalidTransitionError: If the status move is not allowed.
            ValidationError: If the resulting end time precedes the start.
        """
        job = self.get_job(job_id)
        values = changes(payload)

        status = values.get("status")
        if status is not None and not can_transition(JOB_TRANSITIONS, job.status, status):
            raise InvalidTransitionError("Job", job.status, status)
        if values.get("technician_id") is not None:
            self._require_assignable(values["technician_id"])

        start = values.get("scheduled_start", job.scheduled_start)
        end = values.get("scheduled_end", job.scheduled_end)
        if end < start:
            raise ValidationError("scheduled_end: cannot be before scheduled_start")

        return crud.update_record(job, values, user_id=user_id)

    def delete_job(self, job_id: int, user_id: int | None = None) -> None:
        """Hard-delete a job; a linked complaint is left untouched."""
        crud.delete_record(self.get_job(job_id), user_id=user_id)

    def assign_job(
        self, job_id: int, technician_id: int, user_id: int | None = None
    ) -> Job:
        """
        Assign a technician and move the job to ``in_progress``.

        Raises:
            InvalidTransitionError: If the job is already complete.
        """
        job = self.get_job(job_id)
        self._require_assignable(technician_id)
        if not can_transition(JOB_TRANSITIONS, job.status, JobStatus.IN_PROGRESS):
            raise InvalidTransitionError("Job", job.status, JobStatus.IN_PROGRESS)

        logger.info("Assigning job ID %d to contact ID %d", job_id, technician_id)
        return crud.update_record(
            job,
            {"technician_id": technician_id, "status": JobStatus.IN_PROGRESS},
            user_id=user_id,
        )

    def reschedule_job(
        self,
        job_id: int,
        scheduled_date: date,
        scheduled_start: time,
        scheduled_end: time,
        user_id: int | None = None,
    ) -> Job:
        """Move a job to a new date and time slot.  Overlaps are allowed."""
        if scheduled_end < scheduled_start:
            raise ValidationError("scheduled_end: cannot be before scheduled_start")
        job = self.get_job(job_id)
        return crud.update_record(
            job,
            {
                "scheduled_date": scheduled_date,
                "scheduled_start": scheduled_start,
                "scheduled_end": scheduled_end,
            },
            user_id=user_id,
        )

    def create_job_from_complaint(
        self,
        complaint_id: int,
        payload: ComplaintJobCreate,
        user_id: int | None = None,
    ) -> Job:
        """
        Raise a work order for a complaint and move the complaint to
        ``in_progress``.

        The job and the complaint are committed separately: if the
        complaint update fails the job is kept.
        """
        complaint = complaint_service.get_complaint(complaint_id)
        job = self.add_job(
            JobCreate(
                title=payload.title or complaint.title,
                description=payload.description or complaint.description,
                scheduled_date=payload.scheduled_date,
                scheduled_start=payload.scheduled_start,
                scheduled_end=payload.scheduled_end,
                technician_id=payload.technician_id,
                complaint_id=complaint.id,
            ),
            user_id=user_id,
        )
        if complaint.status != ComplaintStatus.IN_PROGRESS:
            complaint_service.set_status(
                complaint.id, ComplaintStatus.IN_PROGRESS, user_id=user_id
            )
        return job

    # -- Helpers -----------------------------------------------------------

    def _require_assignable(self, contact_id: int) -> Contact:
        return contact_service.get_assignable_contact(contact_id)
