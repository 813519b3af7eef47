"""
Routes for the scheduler blueprint.

Job operations go through a ``SchedulerService`` built per request on
the current database session.
"""

from flask_login import login_required

from facilitydesk.blueprints.helpers import (
    arg_date,
    arg_enum,
    arg_int,
    arg_str,
    current_user_id,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.blueprints.scheduler import bp
from facilitydesk.decorators import confirmation_required
from facilitydesk.extensions import db
from facilitydesk.models.enums import ComplaintStatus, ContactType, JobStatus, Priority
from facilitydesk.schemas.scheduler import (
    CalendarDrop,
    ComplaintCreate,
    ComplaintJobCreate,
    ComplaintUpdate,
    ContactCreate,
    ContactUpdate,
    JobAssign,
    JobCreate,
    JobReschedule,
    JobUpdate,
)
from facilitydesk.services import calendar_service, complaint_service, contact_service
from facilitydesk.services.scheduler_service import SchedulerService


def _scheduler() -> SchedulerService:
    return SchedulerService(db.session)


# =========================================================================
# Overview and calendar
# =========================================================================


@bp.route("", methods=["GET"])
@login_required
def overview():
    """Every job plus the contacts that can be assigned to one."""
    data = _scheduler().fetch_all()
    return {
        "jobs": [job.to_dict() for job in data["jobs"]],
        "contacts": [contact.to_dict() for contact in data["contacts"]],
    }


@bp.route("/calendar", methods=["GET"])
@login_required
def calendar():
    """
    Calendar events ordered by start.

    Query params: ``start`` and ``end`` (inclusive ISO dates).
    """
    events = calendar_service.get_calendar_events(
        start=arg_date("start"), end=arg_date("end")
    )
    return {"events": [event.to_dict() for event in events]}


@bp.route("/calendar/drop", methods=["POST"])
@login_required
def calendar_drop():
    """Apply a drag-and-drop: ``{"kind", "id", "start", "end"}``."""
    payload = json_payload(CalendarDrop)
    record = calendar_service.reschedule_event(
        payload.kind,
        payload.id,
        payload.start,
        payload.end,
        user_id=current_user_id(),
    )
    return record.to_dict()


# =========================================================================
# Jobs
# =========================================================================


@bp.route("/jobs", methods=["GET"])
@login_required
def list_jobs():
    """
    Paginated job list.

    Query params: ``search`` (title, description or work order number),
    ``status``, ``technician_id``, ``date_from``, ``date_to``, ``page``,
    ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = _scheduler().list_jobs(
        page=page,
        per_page=per_page,
        status=arg_enum("status", JobStatus),
        technician_id=arg_int("technician_id"),
        date_from=arg_date("date_from"),
        date_to=arg_date("date_to"),
        search=arg_str("search"),
    )
    return paginated(pagination)


@bp.route("/jobs", methods=["POST"])
@login_required
def create_job():
    payload = json_payload(JobCreate)
    job = _scheduler().add_job(payload, user_id=current_user_id())
    return job.to_dict(), 201


@bp.route("/jobs/<int:job_id>", methods=["GET"])
@login_required
def get_job(job_id):
    return _scheduler().get_job(job_id).to_dict()


@bp.route("/jobs/<int:job_id>/history", methods=["GET"])
@login_required
def job_history(job_id):
    """Every recorded change to a work order, newest first."""
    scheduler = _scheduler()
    job = scheduler.get_job(job_id)
    return {
        "work_order_number": job.work_order_number,
        "items": scheduler.get_job_history(job.id),
    }


@bp.route("/jobs/<int:job_id>", methods=["PATCH"])
@login_required
def update_job(job_id):
    payload = json_payload(JobUpdate)
    job = _scheduler().update_job(job_id, payload, user_id=current_user_id())
    return job.to_dict()


@bp.route("/jobs/<int:job_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_job(job_id):
    _scheduler().delete_job(job_id, user_id=current_user_id())
    return "", 204


@bp.route("/jobs/<int:job_id>/assign", methods=["POST"])
@login_required
def assign_job(job_id):
    payload = json_payload(JobAssign)
    job = _scheduler().assign_job(
        job_id, payload.technician_id, user_id=current_user_id()
    )
    return job.to_dict()


@bp.route("/jobs/<int:job_id>/reschedule", methods=["POST"])
@login_required
def reschedule_job(job_id):
    payload = json_payload(JobReschedule)
    job = _scheduler().reschedule_job(
        job_id,
        payload.scheduled_date,
        payload.scheduled_start,
        payload.scheduled_end,
        user_id=current_user_id(),
    )
    return job.to_dict()


# =========================================================================
# Complaints
# =========================================================================


@bp.route("/complaints", methods=["GET"])
@login_required
def list_complaints():
    page, per_page = get_pagination_args()
    pagination = complaint_service.get_complaints(
        page=page,
        per_page=per_page,
        status=arg_enum("status", ComplaintStatus),
        priority=arg_enum("priority", Priority),
    )
    return paginated(pagination)


@bp.route("/complaints", methods=["POST"])
@login_required
def create_complaint():
    payload = json_payload(ComplaintCreate)
    complaint = complaint_service.create_complaint(payload, user_id=current_user_id())
    return complaint.to_dict(), 201


@bp.route("/complaints/<int:complaint_id>", methods=["GET"])
@login_required
def get_complaint(complaint_id):
    return complaint_service.get_complaint(complaint_id).to_dict()


@bp.route("/complaints/<int:complaint_id>", methods=["PATCH"])
@login_required
def update_complaint(complaint_id):
    payload = json_payload(ComplaintUpdate)
    complaint = complaint_service.update_complaint(
        complaint_id, payload, user_id=current_user_id()
    )
    return complaint.to_dict()


@bp.route("/complaints/<int:complaint_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_complaint(complaint_id):
    complaint_service.delete_complaint(complaint_id, user_id=current_user_id())
    return "", 204


@bp.route("/complaints/<int:complaint_id>/job", methods=["POST"])
@login_required
def create_job_from_complaint(complaint_id):
    """Raise a work order for a complaint and mark it ``in_progress``."""
    payload = json_payload(ComplaintJobCreate)
    job = _scheduler().create_job_from_complaint(
        complaint_id, payload, user_id=current_user_id()
    )
    return job.to_dict(), 201


# =========================================================================
# Contacts
# =========================================================================


@bp.route("/contacts", methods=["GET"])
@login_required
def list_contacts():
    page, per_page = get_pagination_args()
    pagination = contact_service.get_contacts(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        contact_type=arg_enum("contact_type", ContactType),
    )
    return paginated(pagination)


@bp.route("/contacts", methods=["POST"])
@login_required
def create_contact():
    payload = json_payload(ContactCreate)
    contact = contact_service.create_contact(payload, user_id=current_user_id())
    return contact.to_dict(), 201


@bp.route("/contacts/<int:contact_id>", methods=["GET"])
@login_required
def get_contact(contact_id):
    return contact_service.get_contact(contact_id).to_dict()


@bp.route("/contacts/<int:contact_id>", methods=["PATCH"])
@login_required
def update_contact(contact_id):
    payload = json_payload(ContactUpdate)
    contact = contact_service.update_contact(
        contact_id, payload, user_id=current_user_id()
    )
    return contact.to_dict()


@bp.route("/contacts/<int:contact_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_contact(contact_id):
    contact_service.delete_contact(contact_id, user_id=current_user_id())
    return "", 204
