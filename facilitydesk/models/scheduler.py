"""
Scheduler models: work orders (jobs), complaints and contacts.

Jobs and complaints both appear on the scheduler calendar.  A job may
point at the complaint it was raised for; that link is weak (no
cascade) so deleting either side leaves the other intact.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import (
    ComplaintStatus,
    ContactType,
    JobStatus,
    Priority,
    enum_type,
)
from facilitydesk.models.mixins import SerializerMixin


class Contact(SerializerMixin, db.Model):
    """
    Address-book entry: contractors, suppliers, technicians, residents.

    Only the types listed in ``ASSIGNABLE_CONTACT_TYPES`` can be
    assigned to a job.
    """

    __tablename__ = "contacts"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    company = db.Column(db.String(200), nullable=True)
    email = db.Column(db.String(200), nullable=True)
    phone = db.Column(db.String(50), nullable=True)
    address = db.Column(db.Text, nullable=True)
    contact_type = db.Column(
        enum_type(ContactType), nullable=False, default=ContactType.OTHERS
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<Contact {self.name} type={self.contact_type}>"


class Job(SerializerMixin, db.Model):
    """A work order placed on the scheduler calendar."""

    __tablename__ = "jobs"
    __table_args__ = (
        db.CheckConstraint(
            "scheduled_end >= scheduled_start", name="CK_job_end_after_start"
        ),
        db.UniqueConstraint("work_order_number", name="UQ_jobs_work_order_number"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    # Readable number such as WO-20240315-0001, issued on creation.
    work_order_number = db.Column(db.String(20), nullable=True)
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        enum_type(JobStatus), nullable=False, default=JobStatus.PENDING
    )
    scheduled_date = db.Column(db.Date, nullable=False, index=True)
    scheduled_start = db.Column(db.Time, nullable=False)
    scheduled_end = db.Column(db.Time, nullable=False)
    technician_id = db.Column(
        db.Integer,
        db.ForeignKey("contacts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    complaint_id = db.Column(
        db.Integer,
        db.ForeignKey("complaints.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    technician = db.relationship("Contact")
    complaint = db.relationship("Complaint")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["technician_name"] = self.technician.name if self.technician else None
        return data

    def __repr__(self) -> str:
        return f"<Job {self.title} status={self.status}>"


class Complaint(SerializerMixin, db.Model):
    """
    Resident or staff complaint.

    ``resolved_at`` is stamped when the status becomes ``resolved`` or
    ``closed`` and cleared on reopen.  A complaint with a
    ``scheduled_date`` shows on the calendar unless a job references it.
    """

    __tablename__ = "complaints"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    priority = db.Column(
        enum_type(Priority), nullable=False, default=Priority.MEDIUM
    )
    status = db.Column(
        enum_type(ComplaintStatus), nullable=False, default=ComplaintStatus.OPEN
    )
    property_unit = db.Column(db.String(100), nullable=True)
    scheduled_date = db.Column(db.Date, nullable=True, index=True)
    scheduled_start = db.Column(db.Time, nullable=True)
    scheduled_end = db.Column(db.Time, nullable=True)
    technician_id = db.Column(
        db.Integer,
        db.ForeignKey("contacts.id", ondelete="SET NULL"),
        nullable=True,
    )
    resolved_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    technician = db.relationship("Contact")

    def __repr__(self) -> str:
        return f"<Complaint {self.title} status={self.status}>"
