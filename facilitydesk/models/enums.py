"""
Closed value sets for every status, priority and type column.

Each enum is a ``str`` subclass so members compare equal to their wire
values and serialize cleanly to JSON.  Entities with a lifecycle also
carry a transition table: the service layer refuses any status change
that is not listed.
"""

from enum import Enum

from facilitydesk.extensions import db


def enum_type(enum_cls: type[Enum]) -> db.Enum:
    """
    Build a non-native SQLAlchemy Enum that stores the member *values*.

    A CHECK constraint is emitted so the database rejects values that
    bypass the service layer.
    """
    return db.Enum(
        enum_cls,
        native_enum=False,
        create_constraint=True,
        validate_strings=True,
        length=20,
        values_callable=lambda members: [member.value for member in members],
    )


# =========================================================================
# Shared
# =========================================================================


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# =========================================================================
# Assets and preventive maintenance
# =========================================================================


class AssetStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class FrequencyType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    CUSTOM = "custom"


class TaskStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


TASK_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.SCHEDULED: frozenset(
        {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.OVERDUE}
    ),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.COMPLETED, TaskStatus.OVERDUE}),
    TaskStatus.OVERDUE: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED}),
    TaskStatus.COMPLETED: frozenset(),
}

# Tasks in these states still need work and count towards "open" metrics.
OPEN_TASK_STATUSES = (TaskStatus.SCHEDULED, TaskStatus.IN_PROGRESS)


class AutomationRunStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    FAILED = "failed"


# =========================================================================
# Scheduler: jobs, complaints, contacts
# =========================================================================


class JobStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


JOB_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.IN_PROGRESS, JobStatus.COMPLETE}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.PENDING, JobStatus.COMPLETE}),
    JobStatus.COMPLETE: frozenset(),
}


class ComplaintStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


# Complaints may be reopened, so every move except a no-op is allowed
# apart from leaving ``closed`` for anything but ``open``.
COMPLAINT_TRANSITIONS: dict[ComplaintStatus, frozenset[ComplaintStatus]] = {
    ComplaintStatus.OPEN: frozenset(
        {ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED}
    ),
    ComplaintStatus.IN_PROGRESS: frozenset(
        {ComplaintStatus.OPEN, ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED}
    ),
    ComplaintStatus.RESOLVED: frozenset(
        {ComplaintStatus.OPEN, ComplaintStatus.IN_PROGRESS, ComplaintStatus.CLOSED}
    ),
    ComplaintStatus.CLOSED: frozenset({ComplaintStatus.OPEN}),
}

RESOLVED_COMPLAINT_STATUSES = (ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED)


class ContactType(str, Enum):
    CONTRACTOR = "contractor"
    SUPPLIER = "supplier"
    SERVICE_PROVIDER = "service_provider"
    TECHNICIAN = "technician"
    RESIDENT = "resident"
    GOVERNMENT = "government"
    OTHERS = "others"


# Contacts of these types can be assigned to jobs on the scheduler.
ASSIGNABLE_CONTACT_TYPES = (
    ContactType.SERVICE_PROVIDER,
    ContactType.CONTRACTOR,
    ContactType.SUPPLIER,
    ContactType.TECHNICIAN,
)


# =========================================================================
# Staff
# =========================================================================


class StaffStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    ON_LEAVE = "on_leave"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    EMERGENCY = "emergency"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"
    OTHER = "other"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset(
        {LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}
    ),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}


# =========================================================================
# Packages
# =========================================================================


class PackageType(str, Enum):
    STANDARD = "standard"
    FRAGILE = "fragile"
    PERISHABLE = "perishable"
    LARGE = "large"
    DOCUMENT = "document"


class PackageStatus(str, Enum):
    RECEIVED = "received"
    NOTIFIED = "notified"
    PICKED_UP = "picked_up"
    RETURNED = "returned"


PACKAGE_TRANSITIONS: dict[PackageStatus, frozenset[PackageStatus]] = {
    PackageStatus.RECEIVED: frozenset(
        {PackageStatus.NOTIFIED, PackageStatus.PICKED_UP, PackageStatus.RETURNED}
    ),
    PackageStatus.NOTIFIED: frozenset(
        {PackageStatus.PICKED_UP, PackageStatus.RETURNED}
    ),
    PackageStatus.PICKED_UP: frozenset(),
    PackageStatus.RETURNED: frozenset(),
}


def can_transition(table: dict, current, requested) -> bool:
    """Return True if ``current -> requested`` is allowed (or a no-op)."""
    if current == requested:
        return True
    return requested in table.get(current, frozenset())
