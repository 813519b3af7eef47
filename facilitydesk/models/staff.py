"""
Staff directory, attendance and leave models.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import (
    AttendanceStatus,
    LeaveStatus,
    LeaveType,
    StaffStatus,
    enum_type,
)
from facilitydesk.models.mixins import SerializerMixin


class Staff(SerializerMixin, db.Model):
    """
    Employee record.

    ``employee_id`` is the human-facing identifier printed on badges
    and used by CSV imports to detect duplicates.
    """

    __tablename__ = "staff"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    employee_id = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False, index=True)
    email = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(50), nullable=True)
    position = db.Column(db.String(100), nullable=True)
    department = db.Column(db.String(100), nullable=True, index=True)
    hire_date = db.Column(db.Date, nullable=True)
    status = db.Column(
        enum_type(StaffStatus), nullable=False, default=StaffStatus.ACTIVE
    )
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    attendance = db.relationship(
        "Attendance", back_populates="staff", cascade="all, delete-orphan"
    )
    leave_requests = db.relationship(
        "LeaveRequest", back_populates="staff", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Staff {self.employee_id} {self.name}>"


class Attendance(SerializerMixin, db.Model):
    """
    One attendance record per staff member per day.

    Written with an ``INSERT ... ON CONFLICT DO UPDATE`` so that a
    second submission for the same day replaces the first.
    """

    __tablename__ = "staff_attendance"
    __table_args__ = (
        db.UniqueConstraint("staff_id", "date", name="UQ_attendance_staff_date"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    staff_id = db.Column(
        db.Integer,
        db.ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date = db.Column(db.Date, nullable=False, index=True)
    check_in = db.Column(db.Time, nullable=True)
    check_out = db.Column(db.Time, nullable=True)
    total_hours = db.Column(db.Numeric(5, 2, asdecimal=False), nullable=True)
    status = db.Column(
        enum_type(AttendanceStatus),
        nullable=False,
        default=AttendanceStatus.PRESENT,
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    staff = db.relationship("Staff", back_populates="attendance")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["staff_name"] = self.staff.name if self.staff else None
        return data

    def __repr__(self) -> str:
        return f"<Attendance staff={self.staff_id} date={self.date}>"


class LeaveRequest(SerializerMixin, db.Model):
    """
    Leave application.

    ``total_days`` counts both ends of the range
    (``end_date - start_date + 1``).
    """

    __tablename__ = "leave_requests"
    __table_args__ = (
        db.CheckConstraint("end_date >= start_date", name="CK_leave_end_after_start"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    staff_id = db.Column(
        db.Integer,
        db.ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_type = db.Column(
        enum_type(LeaveType), nullable=False, default=LeaveType.ANNUAL
    )
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    total_days = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.Text, nullable=True)
    status = db.Column(
        enum_type(LeaveStatus), nullable=False, default=LeaveStatus.PENDING
    )
    approved_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    approved_at = db.Column(db.DateTime, nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    staff = db.relationship("Staff", back_populates="leave_requests")
    approver = db.relationship("User")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["staff_name"] = self.staff.name if self.staff else None
        data["employee_id"] = self.staff.employee_id if self.staff else None
        return data

    def __repr__(self) -> str:
        return (
            f"<LeaveRequest staff={self.staff_id} "
            f"{self.start_date}..{self.end_date} status={self.status}>"
        )
