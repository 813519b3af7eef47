"""
Preventive maintenance models.

``MaintenanceSchedule`` describes a recurring obligation against an
asset.  ``MaintenanceTask`` rows are the concrete occurrences created by
the automation run (never by hand).  ``MaintenanceSetting`` holds the
key/value switches that steer the automation.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import FrequencyType, Priority, TaskStatus, enum_type
from facilitydesk.models.mixins import SerializerMixin


class MaintenanceType(SerializerMixin, db.Model):
    """Category of maintenance work (e.g., Inspection, Lubrication)."""

    __tablename__ = "maintenance_types"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<MaintenanceType {self.name}>"


class MaintenanceSchedule(SerializerMixin, db.Model):
    """
    Recurring maintenance obligation for one asset.

    ``next_due_date`` is computed from ``start_date`` at creation and is
    only advanced afterwards by the automation run.  ``custom`` schedules
    carry an explicit ``next_due_date`` and are never advanced.
    """

    __tablename__ = "maintenance_schedules"
    __table_args__ = (
        db.CheckConstraint(
            "frequency_value > 0", name="CK_schedule_frequency_value_positive"
        ),
        db.CheckConstraint(
            "estimated_duration > 0", name="CK_schedule_estimated_duration_positive"
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    asset_id = db.Column(
        db.Integer,
        db.ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    maintenance_type_id = db.Column(
        db.Integer,
        db.ForeignKey("maintenance_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    schedule_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    frequency_type = db.Column(enum_type(FrequencyType), nullable=False)
    frequency_value = db.Column(db.Integer, nullable=False, default=1)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)
    next_due_date = db.Column(db.Date, nullable=True, index=True)
    last_completed_date = db.Column(db.Date, nullable=True)
    priority = db.Column(
        enum_type(Priority), nullable=False, default=Priority.MEDIUM
    )
    # Minutes.
    estimated_duration = db.Column(db.Integer, nullable=False, default=60)
    instructions = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    auto_generate_work_order = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    asset = db.relationship("Asset", back_populates="schedules")
    maintenance_type = db.relationship("MaintenanceType")
    tasks = db.relationship(
        "MaintenanceTask",
        back_populates="schedule",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["asset_name"] = self.asset.name if self.asset else None
        data["maintenance_type_name"] = (
            self.maintenance_type.name if self.maintenance_type else None
        )
        return data

    def __repr__(self) -> str:
        return f"<MaintenanceSchedule {self.schedule_name}>"


class MaintenanceTask(SerializerMixin, db.Model):
    """
    One due occurrence of a schedule.

    At most one task exists per ``(schedule_id, scheduled_date)``; the
    unique constraint keeps concurrent automation runs from duplicating
    work.
    """

    __tablename__ = "maintenance_tasks"
    __table_args__ = (
        db.UniqueConstraint(
            "schedule_id",
            "scheduled_date",
            name="UQ_maintenance_task_schedule_date",
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    schedule_id = db.Column(
        db.Integer,
        db.ForeignKey("maintenance_schedules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    asset_id = db.Column(
        db.Integer,
        db.ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_id = db.Column(
        db.Integer,
        db.ForeignKey("jobs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    scheduled_date = db.Column(db.Date, nullable=False, index=True)
    priority = db.Column(
        enum_type(Priority), nullable=False, default=Priority.MEDIUM
    )
    status = db.Column(
        enum_type(TaskStatus), nullable=False, default=TaskStatus.SCHEDULED
    )
    started_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    schedule = db.relationship("MaintenanceSchedule", back_populates="tasks")
    asset = db.relationship("Asset")
    job = db.relationship("Job")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["schedule_name"] = self.schedule.schedule_name if self.schedule else None
        data["asset_name"] = self.asset.name if self.asset else None
        return data

    def __repr__(self) -> str:
        return (
            f"<MaintenanceTask schedule={self.schedule_id} "
            f"date={self.scheduled_date} status={self.status}>"
        )


class MaintenanceSetting(SerializerMixin, db.Model):
    """
    Key/value switch read by the automation run.

    Known keys: ``auto_generate_work_orders``, ``work_order_prefix``,
    ``include_overdue_in_title``.  Values are stored as text.
    """

    __tablename__ = "maintenance_settings"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    setting_key = db.Column(db.String(100), unique=True, nullable=False)
    setting_value = db.Column(db.String(500), nullable=True)
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<MaintenanceSetting {self.setting_key}={self.setting_value}>"
