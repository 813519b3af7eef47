"""Initial schema: assets, maintenance, scheduler, staff, packages, audit

Revision ID: 3b1f2c9d7a10
Revises:
Create Date: 2026-10-18 09:12:44.210518

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3b1f2c9d7a10"
down_revision = None
branch_labels = None
depends_on = None


def _enum(name, *values):
    """String column with a CHECK constraint, matching ``enum_type()``."""
    return sa.Enum(
        *values, name=name, native_enum=False, create_constraint=True, length=20
    )


PRIORITY = ("low", "medium", "high", "critical")


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade():
    """Create every application table."""
    # --- Users and audit ---------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("api_token_hash", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("api_token_hash"),
    )
    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("previous_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_entity_type", "audit_log", ["entity_type"])
    op.create_table(
        "automation_run_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("triggered_by", sa.Integer(), nullable=True),
        sa.Column("days_ahead", sa.Integer(), nullable=False),
        sa.Column("tasks_created", sa.Integer(), nullable=False),
        sa.Column("tasks_marked_overdue", sa.Integer(), nullable=False),
        sa.Column("work_orders_synced", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            _enum("automationrunstatus", "started", "completed", "failed"),
            nullable=False,
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["triggered_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- Assets and preventive maintenance ---------------------------------
    op.create_table(
        "assets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("asset_type", sa.String(length=100), nullable=True),
        sa.Column("make_model", sa.String(length=200), nullable=True),
        sa.Column("serial_number", sa.String(length=100), nullable=True),
        sa.Column("capacity_kg", sa.Integer(), nullable=True),
        sa.Column("capacity_persons", sa.Integer(), nullable=True),
        sa.Column("installation_date", sa.Date(), nullable=True),
        sa.Column("location_building", sa.String(length=200), nullable=True),
        sa.Column("location_floor", sa.String(length=50), nullable=True),
        sa.Column("location_block", sa.String(length=50), nullable=True),
        sa.Column("registration_number", sa.String(length=100), nullable=True),
        sa.Column("last_certification_date", sa.Date(), nullable=True),
        sa.Column("next_certification_date", sa.Date(), nullable=True),
        sa.Column("contractor_name", sa.String(length=200), nullable=True),
        sa.Column("competent_person", sa.String(length=200), nullable=True),
        sa.Column(
            "status",
            _enum("assetstatus", "active", "inactive", "maintenance", "retired"),
            nullable=False,
        ),
        sa.Column("criticality", _enum("priority", *PRIORITY), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assets_name", "assets", ["name"])
    op.create_index(
        "ix_assets_next_certification_date", "assets", ["next_certification_date"]
    )
    op.create_table(
        "maintenance_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "maintenance_schedules",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("asset_id", sa.Integer(), nullable=False),
        sa.Column("maintenance_type_id", sa.Integer(), nullable=True),
        sa.Column("schedule_name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "frequency_type",
            _enum(
                "frequencytype",
                "daily",
                "weekly",
                "monthly",
                "quarterly",
                "semi_annual",
                "annual",
                "custom",
            ),
            nullable=False,
        ),
        sa.Column("frequency_value", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("next_due_date", sa.Date(), nullable=True),
        sa.Column("last_completed_date", sa.Date(), nullable=True),
        sa.Column("priority", _enum("priority", *PRIORITY), nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=False),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("auto_generate_work_order", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "frequency_value > 0", name="CK_schedule_frequency_value_positive"
        ),
        sa.CheckConstraint(
            "estimated_duration > 0", name="CK_schedule_estimated_duration_positive"
        ),
        sa.ForeignKeyConstraint(["asset_id"], ["assets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["maintenance_type_id"], ["maintenance_types.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_maintenance_schedules_asset_id", "maintenance_schedules", ["asset_id"]
    )
    op.create_index(
        "ix_maintenance_schedules_next_due_date",
        "maintenance_schedules",
        ["next_due_date"],
    )
    op.create_table(
        "maintenance_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("setting_key", sa.String(length=100), nullable=False),
        sa.Column("setting_value", sa.String(length=500), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("setting_key"),
    )

    # --- Scheduler ---------------------------------------------------------
    op.create_table(
        "contacts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("company", sa.String(length=200), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column(
            "contact_type",
            _enum(
                "contacttype",
                "contractor",
                "supplier",
                "service_provider",
                "technician",
                "resident",
                "government",
                "others",
            ),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contacts_name", "contacts", ["name"])
    op.create_table(
        "complaints",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority", _enum("priority", *PRIORITY), nullable=False),
        sa.Column(
            "status",
            _enum("complaintstatus", "open", "in_progress", "resolved", "closed"),
            nullable=False,
        ),
        sa.Column("property_unit", sa.String(length=100), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=True),
        sa.Column("scheduled_start", sa.Time(), nullable=True),
        sa.Column("scheduled_end", sa.Time(), nullable=True),
        sa.Column("technician_id", sa.Integer(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["technician_id"], ["contacts.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_complaints_scheduled_date", "complaints", ["scheduled_date"])
    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "status",
            _enum("jobstatus", "pending", "in_progress", "complete"),
            nullable=False,
        ),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_start", sa.Time(), nullable=False),
        sa.Column("scheduled_end", sa.Time(), nullable=False),
        sa.Column("technician_id", sa.Integer(), nullable=True),
        sa.Column("complaint_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "scheduled_end >= scheduled_start", name="CK_job_end_after_start"
        ),
        sa.ForeignKeyConstraint(
            ["technician_id"], ["contacts.id"], ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["complaint_id"], ["complaints.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_jobs_scheduled_date", "jobs", ["scheduled_date"])
    op.create_index("ix_jobs_technician_id", "jobs", ["technician_id"])
    op.create_index("ix_jobs_complaint_id", "jobs", ["complaint_id"])
    op.create_table(
        "maintenance_tasks",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("schedule_id", sa.Integer(), nullable=False),
        sa.Column("asset_id", sa.Integer(), nullable=False),
        sa.Column("job_id", sa.Integer(), nullable=True),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("priority", _enum("priority", *PRIORITY), nullable=False),
        sa.Column(
            "status",
            _enum("taskstatus", "scheduled", "in_progress", "completed", "overdue"),
            nullable=False,
        ),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["schedule_id"], ["maintenance_schedules.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["asset_id"], ["assets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "schedule_id", "scheduled_date", name="UQ_maintenance_task_schedule_date"
        ),
    )
    op.create_index(
        "ix_maintenance_tasks_schedule_id", "maintenance_tasks", ["schedule_id"]
    )
    op.create_index("ix_maintenance_tasks_asset_id", "maintenance_tasks", ["asset_id"])
    op.create_index("ix_maintenance_tasks_job_id", "maintenance_tasks", ["job_id"])
    op.create_index(
        "ix_maintenance_tasks_scheduled_date", "maintenance_tasks", ["scheduled_date"]
    )

    # --- Staff -------------------------------------------------------------
    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("position", sa.String(length=100), nullable=True),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            _enum("staffstatus", "active", "inactive", "on_leave", "terminated"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id"),
    )
    op.create_index("ix_staff_name", "staff", ["name"])
    op.create_index("ix_staff_department", "staff", ["department"])
    op.create_table(
        "staff_attendance",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.Time(), nullable=True),
        sa.Column("check_out", sa.Time(), nullable=True),
        sa.Column("total_hours", sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column(
            "status",
            _enum(
                "attendancestatus", "present", "absent", "late", "half_day", "on_leave"
            ),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("staff_id", "date", name="UQ_attendance_staff_date"),
    )
    op.create_index("ix_staff_attendance_staff_id", "staff_attendance", ["staff_id"])
    op.create_index("ix_staff_attendance_date", "staff_attendance", ["date"])
    op.create_table(
        "leave_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=False),
        sa.Column(
            "leave_type",
            _enum(
                "leavetype",
                "annual",
                "sick",
                "emergency",
                "maternity",
                "paternity",
                "unpaid",
                "other",
            ),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column(
            "status",
            _enum("leavestatus", "pending", "approved", "rejected", "cancelled"),
            nullable=False,
        ),
        sa.Column("approved_by", sa.Integer(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("end_date >= start_date", name="CK_leave_end_after_start"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["approved_by"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_requests_staff_id", "leave_requests", ["staff_id"])

    # --- Packages ----------------------------------------------------------
    op.create_table(
        "packages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tracking_number", sa.String(length=100), nullable=False),
        sa.Column("recipient_name", sa.String(length=200), nullable=False),
        sa.Column("recipient_unit", sa.String(length=50), nullable=True),
        sa.Column("recipient_phone", sa.String(length=50), nullable=True),
        sa.Column("sender", sa.String(length=200), nullable=False),
        sa.Column(
            "package_type",
            _enum(
                "packagetype", "standard", "fragile", "perishable", "large", "document"
            ),
            nullable=False,
        ),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("delivery_time", sa.Time(), nullable=True),
        sa.Column(
            "status",
            _enum("packagestatus", "received", "notified", "picked_up", "returned"),
            nullable=False,
        ),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("received_by", sa.String(length=200), nullable=True),
        sa.Column("picked_up_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_packages_tracking_number", "packages", ["tracking_number"])


def downgrade():
    """Drop every application table, children first."""
    op.drop_table("packages")
    op.drop_table("leave_requests")
    op.drop_table("staff_attendance")
    op.drop_table("staff")
    op.drop_table("maintenance_tasks")
    op.drop_table("jobs")
    op.drop_table("complaints")
    op.drop_table("contacts")
    op.drop_table("maintenance_settings")
    op.drop_table("maintenance_schedules")
    op.drop_table("maintenance_types")
    op.drop_table("assets")
    op.drop_table("automation_run_log")
    op.drop_table("audit_log")
    op.drop_table("users")
