"""
Audit logging and automation run tracking models.

``AuditLog`` records all data changes in the application.
``AutomationRunLog`` tracks each preventive-maintenance automation run.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import AutomationRunStatus, enum_type
from facilitydesk.models.mixins import SerializerMixin


class AuditLog(SerializerMixin, db.Model):
    """
    Records all data changes in the application.

    Change details are stored as JSON blobs for flexibility.

    ``action_type`` values: CREATE, UPDATE, DELETE, IMPORT, AUTOMATION.

    JSON conventions for ``previous_value`` / ``new_value``:
      - CREATE: previous_value is NULL, new_value has full record.
      - UPDATE: both contain only the changed fields.
      - DELETE: previous_value has full record, new_value is NULL.
      - IMPORT: new_value has the inserted count and skipped lines.
    """

    __tablename__ = "audit_log"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    action_type = db.Column(db.String(50), nullable=False)
    entity_type = db.Column(db.String(100), nullable=False, index=True)
    entity_id = db.Column(db.Integer, nullable=True)
    previous_value = db.Column(db.Text, nullable=True)
    new_value = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    user = db.relationship("User")

    def __repr__(self) -> str:
        return (
            f"<AuditLog {self.action_type} {self.entity_type}"
            f":{self.entity_id}>"
        )


class AutomationRunLog(SerializerMixin, db.Model):
    """
    Tracks each maintenance automation run: how many tasks were created,
    marked overdue or synced, and whether the run succeeded.

    ``status`` values: started, completed, failed.
    """

    __tablename__ = "automation_run_log"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    triggered_by = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    days_ahead = db.Column(db.Integer, nullable=False, default=1)
    tasks_created = db.Column(db.Integer, nullable=False, default=0)
    tasks_marked_overdue = db.Column(db.Integer, nullable=False, default=0)
    work_orders_synced = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(enum_type(AutomationRunStatus), nullable=False)
    error_message = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    # -- Relationships -----------------------------------------------------
    triggered_by_user = db.relationship("User", foreign_keys=[triggered_by])

    def __repr__(self) -> str:
        return f"<AutomationRunLog {self.id} status={self.status}>"
