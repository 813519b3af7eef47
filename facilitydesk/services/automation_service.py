"""
Maintenance automation — turns schedules into tasks and work orders.

One run performs three passes inside a single transaction:

  1. Generate: every active schedule due within the lookahead window
     gets one task per due occurrence (and, when enabled, a pending work
     order).  ``next_due_date`` is advanced past the window.
  2. Overdue: open tasks whose date has passed are marked ``overdue``.
  3. Sync: tasks whose work order is ``complete`` are completed and the
     schedule's ``last_completed_date`` is recorded.

Each run is tracked in ``AutomationRunLog``.  The run is triggered from
the maintenance API or via the ``flask run-automation`` CLI command.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any

from flask import current_app

from facilitydesk.exceptions import ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.audit import AutomationRunLog
from facilitydesk.models.enums import (
    AutomationRunStatus,
    FrequencyType,
    JobStatus,
    OPEN_TASK_STATUSES,
    TaskStatus,
)
from facilitydesk.models.maintenance import (
    MaintenanceSchedule,
    MaintenanceSetting,
    MaintenanceTask,
)
from facilitydesk.models.scheduler import Job
from facilitydesk.schemas.maintenance import SettingsUpdate
from facilitydesk.services import audit_service, crud, task_service
from facilitydesk.services.recurrence import calculate_next_due_date
from facilitydesk.services.scheduler_service import next_work_order_number

logger = logging.getLogger(__name__)

OVERDUE_TITLE_PREFIX = "[OVERDUE] "

# Generated work orders start at this time of day.
WORK_ORDER_START = time(9, 0)

DEFAULT_SETTINGS: dict[str, str] = {
    "auto_generate_work_orders": "true",
    "work_order_prefix": "PM:",
    "include_overdue_in_title": "true",
}

_BOOLEAN_SETTINGS = ("auto_generate_work_orders", "include_overdue_in_title")


@dataclass
class AutomationResult:
    """Outcome of one automation run."""

    tasks_created: int = 0
    tasks_marked_overdue: int = 0
    work_orders_synced: int = 0
    run_at: datetime | None = None
    status: AutomationRunStatus = AutomationRunStatus.STARTED
    error_message: str | None = None
    run_log_id: int | None = None
    work_orders_created: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == AutomationRunStatus.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks_created": self.tasks_created,
            "tasks_marked_overdue": self.tasks_marked_overdue,
            "work_orders_synced": self.work_orders_synced,
            "work_orders_created": self.work_orders_created,
            "run_at": self.run_at.isoformat() if self.run_at else None,
            "status": self.status.value,
            "error_message": self.error_message,
            "run_log_id": self.run_log_id,
        }


# =========================================================================
# Settings
# =========================================================================


def get_settings() -> dict[str, Any]:
    """
    Return the automation settings with defaults filled in.

    Boolean settings are stored as ``'true'``/``'false'`` text and
    returned as Python booleans.
    """
    stored = {
        row.setting_key: row.setting_value for row in MaintenanceSetting.query.all()
    }
    settings: dict[str, Any] = {}
    for key, default in DEFAULT_SETTINGS.items():
        raw = stored.get(key)
        if raw is None:
            raw = default
        settings[key] = raw.lower() == "true" if key in _BOOLEAN_SETTINGS else raw
    return settings


def update_settings(payload: SettingsUpdate, user_id: int | None = None) -> dict:
    """Upsert each supplied setting by key and return the merged settings."""
    previous = get_settings()
    supplied = payload.model_dump(exclude_unset=True)
    now = crud.utcnow()

    for key, value in supplied.items():
        if key in _BOOLEAN_SETTINGS:
            text = "true" if value else "false"
        else:
            text = value if value is not None else DEFAULT_SETTINGS[key]
        row = MaintenanceSetting.query.filter_by(setting_key=key).first()
        if row is None:
            row = MaintenanceSetting(setting_key=key)
            db.session.add(row)
        row.setting_value = text
        row.updated_at = now
    db.session.flush()

    current = get_settings()
    before, after = audit_service.diff(previous, current)
    audit_service.log_change(
        user_id=user_id,
        action_type="UPDATE",
        entity_type="maintenance_settings",
        entity_id=None,
        previous_value=before,
        new_value=after,
    )
    db.session.commit()

    logger.info("Maintenance settings updated: %s", sorted(supplied))
    return current


# =========================================================================
# Public automation API
# =========================================================================


def run_maintenance_automation(
    days_ahead: int | None = None,
    today: date | None = None,
    user_id: int | None = None,
) -> AutomationResult:
    """
    Run the generate / overdue / sync passes.

    Args:
        days_ahead: Lookahead window in days; defaults to the
                    ``AUTOMATION_DAYS_AHEAD`` config value.
        today:      Reference date (injectable for tests).
        user_id:    ID of the user who triggered the run.

    Returns:
        An ``AutomationResult``.  On failure all task and work-order
        changes are rolled back, the run log is marked ``failed`` and
        the result carries the error text.
    """
    if days_ahead is None:
        days_ahead = current_app.config.get("AUTOMATION_DAYS_AHEAD", 1)
    if days_ahead < 0:
        raise ValidationError("days_ahead: must be zero or greater")
    today = today or date.today()

    run_log = _create_run_log(days_ahead, user_id)
    result = AutomationResult(run_at=run_log.started_at, run_log_id=run_log.id)

    try:
        settings = get_settings()

        created, work_orders = _generate_due_tasks(today, days_ahead, settings)
        result.tasks_created = created
        result.work_orders_created = work_orders
        result.tasks_marked_overdue = _mark_overdue_tasks(today, settings)
        result.work_orders_synced = _sync_completed_work_orders(today)

        _complete_run_log(run_log, result)
        audit_service.log_change(
            user_id=user_id,
            action_type="AUTOMATION",
            entity_type="automation_run_log",
            entity_id=run_log.id,
            new_value={
                "days_ahead": days_ahead,
                "tasks_created": result.tasks_created,
                "work_orders_created": result.work_orders_created,
                "tasks_marked_overdue": result.tasks_marked_overdue,
                "work_orders_synced": result.work_orders_synced,
            },
        )

        # Single atomic commit for all three passes plus the run log.
        db.session.commit()
        result.status = AutomationRunStatus.COMPLETED

        logger.info(
            "Maintenance automation completed: %d tasks created, "
            "%d work orders created, %d marked overdue, %d synced",
            result.tasks_created,
            result.work_orders_created,
            result.tasks_marked_overdue,
            result.work_orders_synced,
        )

    except Exception as exc:  # pylint: disable=broad-exception-caught
        db.session.rollback()
        _fail_run_log(run_log, str(exc))
        result.status = AutomationRunStatus.FAILED
        result.error_message = str(exc)
        result.tasks_created = 0
        result.work_orders_created = 0
        result.tasks_marked_overdue = 0
        result.work_orders_synced = 0
        logger.error("Maintenance automation failed: %s", exc, exc_info=True)

    return result


def get_run_logs(page: int = 1, per_page: int = 20):
    """Return paginated automation run log entries, most recent first."""
    return AutomationRunLog.query.order_by(
        AutomationRunLog.started_at.desc(), AutomationRunLog.id.desc()
    ).paginate(page=page, per_page=per_page, error_out=False)


# =========================================================================
# Pass 1: generate due tasks
# =========================================================================


def _generate_due_tasks(
    today: date, days_ahead: int, settings: dict[str, Any]
) -> tuple[int, int]:
    """
    Create tasks (and optionally work orders) for every due occurrence.

    Returns:
        ``(tasks_created, work_orders_created)``.
    """
    horizon = today + timedelta(days=days_ahead)
    schedules = (
        MaintenanceSchedule.query.filter(
            MaintenanceSchedule.is_active == True,  # noqa: E712
            MaintenanceSchedule.next_due_date.isnot(None),
            MaintenanceSchedule.next_due_date <= horizon,
        )
        .order_by(MaintenanceSchedule.id)
        .all()
    )

    tasks_created = 0
    work_orders_created = 0
    for schedule in schedules:
        is_custom = schedule.frequency_type == FrequencyType.CUSTOM
        due = schedule.next_due_date

        while due <= horizon:
            if schedule.end_date is not None and due > schedule.end_date:
                break
            if not _task_exists(schedule.id, due):
                task = MaintenanceTask(
                    schedule_id=schedule.id,
                    asset_id=schedule.asset_id,
                    scheduled_date=due,
                    priority=schedule.priority,
                    status=TaskStatus.SCHEDULED,
                )
                db.session.add(task)
                tasks_created += 1

                if (
                    schedule.auto_generate_work_order
                    and settings["auto_generate_work_orders"]
                ):
                    task.job = _build_work_order(
                        schedule, due, settings["work_order_prefix"], today
                    )
                    work_orders_created += 1
                db.session.flush()

            # Custom schedules get one task for their current date and are
            # never advanced automatically.
            if is_custom:
                break
            due = calculate_next_due_date(
                schedule.frequency_type, schedule.frequency_value, due
            )

        if not is_custom and due != schedule.next_due_date:
            logger.debug(
                "Schedule %d advanced %s -> %s",
                schedule.id,
                schedule.next_due_date,
                due,
            )
            schedule.next_due_date = due
            schedule.updated_at = crud.utcnow()

    return tasks_created, work_orders_created


def _task_exists(schedule_id: int, scheduled_date: date) -> bool:
    return (
        db.session.query(MaintenanceTask.id)
        .filter_by(schedule_id=schedule_id, scheduled_date=scheduled_date)
        .first()
        is not None
    )


def _build_work_order(
    schedule: MaintenanceSchedule, due: date, prefix: str, issued_on: date
) -> Job:
    """
    Build (but do not add) the pending work order for one occurrence.

    The job starts at 09:00 and lasts ``estimated_duration`` minutes,
    capped at the end of the day.  It is numbered as issued on the run's
    ``today``.
    """
    start = datetime.combine(due, WORK_ORDER_START)
    end = start + timedelta(minutes=schedule.estimated_duration)
    end_time = end.time() if end.date() == due else time(23, 59)

    title = f"{prefix} {schedule.schedule_name}".strip()
    return Job(
        work_order_number=next_work_order_number(issued_on),
        title=title,
        description=schedule.instructions or schedule.description,
        status=JobStatus.PENDING,
        scheduled_date=due,
        scheduled_start=WORK_ORDER_START,
        scheduled_end=end_time,
    )


# =========================================================================
# Pass 2: mark overdue
# =========================================================================


def _mark_overdue_tasks(today: date, settings: dict[str, Any]) -> int:
    """
    Move open tasks dated before ``today`` to ``overdue``.

    Tasks whose work order is already complete are left for the sync
    pass so they are completed rather than flagged.
    """
    tasks = MaintenanceTask.query.filter(
        MaintenanceTask.status.in_(OPEN_TASK_STATUSES),
        MaintenanceTask.scheduled_date < today,
    ).all()

    marked = 0
    now = crud.utcnow()
    for task in tasks:
        job = task.job
        if job is not None and job.status == JobStatus.COMPLETE:
            continue
        task.status = TaskStatus.OVERDUE
        task.updated_at = now
        marked += 1

        if (
            job is not None
            and settings["include_overdue_in_title"]
            and not job.title.startswith(OVERDUE_TITLE_PREFIX)
        ):
            job.title = OVERDUE_TITLE_PREFIX + job.title
            job.updated_at = now

    db.session.flush()
    return marked


# =========================================================================
# Pass 3: sync completed work orders
# =========================================================================


def _sync_completed_work_orders(today: date) -> int:
    """Complete tasks whose linked work order has been completed."""
    tasks = (
        MaintenanceTask.query.join(Job, MaintenanceTask.job_id == Job.id)
        .filter(
            Job.status == JobStatus.COMPLETE,
            MaintenanceTask.status != TaskStatus.COMPLETED,
        )
        .all()
    )
    for task in tasks:
        task_service.apply_status(task, TaskStatus.COMPLETED, today)
        task.updated_at = crud.utcnow()

    db.session.flush()
    return len(tasks)


# =========================================================================
# Run log helpers
# =========================================================================


def _create_run_log(days_ahead: int, user_id: int | None) -> AutomationRunLog:
    """Create a new run log entry with 'started' status."""
    run_log = AutomationRunLog(
        triggered_by=user_id,
        days_ahead=days_ahead,
        status=AutomationRunStatus.STARTED,
        started_at=crud.utcnow(),
    )
    db.session.add(run_log)
    # Committed up front so the row survives a rollback of the run and
    # _fail_run_log can mark it failed.
    db.session.commit()
    return run_log


def _complete_run_log(run_log: AutomationRunLog, result: AutomationResult) -> None:
    """Record counts and mark the run log completed (flush only)."""
    run_log.status = AutomationRunStatus.COMPLETED
    run_log.completed_at = crud.utcnow()
    run_log.tasks_created = result.tasks_created
    run_log.tasks_marked_overdue = result.tasks_marked_overdue
    run_log.work_orders_synced = result.work_orders_synced
    db.session.flush()


def _fail_run_log(run_log: AutomationRunLog, error_message: str) -> None:
    """Mark a run log as failed; runs after the caller's rollback."""
    run_log.status = AutomationRunStatus.FAILED
    run_log.error_message = error_message[:4000]
    run_log.completed_at = crud.utcnow()
    db.session.commit()
