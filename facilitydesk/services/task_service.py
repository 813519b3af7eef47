"""
Task service — read and transition maintenance tasks.

Tasks are created only by the automation run; this module lists them
and moves them through ``TASK_TRANSITIONS``.
"""

import logging
from datetime import date

from facilitydesk.exceptions import InvalidTransitionError
from facilitydesk.models.enums import TASK_TRANSITIONS, TaskStatus, can_transition
from facilitydesk.models.maintenance import MaintenanceTask
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.maintenance import TaskUpdate
from facilitydesk.services import crud

logger = logging.getLogger(__name__)


def get_tasks(
    page: int = 1,
    per_page: int = 10,
    status: TaskStatus | None = None,
    schedule_id: int | None = None,
    asset_id: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
):
    """Return a page of tasks ordered by scheduled date."""
    query = MaintenanceTask.query.order_by(
        MaintenanceTask.scheduled_date, MaintenanceTask.id
    )
    if status is not None:
        query = query.filter(MaintenanceTask.status == status)
    if schedule_id is not None:
        query = query.filter(MaintenanceTask.schedule_id == schedule_id)
    if asset_id is not None:
        query = query.filter(MaintenanceTask.asset_id == asset_id)
    if date_from is not None:
        query = query.filter(MaintenanceTask.scheduled_date >= date_from)
    if date_to is not None:
        query = query.filter(MaintenanceTask.scheduled_date <= date_to)

    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_task(task_id: int) -> MaintenanceTask:
    return crud.get_or_raise(MaintenanceTask, task_id, "Task")


def apply_status(task: MaintenanceTask, status: TaskStatus, today: date) -> None:
    """
    Move ``task`` to ``status`` and stamp the matching timestamps (no commit).

    Completing a task also records ``last_completed_date`` on its schedule.

    Raises:
        InvalidTransitionError: If the move is not in ``TASK_TRANSITIONS``.
    """
    if not can_transition(TASK_TRANSITIONS, task.status, status):
        raise InvalidTransitionError("Task", task.status, status)
    if status == task.status:
        return

    now = crud.utcnow()
    if status == TaskStatus.IN_PROGRESS and task.started_at is None:
        task.started_at = now
    if status == TaskStatus.COMPLETED:
        task.completed_at = now
        if task.schedule is not None:
            task.schedule.last_completed_date = today
            task.schedule.updated_at = now
    task.status = status


def update_task(
    task_id: int,
    payload: TaskUpdate,
    user_id: int | None = None,
    today: date | None = None,
) -> MaintenanceTask:
    """Change a task's status and/or notes."""
    task = get_task(task_id)
    previous = task.to_dict()
    values = changes(payload)

    status = values.pop("status", None)
    if status is not None:
        apply_status(task, status, today or date.today())
        logger.info("Task ID %d moved to %s", task_id, status.value)

    return crud.update_record(task, values, user_id=user_id, previous=previous)
