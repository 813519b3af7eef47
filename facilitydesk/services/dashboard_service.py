"""
Dashboard service — summary figures for the maintenance overview.
"""

import logging
from datetime import date, timedelta
from typing import Any

from sqlalchemy import and_, or_

from facilitydesk.models.asset import Asset
from facilitydesk.models.enums import AssetStatus, OPEN_TASK_STATUSES, TaskStatus
from facilitydesk.models.maintenance import MaintenanceSchedule, MaintenanceTask

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 7
UPCOMING_LIMIT = 5


def _overdue_filter(today: date):
    # Tasks the automation has not visited yet still count once their day passes.
    return or_(
        MaintenanceTask.status == TaskStatus.OVERDUE,
        and_(
            MaintenanceTask.status.in_(OPEN_TASK_STATUSES),
            MaintenanceTask.scheduled_date < today,
        ),
    )


def get_maintenance_dashboard(today: date | None = None) -> dict[str, Any]:
    """
    Counts and short task lists for the maintenance dashboard.

    Returns:
        A dict with ``stats`` (active assets, active schedules, overdue,
        today, this week, completed this month), ``upcoming`` (the next
        five open tasks within a week) and ``overdue`` (every overdue
        task, oldest first).
    """
    today = today or date.today()
    week_end = today + timedelta(days=UPCOMING_WINDOW_DAYS)
    month_start = today.replace(day=1)

    open_tasks = MaintenanceTask.query.filter(
        MaintenanceTask.status.in_(OPEN_TASK_STATUSES)
    )
    overdue = (
        MaintenanceTask.query.filter(_overdue_filter(today))
        .order_by(MaintenanceTask.scheduled_date, MaintenanceTask.id)
        .all()
    )
    upcoming = (
        open_tasks.filter(
            MaintenanceTask.scheduled_date >= today,
            MaintenanceTask.scheduled_date <= week_end,
        )
        .order_by(MaintenanceTask.scheduled_date, MaintenanceTask.id)
        .limit(UPCOMING_LIMIT)
        .all()
    )

    stats = {
        "active_assets": Asset.query.filter(
            Asset.status == AssetStatus.ACTIVE
        ).count(),
        "active_schedules": MaintenanceSchedule.query.filter(
            MaintenanceSchedule.is_active.is_(True)
        ).count(),
        "overdue_tasks": len(overdue),
        "today_tasks": open_tasks.filter(
            MaintenanceTask.scheduled_date == today
        ).count(),
        "week_tasks": open_tasks.filter(
            MaintenanceTask.scheduled_date >= today,
            MaintenanceTask.scheduled_date <= week_end,
        ).count(),
        "completed_this_month": MaintenanceTask.query.filter(
            MaintenanceTask.status == TaskStatus.COMPLETED,
            MaintenanceTask.scheduled_date >= month_start,
        ).count(),
    }
    return {
        "stats": stats,
        "upcoming": [task.to_dict() for task in upcoming],
        "overdue": [task.to_dict() for task in overdue],
    }
