"""
Schedule service — preventive maintenance schedules and their types.

``next_due_date`` is seeded here from ``start_date`` using the
recurrence calculator.  After creation only the automation run moves it,
except for ``custom`` schedules whose next date is always set by hand.
"""

import logging

from sqlalchemy import or_

from facilitydesk.exceptions import ValidationError
from facilitydesk.models.asset import Asset
from facilitydesk.models.enums import FrequencyType
from facilitydesk.models.maintenance import MaintenanceSchedule, MaintenanceType
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.maintenance import (
    MaintenanceTypeCreate,
    MaintenanceTypeUpdate,
    ScheduleCreate,
    ScheduleUpdate,
)
from facilitydesk.services import crud
from facilitydesk.services.recurrence import calculate_next_due_date

logger = logging.getLogger(__name__)


# =========================================================================
# Maintenance types
# =========================================================================


def get_maintenance_types() -> list[MaintenanceType]:
    """Return all maintenance types ordered by name."""
    return MaintenanceType.query.order_by(MaintenanceType.name).all()


def get_maintenance_type(type_id: int) -> MaintenanceType:
    return crud.get_or_raise(MaintenanceType, type_id, "Maintenance type")


def create_maintenance_type(
    payload: MaintenanceTypeCreate, user_id: int | None = None
) -> MaintenanceType:
    return crud.create_record(MaintenanceType, payload.model_dump(), user_id=user_id)


def update_maintenance_type(
    type_id: int, payload: MaintenanceTypeUpdate, user_id: int | None = None
) -> MaintenanceType:
    record = get_maintenance_type(type_id)
    return crud.update_record(record, changes(payload), user_id=user_id)


def delete_maintenance_type(type_id: int, user_id: int | None = None) -> None:
    crud.delete_record(get_maintenance_type(type_id), user_id=user_id)


# =========================================================================
# Schedules
# =========================================================================


def get_schedules(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    asset_id: int | None = None,
    frequency_type: FrequencyType | None = None,
    is_active: bool | None = None,
):
    """
    Return a page of schedules ordered by next due date (undated last).

    Args:
        search: Case-insensitive match on schedule name or asset name.
    """
    query = MaintenanceSchedule.query.join(Asset).order_by(
        MaintenanceSchedule.next_due_date.is_(None),
        MaintenanceSchedule.next_due_date,
        MaintenanceSchedule.id,
    )

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                MaintenanceSchedule.schedule_name.ilike(pattern),
                Asset.name.ilike(pattern),
            )
        )
    if asset_id is not None:
        query = query.filter(MaintenanceSchedule.asset_id == asset_id)
    if frequency_type is not None:
        query = query.filter(MaintenanceSchedule.frequency_type == frequency_type)
    if is_active is not None:
        query = query.filter(MaintenanceSchedule.is_active == is_active)

    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_schedule(schedule_id: int) -> MaintenanceSchedule:
    return crud.get_or_raise(MaintenanceSchedule, schedule_id, "Schedule")


def create_schedule(
    payload: ScheduleCreate, user_id: int | None = None
) -> MaintenanceSchedule:
    """
    Create a schedule and seed its first due date.

    Non-custom schedules get ``next_due_date = start_date + one period``;
    custom schedules keep the date supplied in the payload.
    """
    values = payload.model_dump()
    if payload.frequency_type != FrequencyType.CUSTOM:
        values["next_due_date"] = calculate_next_due_date(
            payload.frequency_type,
            payload.frequency_value,
            payload.start_date,
        )
    schedule = crud.create_record(MaintenanceSchedule, values, user_id=user_id)
    logger.info(
        "Schedule '%s' first due %s", schedule.schedule_name, schedule.next_due_date
    )
    return schedule


def update_schedule(
    schedule_id: int, payload: ScheduleUpdate, user_id: int | None = None
) -> MaintenanceSchedule:
    """
    Apply a partial update.

    Raises:
        ValidationError: If ``next_due_date`` is sent for a non-custom
            schedule, if switching to ``custom`` leaves no due date, or
            if the resulting ``end_date`` precedes ``start_date``.
    """
    schedule = get_schedule(schedule_id)
    values = changes(payload)

    frequency_type = values.get("frequency_type", schedule.frequency_type)
    errors = []
    if "next_due_date" in values and frequency_type != FrequencyType.CUSTOM:
        errors.append(
            "next_due_date: can only be set by hand on custom schedules"
        )
    if (
        frequency_type == FrequencyType.CUSTOM
        and values.get("next_due_date", schedule.next_due_date) is None
    ):
        errors.append("next_due_date: required for a custom frequency")

    start_date = values.get("start_date", schedule.start_date)
    end_date = values.get("end_date", schedule.end_date)
    if end_date is not None and end_date < start_date:
        errors.append("end_date: cannot be before start_date")
    if errors:
        raise ValidationError(errors)

    return crud.update_record(schedule, values, user_id=user_id)


def delete_schedule(schedule_id: int, user_id: int | None = None) -> None:
    """Hard-delete a schedule together with its tasks."""
    crud.delete_record(get_schedule(schedule_id), user_id=user_id)
