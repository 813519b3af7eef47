"""Preventive maintenance request payloads."""

from datetime import date

from pydantic import NonNegativeInt, PositiveInt, model_validator

from facilitydesk.models.enums import FrequencyType, Priority, TaskStatus
from facilitydesk.schemas.common import PayloadModel, reject_nulls


# -- Maintenance types -----------------------------------------------------


class MaintenanceTypeCreate(PayloadModel):
    name: str
    description: str | None = None


class MaintenanceTypeUpdate(PayloadModel):
    name: str | None = None
    description: str | None = None

    _required = reject_nulls("name")


# -- Schedules -------------------------------------------------------------


class ScheduleCreate(PayloadModel):
    asset_id: int
    schedule_name: str
    frequency_type: FrequencyType
    frequency_value: PositiveInt = 1
    start_date: date
    end_date: date | None = None
    next_due_date: date | None = None
    maintenance_type_id: int | None = None
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    estimated_duration: PositiveInt = 60
    instructions: str | None = None
    is_active: bool = True
    auto_generate_work_order: bool = True

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        if self.frequency_type == FrequencyType.CUSTOM:
            if self.next_due_date is None:
                raise ValueError("next_due_date is required for a custom frequency")
        elif self.next_due_date is not None:
            raise ValueError(
                "next_due_date is calculated from start_date unless the "
                "frequency is custom"
            )
        return self


class ScheduleUpdate(PayloadModel):
    """
    Partial schedule update.

    ``next_due_date`` is accepted only for ``custom`` schedules; the
    service rejects it for any other frequency.
    """

    asset_id: int | None = None
    schedule_name: str | None = None
    frequency_type: FrequencyType | None = None
    frequency_value: PositiveInt | None = None
    start_date: date | None = None
    end_date: date | None = None
    next_due_date: date | None = None
    maintenance_type_id: int | None = None
    description: str | None = None
    priority: Priority | None = None
    estimated_duration: PositiveInt | None = None
    instructions: str | None = None
    is_active: bool | None = None
    auto_generate_work_order: bool | None = None

    _required = reject_nulls(
        "asset_id",
        "schedule_name",
        "frequency_type",
        "frequency_value",
        "start_date",
        "priority",
        "estimated_duration",
        "is_active",
        "auto_generate_work_order",
    )


# -- Tasks -----------------------------------------------------------------


class TaskUpdate(PayloadModel):
    status: TaskStatus | None = None
    notes: str | None = None

    _required = reject_nulls("status")


# -- Automation ------------------------------------------------------------


class SettingsUpdate(PayloadModel):
    auto_generate_work_orders: bool | None = None
    work_order_prefix: str | None = None
    include_overdue_in_title: bool | None = None

    _required = reject_nulls("auto_generate_work_orders", "include_overdue_in_title")


class AutomationRunRequest(PayloadModel):
    days_ahead: NonNegativeInt | None = None
