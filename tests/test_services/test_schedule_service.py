"""
Tests for schedule_service: due-date seeding and update rules.
"""

from datetime import date

import pytest

from facilitydesk.exceptions import RecordNotFoundError, ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.audit import AuditLog
from facilitydesk.models.maintenance import MaintenanceSchedule
from facilitydesk.schemas.maintenance import ScheduleUpdate
from facilitydesk.services import schedule_service


class TestCreateSchedule:
    """Tests for the first due date."""

    def test_next_due_seeded_from_start(self, make_schedule):
        """A monthly schedule starting Feb 15 is first due Mar 15."""
        schedule = make_schedule()
        assert schedule.next_due_date == date(2024, 3, 15)

    def test_month_end_start(self, make_schedule):
        """A Jan 31 start is first due on the last day of February."""
        schedule = make_schedule(start_date=date(2024, 1, 31))
        assert schedule.next_due_date == date(2024, 2, 29)

    def test_custom_keeps_supplied_date(self, make_schedule):
        """Custom schedules keep the hand-set next_due_date."""
        schedule = make_schedule(
            frequency_type="custom", next_due_date=date(2024, 6, 1)
        )
        assert schedule.next_due_date == date(2024, 6, 1)

    def test_create_is_audited(self, make_schedule):
        """Creating a schedule writes a CREATE audit entry."""
        schedule = make_schedule()
        entry = AuditLog.query.filter_by(
            entity_type="maintenance_schedules", entity_id=schedule.id
        ).one()
        assert entry.action_type == "CREATE"


class TestUpdateSchedule:
    """Tests for partial updates."""

    def test_partial_update_leaves_other_fields(self, make_schedule):
        """Only the sent fields change."""
        schedule = make_schedule()
        updated = schedule_service.update_schedule(
            schedule.id, ScheduleUpdate(schedule_name="Quarterly check")
        )
        assert updated.schedule_name == "Quarterly check"
        assert updated.next_due_date == date(2024, 3, 15)

    def test_frequency_change_keeps_due_date(self, make_schedule):
        """Changing the frequency does not recompute next_due_date."""
        schedule = make_schedule()
        updated = schedule_service.update_schedule(
            schedule.id, ScheduleUpdate(frequency_type="weekly")
        )
        assert updated.next_due_date == date(2024, 3, 15)

    def test_next_due_rejected_for_recurring(self, make_schedule):
        """next_due_date cannot be set by hand on a monthly schedule."""
        schedule = make_schedule()
        with pytest.raises(ValidationError):
            schedule_service.update_schedule(
                schedule.id, ScheduleUpdate(next_due_date=date(2024, 5, 1))
            )

    def test_end_before_start_rejected(self, make_schedule):
        """The resulting end date may not precede the start date."""
        schedule = make_schedule()
        with pytest.raises(ValidationError):
            schedule_service.update_schedule(
                schedule.id, ScheduleUpdate(end_date=date(2024, 1, 1))
            )


class TestDeleteSchedule:
    """Tests for hard delete."""

    def test_delete_then_get_raises(self, make_schedule):
        """A deleted schedule is gone."""
        schedule = make_schedule()
        schedule_id = schedule.id
        schedule_service.delete_schedule(schedule_id)
        assert db.session.get(MaintenanceSchedule, schedule_id) is None
        with pytest.raises(RecordNotFoundError):
            schedule_service.get_schedule(schedule_id)
