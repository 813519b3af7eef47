"""
Tests for SchedulerService and the calendar built on top of it.
"""

from datetime import date, datetime, time

import pytest

from facilitydesk.exceptions import (
    InvalidTransitionError,
    RecordNotFoundError,
    ValidationError,
)
from facilitydesk.extensions import db
from facilitydesk.models.enums import ComplaintStatus, ContactType, JobStatus
from facilitydesk.schemas.scheduler import (
    ComplaintCreate,
    ComplaintJobCreate,
    ComplaintUpdate,
    ContactCreate,
    JobCreate,
    JobUpdate,
)
from facilitydesk.services import calendar_service, complaint_service, contact_service
from facilitydesk.services.scheduler_service import (
    SchedulerService,
    next_work_order_number,
)


@pytest.fixture
def scheduler(db_session):
    return SchedulerService(db_session)


@pytest.fixture
def technician(db_session):  # pylint: disable=unused-argument
    return contact_service.create_contact(
        ContactCreate(name="Ravi Kumar", contact_type=ContactType.TECHNICIAN)
    )


def _job(**overrides):
    values = {
        "title": "Replace pump seal",
        "scheduled_date": date(2024, 3, 20),
        "scheduled_start": time(10, 0),
        "scheduled_end": time(11, 0),
    }
    values.update(overrides)
    return JobCreate(**values)


class TestJobs:
    """Tests for job assignment and status moves."""

    def test_assign_moves_to_in_progress(self, scheduler, technician):
        """Assigning a technician starts the job."""
        job = scheduler.add_job(_job())
        assigned = scheduler.assign_job(job.id, technician.id)
        assert assigned.technician_id == technician.id
        assert assigned.status == JobStatus.IN_PROGRESS

    def test_resident_cannot_be_assigned(self, scheduler, db_session):
        """Only service-type contacts can take jobs."""
        resident = contact_service.create_contact(
            ContactCreate(name="Unit 12-3 Owner", contact_type=ContactType.RESIDENT)
        )
        job = scheduler.add_job(_job())
        with pytest.raises(ValidationError):
            scheduler.assign_job(job.id, resident.id)

    def test_complete_job_cannot_reopen(self, scheduler):
        """A completed job is final."""
        job = scheduler.add_job(_job(status=JobStatus.COMPLETE))
        with pytest.raises(InvalidTransitionError):
            scheduler.update_job(job.id, JobUpdate(status=JobStatus.PENDING))

    def test_reschedule(self, scheduler):
        """Rescheduling replaces the date and slot."""
        job = scheduler.add_job(_job())
        moved = scheduler.reschedule_job(
            job.id, date(2024, 3, 22), time(14, 0), time(15, 30)
        )
        assert moved.scheduled_date == date(2024, 3, 22)
        assert moved.scheduled_start == time(14, 0)
        assert moved.scheduled_end == time(15, 30)

    def test_fetch_all_orders_by_slot(self, scheduler, technician):
        """fetch_all returns jobs by date and time plus assignable contacts."""
        later = scheduler.add_job(_job(title="Later", scheduled_start=time(15, 0),
                                       scheduled_end=time(16, 0)))
        earlier = scheduler.add_job(_job(title="Earlier"))
        data = scheduler.fetch_all()
        assert [job.id for job in data["jobs"]] == [earlier.id, later.id]
        assert [contact.id for contact in data["contacts"]] == [technician.id]


class TestComplaintToJob:
    """Tests for raising a work order from a complaint."""

    def test_job_links_complaint(self, scheduler):
        """The job references the complaint, which moves to in_progress."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(title="Water leak at corridor", description="Level 12")
        )
        job = scheduler.create_job_from_complaint(
            complaint.id,
            ComplaintJobCreate(
                scheduled_date=date(2024, 3, 20),
                scheduled_start=time(9, 0),
                scheduled_end=time(10, 0),
            ),
        )
        assert job.complaint_id == complaint.id
        assert job.title == "Water leak at corridor"
        assert job.description == "Level 12"
        assert complaint.status == ComplaintStatus.IN_PROGRESS

    def test_deleting_job_keeps_complaint(self, scheduler):
        """A linked complaint survives the job's deletion."""
        complaint = complaint_service.create_complaint(ComplaintCreate(title="Leak"))
        job = scheduler.create_job_from_complaint(
            complaint.id,
            ComplaintJobCreate(
                scheduled_date=date(2024, 3, 20),
                scheduled_start=time(9, 0),
                scheduled_end=time(10, 0),
            ),
        )
        scheduler.delete_job(job.id)
        assert complaint_service.get_complaint(complaint.id).title == "Leak"


class TestComplaintStatus:
    """Tests for resolution bookkeeping."""

    def test_resolve_then_reopen(self, db_session):
        """Resolving stamps resolved_at; reopening clears it."""
        complaint = complaint_service.create_complaint(ComplaintCreate(title="Leak"))
        resolved = complaint_service.set_status(complaint.id, ComplaintStatus.RESOLVED)
        assert resolved.resolved_at is not None
        reopened = complaint_service.set_status(complaint.id, ComplaintStatus.OPEN)
        assert reopened.resolved_at is None

    def test_closed_only_reopens(self, db_session):
        """A closed complaint can only go back to open."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(title="Leak", status=ComplaintStatus.CLOSED)
        )
        with pytest.raises(InvalidTransitionError):
            complaint_service.set_status(complaint.id, ComplaintStatus.IN_PROGRESS)


class TestComplaintUpdate:
    """Tests for partial complaint edits."""

    def test_new_start_checked_against_stored_end(self, db_session):
        """A start after the stored end is refused."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(
                title="Leak",
                scheduled_date=date(2024, 3, 20),
                scheduled_start=time(9, 0),
                scheduled_end=time(10, 0),
            )
        )
        with pytest.raises(ValidationError):
            complaint_service.update_complaint(
                complaint.id, ComplaintUpdate(scheduled_start=time(15, 0))
            )
        assert complaint_service.get_complaint(complaint.id).scheduled_start == time(9, 0)

    def test_new_end_checked_against_stored_start(self, db_session):
        """An end before the stored start is refused."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(title="Leak", scheduled_start=time(9, 0))
        )
        with pytest.raises(ValidationError):
            complaint_service.update_complaint(
                complaint.id, ComplaintUpdate(scheduled_end=time(8, 0))
            )

    def test_moving_both_bounds(self, db_session):
        """Both bounds can move together past the old slot."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(
                title="Leak", scheduled_start=time(9, 0), scheduled_end=time(10, 0)
            )
        )
        moved = complaint_service.update_complaint(
            complaint.id,
            ComplaintUpdate(scheduled_start=time(15, 0), scheduled_end=time(16, 0)),
        )
        assert moved.scheduled_start == time(15, 0)
        assert moved.scheduled_end == time(16, 0)

    def test_resident_cannot_be_assigned(self, db_session):
        """A complaint's technician must be a service-type contact."""
        resident = contact_service.create_contact(
            ContactCreate(name="Unit 12-3 Owner", contact_type=ContactType.RESIDENT)
        )
        with pytest.raises(ValidationError):
            complaint_service.create_complaint(
                ComplaintCreate(title="Leak", technician_id=resident.id)
            )

        complaint = complaint_service.create_complaint(ComplaintCreate(title="Leak"))
        with pytest.raises(ValidationError):
            complaint_service.update_complaint(
                complaint.id, ComplaintUpdate(technician_id=resident.id)
            )

    def test_technician_can_be_assigned(self, technician):
        """Technicians are accepted."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(title="Leak", technician_id=technician.id)
        )
        assert complaint.technician_id == technician.id


class TestCalendar:
    """Tests for the merged calendar and drop handling."""

    def test_linked_complaint_is_hidden(self, scheduler):
        """A complaint with a job shows up only through the job."""
        complaint = complaint_service.create_complaint(
            ComplaintCreate(
                title="Leak",
                scheduled_date=date(2024, 3, 20),
                scheduled_start=time(9, 0),
                scheduled_end=time(10, 0),
            )
        )
        scheduler.create_job_from_complaint(
            complaint.id,
            ComplaintJobCreate(
                scheduled_date=date(2024, 3, 21),
                scheduled_start=time(9, 0),
                scheduled_end=time(10, 0),
            ),
        )
        events = calendar_service.get_calendar_events()
        assert [event.kind for event in events] == ["job"]

    def test_complaint_without_times_is_all_day(self, db_session):
        """A dated complaint without a slot spans the whole day."""
        complaint_service.create_complaint(
            ComplaintCreate(title="Lobby light", scheduled_date=date(2024, 3, 20))
        )
        (event,) = calendar_service.get_calendar_events()
        assert event.all_day
        assert event.start == datetime(2024, 3, 20)
        assert event.end == datetime(2024, 3, 21)

    def test_job_sorts_before_complaint_at_same_start(self, scheduler):
        """Ties on start put jobs first."""
        complaint_service.create_complaint(
            ComplaintCreate(
                title="Complaint",
                scheduled_date=date(2024, 3, 20),
                scheduled_start=time(10, 0),
                scheduled_end=time(11, 0),
            )
        )
        scheduler.add_job(_job(title="Job"))
        events = calendar_service.get_calendar_events()
        assert [event.kind for event in events] == ["job", "complaint"]

    def test_window_filters_by_date(self, scheduler):
        """Only events dated inside the window are returned."""
        scheduler.add_job(_job(scheduled_date=date(2024, 3, 1)))
        scheduler.add_job(_job(scheduled_date=date(2024, 4, 1)))
        events = calendar_service.get_calendar_events(
            date(2024, 3, 1), date(2024, 3, 31)
        )
        assert len(events) == 1

    def test_drop_moves_job(self, scheduler):
        """A drop gesture rewrites the job's date and times."""
        job = scheduler.add_job(_job())
        calendar_service.reschedule_event(
            "job", job.id, datetime(2024, 3, 25, 13, 0), datetime(2024, 3, 25, 14, 30)
        )
        db.session.refresh(job)
        assert job.scheduled_date == date(2024, 3, 25)
        assert job.scheduled_start == time(13, 0)
        assert job.scheduled_end == time(14, 30)

    def test_drop_past_midnight_is_clipped(self, db_session):
        """An end on the next day is clipped to 23:59."""
        complaint = complaint_service.create_complaint(ComplaintCreate(title="Leak"))
        calendar_service.reschedule_event(
            "complaint",
            complaint.id,
            datetime(2024, 3, 25, 23, 0),
            datetime(2024, 3, 26, 1, 0),
        )
        assert complaint.scheduled_end == time(23, 59)


class TestWorkOrderNumbers:
    """Tests for readable work order numbers and job history."""

    def test_numbers_are_sequential(self, scheduler):
        """Jobs created on the same day get consecutive numbers."""
        first = scheduler.add_job(_job())
        second = scheduler.add_job(_job(title="Second"))

        prefix, sequence = first.work_order_number.rsplit("-", 1)
        assert prefix.startswith("WO-")
        assert sequence == "0001"
        assert second.work_order_number == f"{prefix}-0002"

    def test_numbering_restarts_each_day(self, scheduler):
        """Another day starts again at 0001."""
        scheduler.add_job(_job())
        assert next_work_order_number(date(2000, 1, 1)) == "WO-20000101-0001"

    def test_search_by_number(self, scheduler):
        """Job search matches the work order number."""
        scheduler.add_job(_job())
        second = scheduler.add_job(_job(title="Second"))
        page = scheduler.list_jobs(search=second.work_order_number)
        assert [job.id for job in page.items] == [second.id]

    def test_history_newest_first(self, scheduler):
        """Each write to a job shows up in its history."""
        job = scheduler.add_job(_job())
        scheduler.update_job(job.id, JobUpdate(title="Replace pump seal and gasket"))

        history = scheduler.get_job_history(job.id)

        assert [entry["action_type"] for entry in history] == ["UPDATE", "CREATE"]
        assert history[0]["previous_value"]["title"] == "Replace pump seal"
        assert history[0]["new_value"]["title"] == "Replace pump seal and gasket"
        assert history[1]["new_value"]["work_order_number"] == job.work_order_number

    def test_history_of_unknown_job(self, scheduler):
        """Unknown jobs have no history."""
        with pytest.raises(RecordNotFoundError):
            scheduler.get_job_history(999)
