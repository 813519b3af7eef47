"""
Tests for the maintenance, scheduler, staff and packages blueprints.

These cover the HTTP contract (status codes, envelopes, JSON shapes);
the business rules themselves are covered in ``tests/test_services``.
"""

from datetime import date, timedelta

from facilitydesk.services import automation_service


class TestMaintenanceRoutes:
    """Tests for schedules, tasks, automation and settings."""

    def _schedule(self, client, asset_id, **values):
        body = {
            "asset_id": asset_id,
            "schedule_name": "Monthly inspection",
            "frequency_type": "monthly",
            "start_date": "2024-02-15",
        }
        body.update(values)
        return client.post("/maintenance/schedules", json=body)

    def test_create_schedule_seeds_due_date(self, client, asset):
        """The response carries the calculated first due date."""
        response = self._schedule(client, asset.id)
        assert response.status_code == 201
        assert response.get_json()["next_due_date"] == "2024-03-15"

    def test_custom_schedule_needs_date(self, client, asset):
        """A custom schedule without next_due_date is a 400."""
        response = self._schedule(client, asset.id, frequency_type="custom")
        assert response.status_code == 400

    def test_zero_frequency_rejected(self, client, asset):
        """frequency_value must be positive."""
        response = self._schedule(client, asset.id, frequency_value=0)
        assert response.status_code == 400

    def test_unknown_asset_is_conflict(self, client, db_session):
        """A dangling asset_id is rejected by the foreign key."""
        response = self._schedule(client, 999)
        assert response.status_code == 409

    def test_task_transition_conflict(self, client, make_schedule, today):
        """Completed tasks cannot be reopened."""
        make_schedule()
        automation_service.run_maintenance_automation(days_ahead=1, today=today)
        task_id = client.get("/maintenance/tasks").get_json()["items"][0]["id"]

        done = client.patch(f"/maintenance/tasks/{task_id}", json={"status": "completed"})
        assert done.status_code == 200
        assert done.get_json()["completed_at"] is not None

        response = client.patch(
            f"/maintenance/tasks/{task_id}", json={"status": "scheduled"}
        )
        assert response.status_code == 409
        data = response.get_json()
        assert data["current"] == "completed"
        assert data["requested"] == "scheduled"

    def test_run_automation_without_body(self, client, make_schedule):
        """An empty POST uses the configured lookahead."""
        make_schedule(start_date=date.today() - timedelta(days=1), frequency_type="daily")
        response = client.post("/maintenance/automation/run")
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "completed"
        assert data["tasks_created"] >= 1

    def test_run_automation_rejects_negative_window(self, client, db_session):
        """days_ahead must be zero or more."""
        response = client.post("/maintenance/automation/run", json={"days_ahead": -1})
        assert response.status_code == 400

    def test_automation_runs_listed(self, client, db_session):
        """Each run appears in the run log."""
        client.post("/maintenance/automation/run", json={"days_ahead": 0})
        data = client.get("/maintenance/automation/runs").get_json()
        assert data["total"] == 1
        assert data["items"][0]["status"] == "completed"

    def test_settings_round_trip(self, client, db_session):
        """PUT stores settings and GET returns them with defaults."""
        response = client.put("/maintenance/settings", json={"work_order_prefix": "WO:"})
        assert response.status_code == 200
        data = client.get("/maintenance/settings").get_json()
        assert data["work_order_prefix"] == "WO:"
        assert data["auto_generate_work_orders"] is True

    def test_dashboard_shape(self, client, db_session):
        """The dashboard returns stats and two task lists."""
        data = client.get("/maintenance/dashboard").get_json()
        assert set(data) == {"stats", "upcoming", "overdue"}
        assert data["stats"]["overdue_tasks"] == 0


class TestSchedulerRoutes:
    """Tests for jobs, complaints, contacts and the calendar."""

    def _job(self, client, **values):
        body = {
            "title": "Replace pump seal",
            "scheduled_date": "2024-03-20",
            "scheduled_start": "10:00",
            "scheduled_end": "11:00",
        }
        body.update(values)
        return client.post("/scheduler/jobs", json=body)

    def test_create_job_serializes_times(self, client, db_session):
        """Times are returned as HH:MM."""
        response = self._job(client)
        assert response.status_code == 201
        data = response.get_json()
        assert data["scheduled_start"] == "10:00"
        assert data["status"] == "pending"

    def test_end_before_start(self, client, db_session):
        """A job may not end before it starts."""
        response = self._job(client, scheduled_end="09:00")
        assert response.status_code == 400

    def test_complaint_to_job(self, client, db_session):
        """Raising a job moves the complaint to in_progress."""
        complaint = client.post("/scheduler/complaints", json={"title": "Leak"}).get_json()
        response = client.post(
            f"/scheduler/complaints/{complaint['id']}/job",
            json={
                "scheduled_date": "2024-03-20",
                "scheduled_start": "09:00",
                "scheduled_end": "10:00",
            },
        )
        assert response.status_code == 201
        assert response.get_json()["complaint_id"] == complaint["id"]
        refreshed = client.get(f"/scheduler/complaints/{complaint['id']}").get_json()
        assert refreshed["status"] == "in_progress"

    def test_calendar_drop(self, client, db_session):
        """A drop updates the job and the calendar reflects it."""
        job = self._job(client).get_json()
        response = client.post(
            "/scheduler/calendar/drop",
            json={
                "kind": "job",
                "id": job["id"],
                "start": "2024-03-22T14:00:00",
                "end": "2024-03-22T15:00:00",
            },
        )
        assert response.status_code == 200
        events = client.get(
            "/scheduler/calendar?start=2024-03-22&end=2024-03-22"
        ).get_json()["events"]
        assert events[0]["id"] == f"job-{job['id']}"
        assert events[0]["start"] == "2024-03-22T14:00:00"

    def test_calendar_window_reversed(self, client, db_session):
        """end before start is a 400."""
        response = client.get("/scheduler/calendar?start=2024-03-31&end=2024-03-01")
        assert response.status_code == 400

    def test_overview_lists_assignable_contacts(self, client, db_session):
        """Residents are not offered for assignment."""
        client.post("/scheduler/contacts", json={"name": "Ravi", "contact_type": "technician"})
        client.post("/scheduler/contacts", json={"name": "Owner", "contact_type": "resident"})
        data = client.get("/scheduler").get_json()
        assert [contact["name"] for contact in data["contacts"]] == ["Ravi"]

    def test_complaint_patch_checks_stored_end(self, client, db_session):
        """A new start is checked against the stored end time."""
        complaint = client.post(
            "/scheduler/complaints",
            json={
                "title": "Leak",
                "scheduled_date": "2024-03-20",
                "scheduled_start": "09:00",
                "scheduled_end": "10:00",
            },
        ).get_json()
        response = client.patch(
            f"/scheduler/complaints/{complaint['id']}",
            json={"scheduled_start": "15:00"},
        )
        assert response.status_code == 400

    def test_job_number_and_history(self, client, db_session):
        """Jobs carry a work order number and a change history."""
        job = self._job(client).get_json()
        assert job["work_order_number"].startswith("WO-")
        client.patch(f"/scheduler/jobs/{job['id']}", json={"title": "Replace seal"})

        data = client.get(f"/scheduler/jobs/{job['id']}/history").get_json()

        assert data["work_order_number"] == job["work_order_number"]
        assert [item["action_type"] for item in data["items"]] == ["UPDATE", "CREATE"]

    def test_history_of_unknown_job(self, client, db_session):
        """Unknown jobs are 404."""
        assert client.get("/scheduler/jobs/999/history").status_code == 404

    def test_search_jobs_by_number(self, client, db_session):
        """The job list searches work order numbers."""
        self._job(client)
        second = self._job(client, title="Second").get_json()
        data = client.get(
            f"/scheduler/jobs?search={second['work_order_number']}"
        ).get_json()
        assert [item["id"] for item in data["items"]] == [second["id"]]


class TestStaffRoutes:
    """Tests for staff, attendance and leave."""

    def test_attendance_upsert(self, client, staff_member):
        """Re-submitting a day replaces the record."""
        body = {"staff_id": staff_member.id, "date": "2024-03-15", "check_in": "09:00"}
        assert client.post("/staff/attendance", json=body).status_code == 200
        body["status"] = "late"
        response = client.post("/staff/attendance", json=body)
        assert response.status_code == 200
        assert response.get_json()["status"] == "late"
        assert client.get("/staff/attendance").get_json()["total"] == 1

    def test_attendance_stats(self, client, staff_member):
        """Stats are computed for the requested month."""
        data = client.get("/staff/attendance/stats?year=2024&month=3").get_json()
        assert data["working_days"] == 21
        assert data["active_staff"] == 1

    def test_leave_reject_without_body(self, client, staff_member):
        """Reject accepts an empty body; approve afterwards conflicts."""
        leave = client.post(
            "/staff/leave",
            json={
                "staff_id": staff_member.id,
                "start_date": "2024-03-18",
                "end_date": "2024-03-20",
            },
        ).get_json()
        assert leave["total_days"] == 3

        response = client.post(f"/staff/leave/{leave['id']}/reject")
        assert response.status_code == 200
        assert response.get_json()["status"] == "rejected"

        response = client.post(f"/staff/leave/{leave['id']}/approve")
        assert response.status_code == 409

    def test_leave_range_validated(self, client, staff_member):
        """end_date before start_date is a 400."""
        response = client.post(
            "/staff/leave",
            json={
                "staff_id": staff_member.id,
                "start_date": "2024-03-20",
                "end_date": "2024-03-18",
            },
        )
        assert response.status_code == 400

    def test_duplicate_employee_id(self, client, staff_member):
        """employee_id is unique."""
        response = client.post(
            "/staff",
            json={"employee_id": "EMP001", "name": "Someone", "email": "x@example.com"},
        )
        assert response.status_code == 409

    def test_departments(self, client, staff_member):
        """Distinct departments of staff members are listed."""
        client.post(
            "/staff",
            json={
                "employee_id": "EMP002",
                "name": "Mei Ling",
                "email": "mei@example.com",
                "department": "front_desk",
            },
        )
        assert client.get("/staff/departments").get_json() == {"items": ["front_desk"]}


class TestPackageRoutes:
    """Tests for the package log actions."""

    def test_pickup_then_return_conflicts(self, client, db_session):
        """Once picked up a package cannot be returned."""
        package = client.post(
            "/packages",
            json={
                "tracking_number": "MY123",
                "recipient_name": "Unit 12-3 Owner",
                "sender": "Shopee Express",
            },
        ).get_json()

        picked = client.post(f"/packages/{package['id']}/pickup")
        assert picked.status_code == 200
        assert picked.get_json()["picked_up_at"] is not None

        response = client.post(f"/packages/{package['id']}/return")
        assert response.status_code == 409
        assert response.get_json()["current"] == "picked_up"

    def test_unknown_action_is_404(self, client, db_session):
        """Only notify, pickup and return are routed."""
        assert client.post("/packages/1/lose").status_code == 404

    def test_create_collected_package_with_time(self, client, db_session):
        """A supplied pickup time is stored and echoed."""
        response = client.post(
            "/packages",
            json={
                "tracking_number": "MY123",
                "recipient_name": "Unit 12-3 Owner",
                "sender": "Shopee Express",
                "status": "picked_up",
                "picked_up_at": "2024-03-01T10:00:00",
            },
        )
        assert response.status_code == 201
        assert response.get_json()["picked_up_at"] == "2024-03-01T10:00:00"

    def test_recorded_pickup_time_is_fixed(self, client, db_session):
        """Changing a recorded pickup time is a 400."""
        package = client.post(
            "/packages",
            json={
                "tracking_number": "MY123",
                "recipient_name": "Unit 12-3 Owner",
                "sender": "Shopee Express",
                "picked_up_at": "2024-03-01T10:00:00",
            },
        ).get_json()

        response = client.patch(
            f"/packages/{package['id']}",
            json={"picked_up_at": "2024-03-02T10:00:00"},
        )
        assert response.status_code == 400

        picked = client.post(f"/packages/{package['id']}/pickup").get_json()
        assert picked["picked_up_at"] == "2024-03-01T10:00:00"
