"""
Tests for the account blueprint (profile, avatar upload), the
notifications blueprint and the reports blueprint (exports, audit log).
"""

import io

import pytest
from openpyxl import load_workbook

from facilitydesk.services import notification_service, user_service

# Smallest valid-looking PNG payload; the server checks the extension
# and size, not the pixels.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def api_user(db_session):  # pylint: disable=unused-argument
    """A user plus the headers that authenticate as them."""
    user, token = user_service.create_user("desk@example.com", "Front Desk")
    return user, {"Authorization": f"Bearer {token}"}


class TestAccount:
    """Tests for the current-user profile."""

    def test_profile_with_token(self, client, api_user):
        """A bearer token resolves to the user's profile."""
        user, headers = api_user
        response = client.get("/account", headers=headers)
        assert response.status_code == 200
        data = response.get_json()
        assert data["email"] == user.email
        assert "api_token_hash" not in data

    def test_profile_without_token(self, client, db_session):
        """No token means no profile, even with login checks disabled."""
        assert client.get("/account").status_code == 401

    def test_bad_token(self, client, api_user):
        """An unknown token is treated as anonymous."""
        response = client.get("/account", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


class TestAvatarUpload:
    """Tests for the avatar upload route."""

    def _upload(self, client, headers, content=PNG_BYTES, filename="me.png"):
        return client.post(
            "/account/avatar",
            data={"file": (io.BytesIO(content), filename)},
            headers=headers,
            content_type="multipart/form-data",
        )

    def test_upload_stores_and_serves(self, client, api_user):
        """The image is saved, linked on the user and served back."""
        user, headers = api_user
        response = self._upload(client, headers)
        assert response.status_code == 201
        url = response.get_json()["avatar_url"]
        assert url.startswith("/uploads/avatars/")
        assert url.endswith(".png")
        assert user_service.get_user_by_id(user.id).avatar_url == url

        served = client.get(url)
        assert served.status_code == 200
        assert served.data == PNG_BYTES

    def test_wrong_extension(self, client, api_user):
        """Only image extensions are accepted."""
        _, headers = api_user
        response = self._upload(client, headers, filename="me.txt")
        assert response.status_code == 400

    def test_too_large(self, client, api_user):
        """Files over AVATAR_MAX_BYTES are refused."""
        _, headers = api_user
        response = self._upload(client, headers, content=b"\x00" * 2048)
        assert response.status_code == 400

    def test_missing_file(self, client, api_user):
        """The file field is required."""
        _, headers = api_user
        response = client.post(
            "/account/avatar",
            data={},
            headers=headers,
            content_type="multipart/form-data",
        )
        assert response.status_code == 400

    def test_anonymous_upload(self, client, db_session):
        """Uploads need a user to attach the avatar to."""
        assert self._upload(client, {}).status_code == 401

    def test_unknown_upload_404(self, client, db_session):
        """Missing files answer 404."""
        assert client.get("/uploads/avatars/missing.png").status_code == 404


class TestNotifications:
    """Tests for the calling user's notifications."""

    def test_package_arrival_listed(self, client, api_user):
        """Logging a package shows up unread in the user's list."""
        _, headers = api_user
        client.post(
            "/packages",
            json={"tracking_number": "MY1", "recipient_name": "Tan", "sender": "J&T"},
            headers=headers,
        )

        data = client.get("/notifications", headers=headers).get_json()

        assert data["total"] == 1
        assert data["unread"] == 1
        assert data["items"][0]["module"] == "packages"
        assert data["items"][0]["message"] == "Package MY1 from J&T received for Tan"

    def test_read_then_delete(self, client, api_user):
        """A notification can be marked read and then deleted."""
        user, headers = api_user
        (notification,) = notification_service.notify(
            module="leave", action="approved", message="Leave approved"
        )
        notification_id = notification.id

        read = client.post(f"/notifications/{notification_id}/read", headers=headers)
        assert read.status_code == 200
        assert read.get_json()["is_read"] is True
        assert client.post("/notifications/read-all", headers=headers).get_json() == {
            "updated": 0
        }

        deleted = client.delete(f"/notifications/{notification_id}", headers=headers)
        assert deleted.status_code == 204
        assert notification_service.get_notifications(user.id).total == 0

    def test_send_to_recipients(self, client, api_user):
        """Posting sends one copy per recipient from the caller."""
        user, headers = api_user
        other, _ = user_service.create_user("guard@example.com", "Guard House")
        response = client.post(
            "/notifications",
            json={
                "module": "maintenance",
                "action": "reminder",
                "message": "Lift inspection tomorrow",
                "recipient_ids": [other.id],
            },
            headers=headers,
        )
        assert response.status_code == 201
        (item,) = response.get_json()["items"]
        assert item["user_id"] == other.id
        assert item["created_by"] == user.id

    def test_other_users_notification_is_404(self, client, api_user):
        """Only the recipient can touch a notification."""
        _, headers = api_user
        other, _ = user_service.create_user("guard@example.com", "Guard House")
        (notification,) = notification_service.notify(
            module="leave", action="approved", message="x", recipient_ids=[other.id]
        )
        response = client.post(f"/notifications/{notification.id}/read", headers=headers)
        assert response.status_code == 404

    def test_clear_needs_confirmation(self, client, api_user):
        """Deleting everything needs confirm=true."""
        _, headers = api_user
        notification_service.notify(module="leave", action="approved", message="x")
        assert client.delete("/notifications", headers=headers).status_code == 400
        response = client.delete("/notifications?confirm=true", headers=headers)
        assert response.get_json() == {"deleted": 1}

    def test_anonymous(self, client, db_session):
        """Notifications belong to a user."""
        assert client.get("/notifications").status_code == 401


class TestExports:
    """Tests for the export downloads."""

    def test_csv_download(self, client, asset):
        """CSV exports are sent as attachments."""
        response = client.get("/reports/export/assets/csv")
        assert response.status_code == 200
        assert response.headers["Content-Disposition"] == "attachment; filename=assets.csv"
        assert response.content_type.startswith("text/csv")
        assert "Lift A1" in response.data.decode("utf-8-sig")

    def test_xlsx_download(self, client, asset):
        """Excel exports open as workbooks."""
        response = client.get("/reports/export/assets/xlsx")
        assert response.status_code == 200
        sheet = load_workbook(io.BytesIO(response.data)).active
        assert sheet.cell(row=2, column=1).value == "Lift A1"

    def test_unknown_table(self, client, db_session):
        """Tables outside the export list are 404."""
        assert client.get("/reports/export/users/csv").status_code == 404

    def test_unknown_format(self, client, db_session):
        """Only csv and xlsx are routed."""
        assert client.get("/reports/export/assets/pdf").status_code == 404


class TestAuditLog:
    """Tests for the audit trail listing."""

    def test_entries_filtered_by_entity(self, client, db_session):
        """Creating an asset leaves one CREATE entry for assets."""
        client.post("/assets", json={"name": "Lift A1"})
        client.post("/packages", json={
            "tracking_number": "MY1", "recipient_name": "A", "sender": "B",
        })
        data = client.get("/reports/audit-log?entity_type=assets").get_json()
        assert data["total"] == 1
        assert data["items"][0]["action_type"] == "CREATE"

    def test_date_range_is_inclusive_days(self, client, db_session):
        """end_date in the past excludes today's entries."""
        client.post("/assets", json={"name": "Lift A1"})
        everything = client.get("/reports/audit-log?start_date=2000-01-01").get_json()
        nothing = client.get("/reports/audit-log?end_date=2000-01-01").get_json()
        assert everything["total"] == 1
        assert nothing["total"] == 0

    def test_bad_date(self, client, db_session):
        """Dates must be ISO formatted."""
        assert client.get("/reports/audit-log?start_date=15/03/2024").status_code == 400
