"""
Tests for notification_service: fan-out, read state and per-user scoping.
"""

import pytest

from facilitydesk.exceptions import RecordNotFoundError, ValidationError
from facilitydesk.schemas.notification import NotificationCreate
from facilitydesk.services import notification_service, user_service


@pytest.fixture
def users(db_session):  # pylint: disable=unused-argument
    desk, _ = user_service.create_user("desk@example.com", "Front Desk")
    guard, _ = user_service.create_user("guard@example.com", "Guard House")
    return desk, guard


def _notify(**overrides):
    values = {
        "module": "packages",
        "action": "received",
        "message": "Package MY1 received",
    }
    values.update(overrides)
    return notification_service.notify(**values)


class TestNotify:
    """Tests for sending."""

    def test_fans_out_to_active_users(self, users):
        """Without recipients every active user gets a copy."""
        desk, guard = users
        sent = _notify()
        assert [n.user_id for n in sent] == [desk.id, guard.id]
        assert all(not n.is_read for n in sent)

    def test_inactive_users_skipped(self, users, db_session):
        """Deactivated users are not notified."""
        desk, guard = users
        guard.is_active = False
        db_session.commit()
        assert [n.user_id for n in _notify()] == [desk.id]

    def test_nobody_to_tell(self, db_session):
        """With no users nothing is stored."""
        assert _notify() == []

    def test_explicit_recipients(self, users):
        """Payload recipients limit the fan-out and record the sender."""
        desk, guard = users
        sent = notification_service.create_notification(
            NotificationCreate(
                module="maintenance",
                action="reminder",
                message="Lift inspection tomorrow",
                recipient_ids=[guard.id, guard.id],
            ),
            created_by=desk.id,
        )
        assert [(n.user_id, n.created_by) for n in sent] == [(guard.id, desk.id)]

    def test_unknown_recipient(self, users):
        """Recipients must be existing active users."""
        with pytest.raises(ValidationError):
            notification_service.create_notification(
                NotificationCreate(
                    module="maintenance", action="reminder", message="x",
                    recipient_ids=[999],
                )
            )

    def test_empty_recipient_list(self, users):
        """An empty recipient list is refused rather than sent to everyone."""
        with pytest.raises(ValidationError):
            notification_service.create_notification(
                NotificationCreate(
                    module="maintenance", action="reminder", message="x",
                    recipient_ids=[],
                )
            )


class TestReadState:
    """Tests for listing, read flags and deletion."""

    def test_list_newest_first(self, users):
        """A user's list holds only their copies, newest first."""
        desk, _ = users
        _notify(message="First")
        _notify(message="Second")

        page = notification_service.get_notifications(desk.id)

        assert [n.message for n in page.items] == ["Second", "First"]
        assert page.total == 2

    def test_mark_read(self, users):
        """Marking one read lowers the unread count."""
        desk, _ = users
        first, _ = _notify()
        _notify()

        notification_service.mark_read(first.id, desk.id)

        assert notification_service.count_unread(desk.id) == 1
        unread = notification_service.get_notifications(desk.id, unread_only=True)
        assert first.id not in [n.id for n in unread.items]

    def test_mark_all_read(self, users):
        """Mark-all only touches the caller's copies."""
        desk, guard = users
        _notify()
        _notify()

        assert notification_service.mark_all_read(desk.id) == 2
        assert notification_service.count_unread(desk.id) == 0
        assert notification_service.count_unread(guard.id) == 2

    def test_other_users_copy_not_found(self, users):
        """A user cannot read or delete someone else's copy."""
        desk, guard = users
        _, guards_copy = _notify()

        with pytest.raises(RecordNotFoundError):
            notification_service.mark_read(guards_copy.id, desk.id)
        with pytest.raises(RecordNotFoundError):
            notification_service.delete_notification(guards_copy.id, desk.id)
        assert notification_service.count_unread(guard.id) == 1

    def test_delete(self, users):
        """Deleting removes only the caller's copy."""
        desk, guard = users
        desks_copy, _ = _notify()

        notification_service.delete_notification(desks_copy.id, desk.id)

        assert notification_service.get_notifications(desk.id).total == 0
        assert notification_service.get_notifications(guard.id).total == 1

    def test_delete_all(self, users):
        """Clearing returns the number removed."""
        desk, _ = users
        _notify()
        _notify()
        assert notification_service.delete_all_notifications(desk.id) == 2
        assert notification_service.count_unread(desk.id) == 0
