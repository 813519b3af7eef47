"""
Notification service — per-user in-app messages.

Other services call ``notify`` after their own commit, e.g. when a
package is logged or a leave request is decided.  A notification is
copied to each recipient, and every read/delete operation is scoped to
the calling user's copies.  Notifications are messages, not register
data, so they are not written to the audit log.
"""

import logging

from sqlalchemy import desc

from facilitydesk.exceptions import RecordNotFoundError, ValidationError
from facilitydesk.extensions import db
from facilitydesk.models.notification import Notification
from facilitydesk.models.user import User
from facilitydesk.schemas.notification import NotificationCreate

logger = logging.getLogger(__name__)


# =========================================================================
# Sending
# =========================================================================


def notify(
    module: str,
    action: str,
    message: str,
    entity_id: int | None = None,
    recipient_ids: list[int] | None = None,
    created_by: int | None = None,
) -> list[Notification]:
    """
    Store one notification per recipient and commit.

    Args:
        recipient_ids: Users to notify.  ``None`` means every active
                       user.

    Returns:
        The created notifications (empty when there is nobody to tell).
    """
    if recipient_ids is None:
        recipient_ids = [
            user_id
            for (user_id,) in db.session.query(User.id)
            .filter(User.is_active == True)  # noqa: E712
            .order_by(User.id)
        ]

    notifications = [
        Notification(
            user_id=user_id,
            created_by=created_by,
            module=module,
            action=action,
            entity_id=entity_id,
            message=message,
            is_read=False,
        )
        for user_id in recipient_ids
    ]
    if not notifications:
        return []

    db.session.add_all(notifications)
    db.session.commit()

    logger.info(
        "Sent %s.%s notification to %d user(s)", module, action, len(notifications)
    )
    return notifications


def create_notification(
    payload: NotificationCreate, created_by: int | None = None
) -> list[Notification]:
    """
    Send a notification from the API.

    Raises:
        ValidationError: If ``recipient_ids`` is empty or names a user
                         that does not exist or is inactive.
    """
    recipient_ids = None
    if payload.recipient_ids is not None:
        if not payload.recipient_ids:
            raise ValidationError("recipient_ids: must name at least one user")
        recipient_ids = sorted(set(payload.recipient_ids))
        found = {
            user_id
            for (user_id,) in db.session.query(User.id).filter(
                User.id.in_(recipient_ids), User.is_active == True  # noqa: E712
            )
        }
        missing = [user_id for user_id in recipient_ids if user_id not in found]
        if missing:
            raise ValidationError(
                f"recipient_ids: unknown or inactive user(s) {missing}"
            )

    return notify(
        module=payload.module,
        action=payload.action,
        message=payload.message,
        entity_id=payload.entity_id,
        recipient_ids=recipient_ids,
        created_by=created_by,
    )


# =========================================================================
# Reading
# =========================================================================


def get_notifications(
    user_id: int,
    page: int = 1,
    per_page: int = 10,
    unread_only: bool = False,
):
    """Return a page of the user's notifications, newest first."""
    query = Notification.query.filter_by(user_id=user_id).order_by(
        desc(Notification.created_at), desc(Notification.id)
    )
    if unread_only:
        query = query.filter(Notification.is_read == False)  # noqa: E712
    return query.paginate(page=page, per_page=per_page, error_out=False)


def count_unread(user_id: int) -> int:
    return Notification.query.filter_by(user_id=user_id, is_read=False).count()


def get_notification(notification_id: int, user_id: int) -> Notification:
    """
    Return one of the user's notifications.

    Raises:
        RecordNotFoundError: If it does not exist or belongs to someone
                             else.
    """
    notification = db.session.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise RecordNotFoundError("Notification", notification_id)
    return notification


# =========================================================================
# Read state and deletion
# =========================================================================


def mark_read(notification_id: int, user_id: int) -> Notification:
    notification = get_notification(notification_id, user_id)
    notification.is_read = True
    db.session.commit()
    return notification


def mark_all_read(user_id: int) -> int:
    """Mark every unread notification of the user as read; return the count."""
    updated = Notification.query.filter_by(user_id=user_id, is_read=False).update(
        {"is_read": True}, synchronize_session=False
    )
    db.session.commit()
    logger.info("Marked %d notification(s) read for user ID %d", updated, user_id)
    return updated


def delete_notification(notification_id: int, user_id: int) -> None:
    db.session.delete(get_notification(notification_id, user_id))
    db.session.commit()


def delete_all_notifications(user_id: int) -> int:
    """Delete every notification of the user; return the count."""
    deleted = Notification.query.filter_by(user_id=user_id).delete(
        synchronize_session=False
    )
    db.session.commit()
    logger.info("Deleted %d notification(s) for user ID %d", deleted, user_id)
    return deleted
