"""
Routes for the notifications blueprint.

Every route works on the calling user's own notifications, so a real
user is required even when ``LOGIN_DISABLED`` is set.
"""

from flask_login import current_user, login_required

from facilitydesk.blueprints.helpers import (
    arg_bool,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.blueprints.notifications import bp
from facilitydesk.decorators import confirmation_required
from facilitydesk.schemas.notification import NotificationCreate
from facilitydesk.services import notification_service


def _require_user():
    if not current_user.is_authenticated:
        return {"error": "Authentication required."}, 401
    return None


@bp.route("", methods=["GET"])
@login_required
def list_notifications():
    """
    Paginated notifications for the calling user, newest first.

    Query params: ``unread_only``, ``page``, ``per_page``.  The envelope
    also carries ``unread``, the user's unread count.
    """
    denied = _require_user()
    if denied:
        return denied

    page, per_page = get_pagination_args()
    pagination = notification_service.get_notifications(
        current_user.id,
        page=page,
        per_page=per_page,
        unread_only=bool(arg_bool("unread_only")),
    )
    body = paginated(pagination)
    body["unread"] = notification_service.count_unread(current_user.id)
    return body


@bp.route("", methods=["POST"])
@login_required
def create_notification():
    """Send a message to ``recipient_ids`` (or every active user)."""
    denied = _require_user()
    if denied:
        return denied

    payload = json_payload(NotificationCreate)
    notifications = notification_service.create_notification(
        payload, created_by=current_user.id
    )
    return {"items": [n.to_dict() for n in notifications]}, 201


@bp.route("/<int:notification_id>/read", methods=["POST"])
@login_required
def mark_read(notification_id):
    denied = _require_user()
    if denied:
        return denied
    return notification_service.mark_read(notification_id, current_user.id).to_dict()


@bp.route("/read-all", methods=["POST"])
@login_required
def mark_all_read():
    denied = _require_user()
    if denied:
        return denied
    return {"updated": notification_service.mark_all_read(current_user.id)}


@bp.route("/<int:notification_id>", methods=["DELETE"])
@login_required
def delete_notification(notification_id):
    denied = _require_user()
    if denied:
        return denied
    notification_service.delete_notification(notification_id, current_user.id)
    return "", 204


@bp.route("", methods=["DELETE"])
@login_required
@confirmation_required
def delete_all_notifications():
    denied = _require_user()
    if denied:
        return denied
    return {"deleted": notification_service.delete_all_notifications(current_user.id)}
