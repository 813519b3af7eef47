"""
Audit service — records all data changes and queries audit logs.

Every CREATE, UPDATE, DELETE, IMPORT and AUTOMATION operation in the
application passes through this service so that a complete audit trail
is maintained.  The ``log_change`` function is the primary entry point,
called by other services just before they commit.
"""

import json
import logging
from datetime import datetime
from typing import Any

from flask import request
from sqlalchemy import desc

from facilitydesk.extensions import db
from facilitydesk.models.audit import AuditLog
from facilitydesk.models.mixins import to_json_value

logger = logging.getLogger(__name__)


def _dumps(value: dict[str, Any] | None) -> str | None:
    if not value:
        return None
    return json.dumps(value, default=to_json_value)


# -- Write audit entries ---------------------------------------------------

def log_change(
    user_id: int | None,
    action_type: str,
    entity_type: str,
    entity_id: int | None,
    previous_value: dict[str, Any] | None = None,
    new_value: dict[str, Any] | None = None,
) -> AuditLog:
    """
    Record a data change in the audit log.

    Args:
        user_id:        ID of the user who made the change, or None for
                        system actions (e.g., the automation CLI).
        action_type:    One of CREATE, UPDATE, DELETE, IMPORT, AUTOMATION.
        entity_type:    Table name of the entity (e.g., 'assets').
        entity_id:      Primary key of the affected record.
        previous_value: Dict of the record state before the change.
        new_value:      Dict of the record state after the change.

    Returns:
        The newly created AuditLog record.
    """
    # Capture request metadata when available (inside a request context).
    ip_address = None
    user_agent = None
    try:
        ip_address = request.remote_addr
        user_agent = str(request.user_agent)[:500]
    except RuntimeError:
        # Outside of a request context (e.g., CLI).
        pass

    entry = AuditLog(
        user_id=user_id,
        action_type=action_type,
        entity_type=entity_type,
        entity_id=entity_id,
        previous_value=_dumps(previous_value),
        new_value=_dumps(new_value),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.session.add(entry)
    db.session.flush()

    logger.info(
        "Audit: %s %s:%s by user %s",
        action_type,
        entity_type,
        entity_id,
        user_id,
    )
    return entry


def diff(previous: dict[str, Any], current: dict[str, Any]) -> tuple[dict, dict]:
    """
    Reduce two full snapshots to only the fields that changed.

    Returns:
        ``(previous_subset, new_subset)`` ready for ``log_change``.
    """
    changed = [
        key for key in current
        if key != "updated_at" and previous.get(key) != current.get(key)
    ]
    return (
        {key: previous.get(key) for key in changed},
        {key: current.get(key) for key in changed},
    )


# -- Query audit logs ------------------------------------------------------

def get_audit_logs(
    page: int = 1,
    per_page: int = 50,
    user_id: int | None = None,
    action_type: str | None = None,
    entity_type: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
):
    """
    Query audit logs with optional filters and pagination.

    Returns:
        A SQLAlchemy pagination object with ``.items``, ``.pages``,
        ``.total``, etc.
    """
    query = AuditLog.query.order_by(desc(AuditLog.created_at), desc(AuditLog.id))

    if user_id is not None:
        query = query.filter(AuditLog.user_id == user_id)
    if action_type:
        query = query.filter(AuditLog.action_type == action_type.upper())
    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)
    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)

    return query.paginate(page=page, per_page=per_page, error_out=False)


def _loads(value: str | None) -> dict[str, Any] | None:
    return json.loads(value) if value else None


def get_entity_history(entity_type: str, entity_id: int) -> list[dict[str, Any]]:
    """
    Every audit entry for one record, newest first.

    Used for the work-order history view.  The JSON snapshots are decoded
    and the acting user's name is resolved.
    """
    entries = (
        AuditLog.query.filter_by(entity_type=entity_type, entity_id=entity_id)
        .order_by(desc(AuditLog.created_at), desc(AuditLog.id))
        .all()
    )
    return [
        {
            "id": entry.id,
            "action_type": entry.action_type,
            "performed_at": to_json_value(entry.created_at),
            "performed_by": entry.user.full_name if entry.user else None,
            "previous_value": _loads(entry.previous_value),
            "new_value": _loads(entry.new_value),
        }
        for entry in entries
    ]
