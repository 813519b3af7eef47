"""
Shared create/update/delete steps used by the entity services.

Each helper performs the database change, writes the audit entry and
commits, in that order.  Entity services wrap these with their own
lookups, filters and business rules.  Database errors propagate to the
handlers registered in ``create_app()``, which roll the session back.
"""

import logging
from datetime import datetime, timezone
from typing import Any, TypeVar

from facilitydesk.exceptions import RecordNotFoundError
from facilitydesk.extensions import db
from facilitydesk.services import audit_service

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=db.Model)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def get_or_raise(model: type[ModelT], record_id: int, label: str) -> ModelT:
    """
    Return the record with primary key ``record_id``.

    Raises:
        RecordNotFoundError: If no such record exists.
    """
    record = db.session.get(model, record_id)
    if record is None:
        raise RecordNotFoundError(label, record_id)
    return record


def create_record(
    model: type[ModelT],
    values: dict[str, Any],
    user_id: int | None = None,
) -> ModelT:
    """Insert a new record, audit it and commit."""
    record = model(**values)
    db.session.add(record)
    db.session.flush()

    audit_service.log_change(
        user_id=user_id,
        action_type="CREATE",
        entity_type=model.__tablename__,
        entity_id=record.id,
        new_value=record.to_dict(),
    )
    db.session.commit()

    logger.info("Created %s ID %d", model.__tablename__, record.id)
    return record


def update_record(
    record: ModelT,
    values: dict[str, Any],
    user_id: int | None = None,
    previous: dict[str, Any] | None = None,
) -> ModelT:
    """
    Apply ``values`` to ``record``, audit the changed fields and commit.

    Only keys present in ``values`` are touched, so a partial payload
    leaves every other column as it was.  Callers that mutate the record
    before calling this pass the earlier snapshot as ``previous``.
    """
    if previous is None:
        previous = record.to_dict()
    for key, value in values.items():
        setattr(record, key, value)
    record.updated_at = utcnow()
    db.session.flush()

    before, after = audit_service.diff(previous, record.to_dict())
    audit_service.log_change(
        user_id=user_id,
        action_type="UPDATE",
        entity_type=record.__tablename__,
        entity_id=record.id,
        previous_value=before,
        new_value=after,
    )
    db.session.commit()

    logger.info("Updated %s ID %d", record.__tablename__, record.id)
    return record


def delete_record(record: db.Model, user_id: int | None = None) -> None:
    """Hard-delete ``record``, audit the final state and commit."""
    snapshot = record.to_dict()
    record_id = record.id
    table = record.__tablename__

    db.session.delete(record)
    audit_service.log_change(
        user_id=user_id,
        action_type="DELETE",
        entity_type=table,
        entity_id=record_id,
        previous_value=snapshot,
    )
    db.session.commit()

    logger.info("Deleted %s ID %d", table, record_id)

