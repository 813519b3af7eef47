"""
Package service — the front-desk package log.

``picked_up_at`` is set once, either explicitly or by the first move to
``picked_up``, and never changes afterwards.
"""

import logging

from sqlalchemy import or_

from facilitydesk.exceptions import InvalidTransitionError, ValidationError
from facilitydesk.models.enums import PACKAGE_TRANSITIONS, PackageStatus, can_transition
from facilitydesk.models.package import Package
from facilitydesk.schemas.common import changes
from facilitydesk.schemas.package import PackageCreate, PackageUpdate
from facilitydesk.services import crud, notification_service

logger = logging.getLogger(__name__)


def get_packages(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    status: PackageStatus | None = None,
):
    """
    Return a page of packages, most recently logged first.

    Args:
        search: Case-insensitive match on tracking number, recipient,
                unit or sender.
    """
    query = Package.query.order_by(Package.created_at.desc(), Package.id.desc())
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Package.tracking_number.ilike(pattern),
                Package.recipient_name.ilike(pattern),
                Package.recipient_unit.ilike(pattern),
                Package.sender.ilike(pattern),
            )
        )
    if status is not None:
        query = query.filter(Package.status == status)
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_package(package_id: int) -> Package:
    return crud.get_or_raise(Package, package_id, "Package")


def create_package(payload: PackageCreate, user_id: int | None = None) -> Package:
    """
    Log a package.

    A package logged straight as ``picked_up`` is stamped now unless the
    caller supplied ``picked_up_at``.  Active users are notified of the
    arrival.
    """
    values = payload.model_dump()
    if payload.status == PackageStatus.PICKED_UP and values["picked_up_at"] is None:
        values["picked_up_at"] = crud.utcnow()
    package = crud.create_record(Package, values, user_id=user_id)

    notification_service.notify(
        module="packages",
        action="received",
        entity_id=package.id,
        message=(
            f"Package {package.tracking_number} from {package.sender} "
            f"received for {package.recipient_name}"
            + (f" ({package.recipient_unit})" if package.recipient_unit else "")
        ),
    )
    return package


def update_package(
    package_id: int, payload: PackageUpdate, user_id: int | None = None
) -> Package:
    """
    Apply a partial update.

    Raises:
        InvalidTransitionError: If the status move is not allowed.
        ValidationError: If ``picked_up_at`` is already recorded and the
                         payload tries to change it.
    """
    package = get_package(package_id)
    values = changes(payload)

    if "picked_up_at" in values and package.picked_up_at is not None:
        if values["picked_up_at"] != package.picked_up_at:
            raise ValidationError("picked_up_at: already recorded and cannot be changed")
        del values["picked_up_at"]

    status = values.get("status")
    if status is not None:
        if not can_transition(PACKAGE_TRANSITIONS, package.status, status):
            raise InvalidTransitionError("Package", package.status, status)
        if (
            status == PackageStatus.PICKED_UP
            and package.picked_up_at is None
            and values.get("picked_up_at") is None
        ):
            values["picked_up_at"] = crud.utcnow()
    return crud.update_record(package, values, user_id=user_id)


def set_status(
    package_id: int, status: PackageStatus, user_id: int | None = None
) -> Package:
    """Shortcut for the notify / picked-up / returned actions."""
    return update_package(package_id, PackageUpdate(status=status), user_id=user_id)


def delete_package(package_id: int, user_id: int | None = None) -> None:
    crud.delete_record(get_package(package_id), user_id=user_id)
