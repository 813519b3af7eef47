"""
Asset service — CRUD for the asset register plus due-date metrics.

Due badges and the due filters both go through ``due_status`` so the
list, the metric cards and the filter agree on every boundary.
"""

import logging
from datetime import date

from sqlalchemy import or_

from facilitydesk.models.asset import Asset
from facilitydesk.models.enums import AssetStatus, Priority
from facilitydesk.schemas.asset import AssetCreate, AssetUpdate
from facilitydesk.schemas.common import changes
from facilitydesk.services import crud
from facilitydesk.services.due_status import (
    DueStatus,
    classify_due_date,
    days_until,
    due_date_bounds,
    is_due_soon,
    is_overdue,
)

logger = logging.getLogger(__name__)


# =========================================================================
# Queries
# =========================================================================


def get_assets(
    page: int = 1,
    per_page: int = 10,
    search: str | None = None,
    status: AssetStatus | None = None,
    criticality: Priority | None = None,
    due: DueStatus | None = None,
    today: date | None = None,
):
    """
    Return a page of assets ordered by name.

    Args:
        search:      Case-insensitive match on name, building,
                     contractor or make/model.
        status:      Exact status filter.
        criticality: Exact criticality filter.
        due:         Due band of ``next_certification_date``.
        today:       Reference date for ``due`` (defaults to today).
    """
    query = Asset.query.order_by(Asset.name, Asset.id)

    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Asset.name.ilike(pattern),
                Asset.location_building.ilike(pattern),
                Asset.contractor_name.ilike(pattern),
                Asset.make_model.ilike(pattern),
            )
        )
    if status is not None:
        query = query.filter(Asset.status == status)
    if criticality is not None:
        query = query.filter(Asset.criticality == criticality)
    if due is not None:
        query = _filter_by_due(query, due, today or date.today())

    return query.paginate(page=page, per_page=per_page, error_out=False)


def _filter_by_due(query, due: DueStatus, today: date):
    column = Asset.next_certification_date
    if due is DueStatus.NONE:
        return query.filter(column.is_(None))
    earliest, latest = due_date_bounds(due, today)
    if earliest is not None:
        query = query.filter(column >= earliest)
    if latest is not None:
        query = query.filter(column <= latest)
    return query


def get_asset(asset_id: int) -> Asset:
    """Return an asset or raise ``RecordNotFoundError``."""
    return crud.get_or_raise(Asset, asset_id, "Asset")


def asset_to_dict(asset: Asset, today: date | None = None) -> dict:
    """Serialize an asset with its certification due badge."""
    today = today or date.today()
    data = asset.to_dict()
    due = asset.next_certification_date
    data["due_status"] = classify_due_date(due, today).value
    data["days_until_due"] = days_until(due, today) if due else None
    return data


def get_asset_metrics(today: date | None = None) -> dict[str, int]:
    """
    Counts for the asset metric cards.

    ``due_soon`` and ``overdue`` use the same classifier as the badges.
    """
    today = today or date.today()
    metrics = {
        "total": 0,
        "active": 0,
        "overdue": 0,
        "due_soon": 0,
        "upcoming": 0,
    }
    rows = Asset.query.with_entities(Asset.status, Asset.next_certification_date)
    for status, due in rows:
        metrics["total"] += 1
        if status == AssetStatus.ACTIVE:
            metrics["active"] += 1
        if is_overdue(due, today):
            metrics["overdue"] += 1
        elif is_due_soon(due, today):
            metrics["due_soon"] += 1
        elif classify_due_date(due, today) is DueStatus.UPCOMING:
            metrics["upcoming"] += 1
    return metrics


# =========================================================================
# Writes
# =========================================================================


def create_asset(payload: AssetCreate, user_id: int | None = None) -> Asset:
    """Create an asset from a validated payload."""
    return crud.create_record(Asset, payload.model_dump(), user_id=user_id)


def update_asset(
    asset_id: int, payload: AssetUpdate, user_id: int | None = None
) -> Asset:
    """Apply the supplied fields of ``payload`` to an asset."""
    asset = get_asset(asset_id)
    return crud.update_record(asset, changes(payload), user_id=user_id)


def delete_asset(asset_id: int, user_id: int | None = None) -> None:
    """Hard-delete an asset together with its schedules and tasks."""
    asset = get_asset(asset_id)
    crud.delete_record(asset, user_id=user_id)
