"""
Routes for the reports blueprint: register exports and the audit log.
"""

from datetime import date, datetime, time

from flask import make_response
from flask_login import login_required

from facilitydesk.blueprints.helpers import (
    arg_date,
    arg_int,
    arg_str,
    get_pagination_args,
    paginated,
)
from facilitydesk.blueprints.reports import bp
from facilitydesk.services import audit_service, export_service

_XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _day_start(day: date | None) -> datetime | None:
    return datetime.combine(day, time.min) if day else None


def _day_end(day: date | None) -> datetime | None:
    return datetime.combine(day, time.max) if day else None


# =========================================================================
# Export endpoints
# =========================================================================

@bp.route("/export/<table>/<any(csv, xlsx):fmt>")
@login_required
def export_table(table, fmt):
    """
    Export a whole register as CSV or Excel.

    Args:
        table: assets, schedules, jobs, complaints, staff or packages.
        fmt:   Export format, 'csv' or 'xlsx'.
    """
    if fmt == "xlsx":
        buffer = export_service.export_excel(table)
        response = make_response(buffer.read())
        response.headers["Content-Type"] = _XLSX_MIMETYPE
    else:
        buffer = export_service.export_csv(table)
        response = make_response(buffer.read())
        response.headers["Content-Type"] = "text/csv; charset=utf-8"

    response.headers["Content-Disposition"] = f"attachment; filename={table}.{fmt}"
    return response


# =========================================================================
# Audit log
# =========================================================================

@bp.route("/audit-log")
@login_required
def audit_log():
    """
    Paginated audit trail, newest first.

    Query params: ``user_id``, ``action_type``, ``entity_type``,
    ``start_date``, ``end_date``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = audit_service.get_audit_logs(
        page=page,
        per_page=per_page,
        user_id=arg_int("user_id"),
        action_type=arg_str("action_type"),
        entity_type=arg_str("entity_type"),
        start_date=_day_start(arg_date("start_date")),
        end_date=_day_end(arg_date("end_date")),
    )
    return paginated(pagination)
