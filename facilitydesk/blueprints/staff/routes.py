"""
Routes for the staff blueprint.

Attendance submissions are upserts: posting twice for the same staff
member and day replaces the first record.
"""

from datetime import date

from flask import request
from flask_login import login_required

from facilitydesk.blueprints.helpers import (
    arg_date,
    arg_enum,
    arg_int,
    arg_str,
    current_user_id,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.blueprints.staff import bp
from facilitydesk.decorators import confirmation_required
from facilitydesk.exceptions import ValidationError
from facilitydesk.forms import CsvImportForm
from facilitydesk.models.enums import (
    AttendanceStatus,
    LeaveStatus,
    LeaveType,
    StaffStatus,
)
from facilitydesk.schemas.common import validate_payload
from facilitydesk.schemas.staff import (
    AttendanceSubmit,
    AttendanceUpdate,
    LeaveCreate,
    LeaveReject,
    LeaveUpdate,
    StaffCreate,
    StaffUpdate,
)
from facilitydesk.services import (
    attendance_service,
    import_service,
    leave_service,
    staff_service,
)


def _year_month() -> tuple[int, int]:
    """``year`` and ``month`` query params, defaulting to the current month."""
    today = date.today()
    return arg_int("year", default=today.year, minimum=1), arg_int(
        "month", default=today.month, minimum=1
    )


# =========================================================================
# Staff directory
# =========================================================================


@bp.route("", methods=["GET"])
@login_required
def list_staff():
    """
    Paginated staff directory.

    Query params: ``search`` (name, email, employee id), ``department``,
    ``status``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = staff_service.get_staff_list(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        department=arg_str("department"),
        status=arg_enum("status", StaffStatus),
    )
    return paginated(pagination)


@bp.route("/departments", methods=["GET"])
@login_required
def list_departments():
    return {"items": staff_service.get_departments()}


@bp.route("", methods=["POST"])
@login_required
def create_staff():
    payload = json_payload(StaffCreate)
    staff = staff_service.create_staff(payload, user_id=current_user_id())
    return staff.to_dict(), 201


@bp.route("/<int:staff_id>", methods=["GET"])
@login_required
def get_staff(staff_id):
    return staff_service.get_staff(staff_id).to_dict()


@bp.route("/<int:staff_id>", methods=["PATCH"])
@login_required
def update_staff(staff_id):
    payload = json_payload(StaffUpdate)
    staff = staff_service.update_staff(staff_id, payload, user_id=current_user_id())
    return staff.to_dict()


@bp.route("/<int:staff_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_staff(staff_id):
    staff_service.delete_staff(staff_id, user_id=current_user_id())
    return "", 204


@bp.route("/import", methods=["POST"])
@login_required
def import_staff():
    """Bulk-create staff from a CSV upload (multipart field ``file``)."""
    form = CsvImportForm()
    if not form.validate():
        raise ValidationError(form.error_messages())
    result = import_service.import_staff(form.file.data, user_id=current_user_id())
    return result.to_dict()


# =========================================================================
# Attendance
# =========================================================================


@bp.route("/attendance", methods=["GET"])
@login_required
def list_attendance():
    """
    Paginated attendance records.

    Query params: ``staff_id``, ``status``, ``date_from``, ``date_to``,
    ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = attendance_service.get_attendance_list(
        page=page,
        per_page=per_page,
        staff_id=arg_int("staff_id"),
        status=arg_enum("status", AttendanceStatus),
        date_from=arg_date("date_from"),
        date_to=arg_date("date_to"),
    )
    return paginated(pagination)


@bp.route("/attendance/monthly", methods=["GET"])
@login_required
def monthly_attendance():
    year, month = _year_month()
    records = attendance_service.get_monthly_attendance(
        year, month, staff_id=arg_int("staff_id")
    )
    return {"year": year, "month": month, "items": [r.to_dict() for r in records]}


@bp.route("/attendance/stats", methods=["GET"])
@login_required
def attendance_stats():
    year, month = _year_month()
    return attendance_service.get_attendance_stats(year, month)


@bp.route("/attendance", methods=["POST"])
@login_required
def submit_attendance():
    payload = json_payload(AttendanceSubmit)
    record = attendance_service.submit_attendance(payload, user_id=current_user_id())
    return record.to_dict()


@bp.route("/attendance/<int:attendance_id>", methods=["GET"])
@login_required
def get_attendance(attendance_id):
    return attendance_service.get_attendance(attendance_id).to_dict()


@bp.route("/attendance/<int:attendance_id>", methods=["PATCH"])
@login_required
def update_attendance(attendance_id):
    payload = json_payload(AttendanceUpdate)
    record = attendance_service.update_attendance(
        attendance_id, payload, user_id=current_user_id()
    )
    return record.to_dict()


@bp.route("/attendance/<int:attendance_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_attendance(attendance_id):
    attendance_service.delete_attendance(attendance_id, user_id=current_user_id())
    return "", 204


# =========================================================================
# Leave requests
# =========================================================================


@bp.route("/leave", methods=["GET"])
@login_required
def list_leave():
    """
    Paginated leave requests.

    Query params: ``search`` (staff name or employee id), ``status``,
    ``leave_type``, ``staff_id``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = leave_service.get_leave_requests(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        status=arg_enum("status", LeaveStatus),
        leave_type=arg_enum("leave_type", LeaveType),
        staff_id=arg_int("staff_id"),
    )
    return paginated(pagination)


@bp.route("/leave/calendar", methods=["GET"])
@login_required
def leave_calendar():
    year, month = _year_month()
    return {
        "year": year,
        "month": month,
        "days": leave_service.get_leave_calendar(year, month),
    }


@bp.route("/leave", methods=["POST"])
@login_required
def create_leave():
    payload = json_payload(LeaveCreate)
    leave = leave_service.create_leave_request(payload, user_id=current_user_id())
    return leave.to_dict(), 201


@bp.route("/leave/<int:leave_id>", methods=["GET"])
@login_required
def get_leave(leave_id):
    return leave_service.get_leave_request(leave_id).to_dict()


@bp.route("/leave/<int:leave_id>", methods=["PATCH"])
@login_required
def update_leave(leave_id):
    payload = json_payload(LeaveUpdate)
    leave = leave_service.update_leave_request(
        leave_id, payload, user_id=current_user_id()
    )
    return leave.to_dict()


@bp.route("/leave/<int:leave_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_leave(leave_id):
    leave_service.delete_leave_request(leave_id, user_id=current_user_id())
    return "", 204


@bp.route("/leave/<int:leave_id>/approve", methods=["POST"])
@login_required
def approve_leave(leave_id):
    leave = leave_service.approve_leave_request(leave_id, user_id=current_user_id())
    return leave.to_dict()


@bp.route("/leave/<int:leave_id>/reject", methods=["POST"])
@login_required
def reject_leave(leave_id):
    body = request.get_json(silent=True)
    payload = validate_payload(LeaveReject, body if body is not None else {})
    leave = leave_service.reject_leave_request(
        leave_id, payload.rejection_reason, user_id=current_user_id()
    )
    return leave.to_dict()


@bp.route("/leave/<int:leave_id>/cancel", methods=["POST"])
@login_required
def cancel_leave(leave_id):
    leave = leave_service.cancel_leave_request(leave_id, user_id=current_user_id())
    return leave.to_dict()
