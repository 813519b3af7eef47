"""
Routes for the maintenance blueprint.

Tasks have no create route: they are produced by the automation run
only.  ``POST /maintenance/automation/run`` answers 500 with the error
text when the run fails; the run log row records the failure either way.
"""

from flask import request
from flask_login import login_required

from facilitydesk.blueprints.helpers import (
    arg_bool,
    arg_date,
    arg_enum,
    arg_int,
    arg_str,
    current_user_id,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.blueprints.maintenance import bp
from facilitydesk.decorators import confirmation_required
from facilitydesk.models.enums import FrequencyType, TaskStatus
from facilitydesk.schemas.common import validate_payload
from facilitydesk.schemas.maintenance import (
    AutomationRunRequest,
    MaintenanceTypeCreate,
    MaintenanceTypeUpdate,
    ScheduleCreate,
    ScheduleUpdate,
    SettingsUpdate,
    TaskUpdate,
)
from facilitydesk.services import (
    automation_service,
    dashboard_service,
    schedule_service,
    task_service,
)


# =========================================================================
# Dashboard
# =========================================================================


@bp.route("/dashboard", methods=["GET"])
@login_required
def dashboard():
    return dashboard_service.get_maintenance_dashboard()


# =========================================================================
# Maintenance types
# =========================================================================


@bp.route("/types", methods=["GET"])
@login_required
def list_types():
    return {"items": [t.to_dict() for t in schedule_service.get_maintenance_types()]}


@bp.route("/types", methods=["POST"])
@login_required
def create_type():
    payload = json_payload(MaintenanceTypeCreate)
    record = schedule_service.create_maintenance_type(payload, user_id=current_user_id())
    return record.to_dict(), 201


@bp.route("/types/<int:type_id>", methods=["GET"])
@login_required
def get_type(type_id):
    return schedule_service.get_maintenance_type(type_id).to_dict()


@bp.route("/types/<int:type_id>", methods=["PATCH"])
@login_required
def update_type(type_id):
    payload = json_payload(MaintenanceTypeUpdate)
    record = schedule_service.update_maintenance_type(
        type_id, payload, user_id=current_user_id()
    )
    return record.to_dict()


@bp.route("/types/<int:type_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_type(type_id):
    schedule_service.delete_maintenance_type(type_id, user_id=current_user_id())
    return "", 204


# =========================================================================
# Schedules
# =========================================================================


@bp.route("/schedules", methods=["GET"])
@login_required
def list_schedules():
    """
    Paginated schedule list.

    Query params: ``search`` (schedule or asset name), ``asset_id``,
    ``frequency_type``, ``is_active``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = schedule_service.get_schedules(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        asset_id=arg_int("asset_id"),
        frequency_type=arg_enum("frequency_type", FrequencyType),
        is_active=arg_bool("is_active"),
    )
    return paginated(pagination)


@bp.route("/schedules", methods=["POST"])
@login_required
def create_schedule():
    payload = json_payload(ScheduleCreate)
    schedule = schedule_service.create_schedule(payload, user_id=current_user_id())
    return schedule.to_dict(), 201


@bp.route("/schedules/<int:schedule_id>", methods=["GET"])
@login_required
def get_schedule(schedule_id):
    return schedule_service.get_schedule(schedule_id).to_dict()


@bp.route("/schedules/<int:schedule_id>", methods=["PATCH"])
@login_required
def update_schedule(schedule_id):
    payload = json_payload(ScheduleUpdate)
    schedule = schedule_service.update_schedule(
        schedule_id, payload, user_id=current_user_id()
    )
    return schedule.to_dict()


@bp.route("/schedules/<int:schedule_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_schedule(schedule_id):
    schedule_service.delete_schedule(schedule_id, user_id=current_user_id())
    return "", 204


# =========================================================================
# Tasks
# =========================================================================


@bp.route("/tasks", methods=["GET"])
@login_required
def list_tasks():
    """
    Paginated task list.

    Query params: ``status``, ``schedule_id``, ``asset_id``,
    ``date_from``, ``date_to``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = task_service.get_tasks(
        page=page,
        per_page=per_page,
        status=arg_enum("status", TaskStatus),
        schedule_id=arg_int("schedule_id"),
        asset_id=arg_int("asset_id"),
        date_from=arg_date("date_from"),
        date_to=arg_date("date_to"),
    )
    return paginated(pagination)


@bp.route("/tasks/<int:task_id>", methods=["GET"])
@login_required
def get_task(task_id):
    return task_service.get_task(task_id).to_dict()


@bp.route("/tasks/<int:task_id>", methods=["PATCH"])
@login_required
def update_task(task_id):
    payload = json_payload(TaskUpdate)
    task = task_service.update_task(task_id, payload, user_id=current_user_id())
    return task.to_dict()


# =========================================================================
# Automation
# =========================================================================


@bp.route("/automation/run", methods=["POST"])
@login_required
def run_automation():
    """
    Run the maintenance automation now.

    Optional JSON body: ``{"days_ahead": <int>}``.
    """
    body = request.get_json(silent=True)
    payload = validate_payload(AutomationRunRequest, body if body is not None else {})
    result = automation_service.run_maintenance_automation(
        days_ahead=payload.days_ahead, user_id=current_user_id()
    )
    if not result.succeeded:
        return {"error": result.error_message, "result": result.to_dict()}, 500
    return result.to_dict()


@bp.route("/automation/runs", methods=["GET"])
@login_required
def list_automation_runs():
    page, per_page = get_pagination_args()
    return paginated(automation_service.get_run_logs(page=page, per_page=per_page))


@bp.route("/settings", methods=["GET"])
@login_required
def get_settings():
    return automation_service.get_settings()


@bp.route("/settings", methods=["PUT"])
@login_required
def update_settings():
    payload = json_payload(SettingsUpdate)
    return automation_service.update_settings(payload, user_id=current_user_id())
