"""
Routes for the assets blueprint.

List responses decorate each asset with its certification due badge
(``due_status``, ``days_until_due``).
"""

from flask_login import login_required

from facilitydesk.blueprints.assets import bp
from facilitydesk.blueprints.helpers import (
    arg_enum,
    arg_str,
    current_user_id,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.decorators import confirmation_required
from facilitydesk.exceptions import ValidationError
from facilitydesk.forms import CsvImportForm
from facilitydesk.models.enums import AssetStatus, Priority
from facilitydesk.schemas.asset import AssetCreate, AssetUpdate
from facilitydesk.services import asset_service, import_service
from facilitydesk.services.due_status import DueStatus


@bp.route("", methods=["GET"])
@login_required
def list_assets():
    """
    Paginated asset list.

    Query params: ``search``, ``status``, ``criticality``, ``due``
    (overdue / due_soon / upcoming / ok / none), ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = asset_service.get_assets(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        status=arg_enum("status", AssetStatus),
        criticality=arg_enum("criticality", Priority),
        due=arg_enum("due", DueStatus),
    )
    return paginated(pagination, asset_service.asset_to_dict)


@bp.route("/metrics", methods=["GET"])
@login_required
def asset_metrics():
    return asset_service.get_asset_metrics()


@bp.route("", methods=["POST"])
@login_required
def create_asset():
    payload = json_payload(AssetCreate)
    asset = asset_service.create_asset(payload, user_id=current_user_id())
    return asset_service.asset_to_dict(asset), 201


@bp.route("/<int:asset_id>", methods=["GET"])
@login_required
def get_asset(asset_id):
    return asset_service.asset_to_dict(asset_service.get_asset(asset_id))


@bp.route("/<int:asset_id>", methods=["PATCH"])
@login_required
def update_asset(asset_id):
    payload = json_payload(AssetUpdate)
    asset = asset_service.update_asset(asset_id, payload, user_id=current_user_id())
    return asset_service.asset_to_dict(asset)


@bp.route("/<int:asset_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_asset(asset_id):
    asset_service.delete_asset(asset_id, user_id=current_user_id())
    return "", 204


@bp.route("/import", methods=["POST"])
@login_required
def import_assets():
    """
    Bulk-create assets from a CSV upload (multipart field ``file``).

    Rows that fail validation are skipped and listed by line number.
    """
    form = CsvImportForm()
    if not form.validate():
        raise ValidationError(form.error_messages())
    result = import_service.import_assets(form.file.data, user_id=current_user_id())
    return result.to_dict()
