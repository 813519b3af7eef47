"""
Routes for the packages blueprint.
"""

from flask_login import login_required

from facilitydesk.blueprints.helpers import (
    arg_enum,
    arg_str,
    current_user_id,
    get_pagination_args,
    json_payload,
    paginated,
)
from facilitydesk.blueprints.packages import bp
from facilitydesk.decorators import confirmation_required
from facilitydesk.models.enums import PackageStatus
from facilitydesk.schemas.package import PackageCreate, PackageUpdate
from facilitydesk.services import package_service

# Action name in the URL -> status it moves the package to.
_ACTIONS = {
    "notify": PackageStatus.NOTIFIED,
    "pickup": PackageStatus.PICKED_UP,
    "return": PackageStatus.RETURNED,
}


@bp.route("", methods=["GET"])
@login_required
def list_packages():
    """
    Paginated package log.

    Query params: ``search`` (tracking number, recipient, unit, sender),
    ``status``, ``page``, ``per_page``.
    """
    page, per_page = get_pagination_args()
    pagination = package_service.get_packages(
        page=page,
        per_page=per_page,
        search=arg_str("search"),
        status=arg_enum("status", PackageStatus),
    )
    return paginated(pagination)


@bp.route("", methods=["POST"])
@login_required
def create_package():
    payload = json_payload(PackageCreate)
    package = package_service.create_package(payload, user_id=current_user_id())
    return package.to_dict(), 201


@bp.route("/<int:package_id>", methods=["GET"])
@login_required
def get_package(package_id):
    return package_service.get_package(package_id).to_dict()


@bp.route("/<int:package_id>", methods=["PATCH"])
@login_required
def update_package(package_id):
    payload = json_payload(PackageUpdate)
    package = package_service.update_package(
        package_id, payload, user_id=current_user_id()
    )
    return package.to_dict()


@bp.route("/<int:package_id>", methods=["DELETE"])
@login_required
@confirmation_required
def delete_package(package_id):
    package_service.delete_package(package_id, user_id=current_user_id())
    return "", 204


@bp.route("/<int:package_id>/<any(notify, pickup, return):action>", methods=["POST"])
@login_required
def package_action(package_id, action):
    """Shortcut status moves: ``notify``, ``pickup`` and ``return``."""
    package = package_service.set_status(
        package_id, _ACTIONS[action], user_id=current_user_id()
    )
    return package.to_dict()
