"""
Routes for the account blueprint.

Profile routes need a real user even when ``LOGIN_DISABLED`` is set,
because the avatar is stored on the calling user's record.
"""

from flask import current_app, send_from_directory
from flask_login import current_user, login_required

from facilitydesk.blueprints.account import bp
from facilitydesk.exceptions import ValidationError
from facilitydesk.forms import AvatarForm
from facilitydesk.services import storage_service, user_service


def _require_user():
    if not current_user.is_authenticated:
        return {"error": "Authentication required."}, 401
    return None


@bp.route("/account", methods=["GET"])
@login_required
def me():
    denied = _require_user()
    if denied:
        return denied
    return current_user.to_dict()


@bp.route("/account/avatar", methods=["POST"])
@login_required
def upload_avatar():
    """
    Upload a profile image (multipart field ``file``).

    Accepts jpg, jpeg, png, gif or webp up to ``AVATAR_MAX_BYTES``.
    Returns the public URL now stored on the user.
    """
    denied = _require_user()
    if denied:
        return denied

    form = AvatarForm()
    if not form.validate():
        raise ValidationError(form.error_messages())

    url = storage_service.save_avatar(form.file.data)
    user_service.set_avatar(current_user._get_current_object(), url)
    return {"avatar_url": url}, 201


@bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename):
    """Serve a stored upload; unknown names answer 404."""
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
