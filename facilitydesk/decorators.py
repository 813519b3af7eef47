"""
Route-level guard decorators.

Used in combination with Flask-Login's ``@login_required``:

    @bp.route('/assets/<int:asset_id>', methods=['DELETE'])
    @login_required
    @confirmation_required
    def delete_asset(asset_id):
        ...
"""

import logging
from functools import wraps

from flask import request

from facilitydesk.exceptions import ValidationError

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes")


def confirmation_required(func):
    """
    Refuse a destructive request unless it carries ``?confirm=true``.

    The check runs before the view, so nothing is looked up or deleted
    when the flag is missing.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        if request.args.get("confirm", "").lower() not in _TRUTHY:
            logger.warning(
                "Unconfirmed %s %s rejected", request.method, request.path
            )
            raise ValidationError("confirm: pass confirm=true to delete this record")
        return func(*args, **kwargs)

    return wrapper
