"""
Account blueprint — the calling user's profile, avatar upload and the
uploaded-file route.
"""

from flask import Blueprint

bp = Blueprint("account", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.account import routes  # noqa: E402, F401
