"""
Notifications blueprint — the calling user's in-app messages.
"""

from flask import Blueprint

bp = Blueprint("notifications", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.notifications import routes  # noqa: E402, F401
