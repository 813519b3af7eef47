"""
Packages blueprint — the front-desk package log.
"""

from flask import Blueprint

bp = Blueprint("packages", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.packages import routes  # noqa: E402, F401
