"""
Staff blueprint — staff directory, daily attendance and leave requests.
"""

from flask import Blueprint

bp = Blueprint("staff", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.staff import routes  # noqa: E402, F401
