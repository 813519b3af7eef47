"""
Maintenance blueprint — preventive maintenance types, schedules, tasks,
automation runs, settings and the dashboard.
"""

from flask import Blueprint

bp = Blueprint("maintenance", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.maintenance import routes  # noqa: E402, F401
