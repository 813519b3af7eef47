"""
Scheduler blueprint — work orders (jobs), complaints, contacts and the
drag-and-drop calendar.
"""

from flask import Blueprint

bp = Blueprint("scheduler", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.scheduler import routes  # noqa: E402, F401
