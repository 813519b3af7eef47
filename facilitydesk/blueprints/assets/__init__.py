"""
Assets blueprint — the asset register, metric cards and CSV import.
"""

from flask import Blueprint

bp = Blueprint("assets", __name__)

# Import routes after blueprint creation to avoid circular imports.
from facilitydesk.blueprints.assets import routes  # noqa: E402, F401
