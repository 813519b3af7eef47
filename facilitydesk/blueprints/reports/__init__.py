"""
Reports blueprint — CSV/Excel exports and the audit log.
"""

from flask import Blueprint

bp = Blueprint("reports", __name__)

from facilitydesk.blueprints.reports import routes  # noqa: E402, F401
