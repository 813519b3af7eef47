"""
Routes for the main blueprint: API index and health check.
"""

from flask import url_for
from flask_login import login_required
from sqlalchemy import text

from facilitydesk.blueprints.main import bp
from facilitydesk.extensions import db


@bp.route("/")
@login_required
def index():
    """List the top-level collections exposed by the API."""
    return {
        "name": "FacilityDesk",
        "collections": {
            "assets": url_for("assets.list_assets"),
            "schedules": url_for("maintenance.list_schedules"),
            "tasks": url_for("maintenance.list_tasks"),
            "jobs": url_for("scheduler.list_jobs"),
            "complaints": url_for("scheduler.list_complaints"),
            "contacts": url_for("scheduler.list_contacts"),
            "staff": url_for("staff.list_staff"),
            "attendance": url_for("staff.list_attendance"),
            "leave": url_for("staff.list_leave"),
            "packages": url_for("packages.list_packages"),
            "notifications": url_for("notifications.list_notifications"),
        },
    }


@bp.route("/health")
def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns 200 if the app is running and can reach the database.
    """
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}, 200
    except Exception as exc:  # pylint: disable=broad-except
        return {"status": "unhealthy", "database": str(exc)}, 503
