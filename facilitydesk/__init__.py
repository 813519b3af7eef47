"""
Application factory for the FacilityDesk property-management API.

Usage::

    from facilitydesk import create_app
    app = create_app()           # Uses FLASK_ENV to pick config.
    app = create_app("testing")  # Explicit config for tests.
"""

import logging
import os

from flask import Flask, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .config import config_by_name
from .exceptions import (
    ImportFileError,
    InvalidTransitionError,
    RecordNotFoundError,
    ValidationError,
)
from .extensions import db, login_manager, migrate

logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: One of 'development', 'testing', or 'production'.
                     Defaults to the FLASK_ENV environment variable,
                     falling back to 'development'.

    Returns:
        A fully configured Flask application instance.
    """
    # Resolve the configuration class.
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")
    config_class = config_by_name.get(config_name)
    if config_class is None:
        raise ValueError(
            f"Unknown config '{config_name}'. "
            f"Valid options: {list(config_by_name.keys())}"
        )

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Refuse to run production with insecure or missing settings.
    if config_name == "production":
        config_class.validate_production_secrets(app.config)

    # -- Configure logging -------------------------------------------------
    _configure_logging(app)

    # -- Initialize extensions ---------------------------------------------
    _register_extensions(app)

    # -- Register blueprints -----------------------------------------------
    _register_blueprints(app)

    # -- Register error handlers -------------------------------------------
    _register_error_handlers(app)

    # -- Register custom CLI commands --------------------------------------
    _register_cli_commands(app)

    return app


def _register_extensions(app: Flask) -> None:
    """Bind all Flask extensions to the application instance."""
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Imported here to avoid circular imports with models.
    from .models.user import User  # pylint: disable=import-outside-toplevel
    from .services import user_service  # pylint: disable=import-outside-toplevel

    @login_manager.user_loader
    def load_user(user_id: str):
        """Load a user by primary key for Flask-Login."""
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(req):
        """Resolve ``Authorization: Bearer <token>`` to an active user."""
        header = req.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer":
            return None
        return user_service.get_user_by_token(token.strip())

    @login_manager.unauthorized_handler
    def unauthorized():
        logger.warning("Unauthenticated %s %s", request.method, request.path)
        return jsonify({"error": "Authentication required."}), 401


def _register_blueprints(app: Flask) -> None:
    """
    Import and register each blueprint with its URL prefix.

    Blueprints are imported inside this function to avoid circular
    imports; models and services can safely import ``db`` from
    extensions at module level.
    """
    # pylint: disable=import-outside-toplevel

    # Main blueprint: index and health check at the root URL.
    from .blueprints.main import bp as main_bp

    app.register_blueprint(main_bp)

    # Assets: asset register, metrics, CSV import.
    from .blueprints.assets import bp as assets_bp

    app.register_blueprint(assets_bp, url_prefix="/assets")

    # Maintenance: types, schedules, tasks, automation, dashboard.
    from .blueprints.maintenance import bp as maintenance_bp

    app.register_blueprint(maintenance_bp, url_prefix="/maintenance")

    # Scheduler: jobs, complaints, contacts, calendar.
    from .blueprints.scheduler import bp as scheduler_bp

    app.register_blueprint(scheduler_bp, url_prefix="/scheduler")

    # Staff: directory, attendance, leave.
    from .blueprints.staff import bp as staff_bp

    app.register_blueprint(staff_bp, url_prefix="/staff")

    # Packages: front-desk package log.
    from .blueprints.packages import bp as packages_bp

    app.register_blueprint(packages_bp, url_prefix="/packages")

    # Account: current user profile, avatar upload, uploaded files.
    from .blueprints.account import bp as account_bp

    app.register_blueprint(account_bp)

    # Notifications: the calling user's in-app messages.
    from .blueprints.notifications import bp as notifications_bp

    app.register_blueprint(notifications_bp, url_prefix="/notifications")

    # Reports: exports and the audit log.
    from .blueprints.reports import bp as reports_bp

    app.register_blueprint(reports_bp, url_prefix="/reports")


def _register_error_handlers(app: Flask) -> None:
    """Translate domain and database errors into JSON responses."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        logger.warning("Validation failed on %s: %s", request.path, error)
        return jsonify({"errors": error.errors}), 400

    @app.errorhandler(ImportFileError)
    def import_file_error(error):
        logger.warning("Rejected upload on %s: %s", request.path, error)
        return jsonify({"errors": [str(error)]}), 400

    @app.errorhandler(RecordNotFoundError)
    def record_not_found(error):
        return jsonify({"error": str(error)}), 404

    @app.errorhandler(InvalidTransitionError)
    def invalid_transition(error):
        logger.warning("Rejected transition on %s: %s", request.path, error)
        return (
            jsonify(
                {
                    "error": str(error),
                    "current": error.current,
                    "requested": error.requested,
                }
            ),
            409,
        )

    @app.errorhandler(IntegrityError)
    def integrity_error(error):
        db.session.rollback()
        message = str(error.orig)
        logger.warning("Constraint violation on %s: %s", request.path, message)
        return jsonify({"error": message}), 409

    @app.errorhandler(SQLAlchemyError)
    def database_error(error):
        db.session.rollback()
        logger.exception("Database error on %s", request.path)
        return jsonify({"error": str(error)}), 500

    @app.errorhandler(HTTPException)
    def http_error(error):
        """404, 405, 413 and friends as JSON instead of HTML pages."""
        return jsonify({"error": error.description}), error.code


def _register_cli_commands(app: Flask) -> None:
    """Register custom Flask CLI commands (e.g., flask db-check)."""
    from .cli import register_commands  # pylint: disable=import-outside-toplevel

    register_commands(app)


def _configure_logging(app: Flask) -> None:
    """
    Set up application logging from ``LOG_LEVEL``.

    SQL statement echo is left to ``SQLALCHEMY_ECHO``; the engine logger
    is quieted in debug so request logs stay readable.
    """
    log_level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Quiet down noisy libraries in development.
    if app.debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
