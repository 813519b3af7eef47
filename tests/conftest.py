"""
Pytest configuration and shared fixtures.

Provides a test application, database session, and test client that
all test modules can use. Uses the ``testing`` configuration, which
points at an in-memory SQLite database with ``LOGIN_DISABLED`` set.
"""

from datetime import date

import pytest

from facilitydesk import create_app
from facilitydesk.extensions import db as _db


@pytest.fixture(scope="function")
def app(tmp_path):
    """
    Create a Flask application configured for testing.

    A fresh app is built for each test so that ``g`` (where Flask-Login
    caches the current user) never leaks between tests.  Uploads are
    redirected into the per-test temporary directory.
    """
    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    # Establish an application context for the whole test.
    with app.app_context():
        yield app


@pytest.fixture(scope="function")
def database(app):  # pylint: disable=redefined-outer-name
    """
    Provide the SQLAlchemy database instance with the schema created.

    The in-memory engine shares one connection (StaticPool), so the
    tables exist for every session and request in the test and are
    dropped afterwards.
    """
    _db.create_all()
    yield _db
    _db.session.remove()
    _db.drop_all()


@pytest.fixture(scope="function")
def db_session(database):  # pylint: disable=redefined-outer-name
    """Provide the scoped session bound to the test database."""
    yield database.session


@pytest.fixture(scope="function")
def client(app, database):  # pylint: disable=redefined-outer-name,unused-argument
    """
    Provide a Flask test client for making HTTP requests.

    Usage in tests::

        def test_health(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def today():
    """A fixed reference date so date arithmetic in tests is stable."""
    return date(2024, 3, 15)


@pytest.fixture
def asset(db_session):  # pylint: disable=unused-argument
    """A saved active lift to hang schedules and tasks on."""
    from facilitydesk.schemas.asset import AssetCreate
    from facilitydesk.services import asset_service

    return asset_service.create_asset(
        AssetCreate(name="Lift A1", location_building="Tower A")
    )


@pytest.fixture
def make_schedule(asset):  # pylint: disable=redefined-outer-name
    """
    Factory for saved schedules on the ``asset`` fixture.

    Usage::

        schedule = make_schedule(frequency_type="weekly",
                                 start_date=date(2024, 3, 8))
    """
    from facilitydesk.schemas.maintenance import ScheduleCreate
    from facilitydesk.services import schedule_service

    def _make(**overrides):
        values = {
            "asset_id": asset.id,
            "schedule_name": "Monthly inspection",
            "frequency_type": "monthly",
            "start_date": date(2024, 2, 15),
        }
        values.update(overrides)
        return schedule_service.create_schedule(ScheduleCreate(**values))

    return _make


@pytest.fixture
def staff_member(db_session):  # pylint: disable=unused-argument
    """A saved active staff member."""
    from facilitydesk.schemas.staff import StaffCreate
    from facilitydesk.services import staff_service

    return staff_service.create_staff(
        StaffCreate(employee_id="EMP001", name="Aisyah Rahman", email="aisyah@example.com")
    )
