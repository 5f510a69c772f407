"""
Pytest configuration and shared fixtures.

Provides a test application backed by a private in-memory SQLite
database, a database session, test clients (anonymous and signed in),
and small factories for seeding employees and assets.

Each test gets a fresh application, and therefore a fresh database.
The ``app`` fixture does not leave an application context pushed, so
every request made through a test client starts with a clean ``g``.
"""

from datetime import date

import pytest

from assetdesk import create_app
from assetdesk.extensions import db as _db
from assetdesk.services import asset_service, auth_service, employee_service

ADMIN_EMAIL = "admin@company.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture()
def app():
    """Create a Flask application configured for testing."""
    app = create_app("testing")

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def database(app):  # pylint: disable=redefined-outer-name
    """Provide the SQLAlchemy database instance."""
    yield _db


@pytest.fixture()
def db_session(app, database):  # pylint: disable=redefined-outer-name
    """
    Provide the database session inside a pushed application context.

    Service-level tests use this; route tests should use ``client``.
    """
    with app.app_context():
        yield database.session


@pytest.fixture()
def client(app):  # pylint: disable=redefined-outer-name
    """
    Provide a Flask test client for making HTTP requests.

    Usage in tests::

        def test_health(client):
            response = client.get("/health")
            assert response.status_code == 200
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def auth_client(app, client):  # pylint: disable=redefined-outer-name
    """A test client already signed in as the seeded administrator."""
    with app.app_context():
        auth_service.seed_admin(ADMIN_EMAIL, ADMIN_PASSWORD)

    response = client.post(
        "/auth/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 302
    return client


@pytest.fixture()
def make_employee(app):  # pylint: disable=redefined-outer-name
    """Factory that creates an employee and returns its id."""

    def _make(name="Ada Lovelace", **overrides):
        fields = {
            "name": name,
            "email": f"{name.split()[0].lower()}@example.com",
            "department": "Engineering",
            "role": "Developer",
            "status": "Active",
        }
        fields.update(overrides)
        with app.app_context():
            return employee_service.create_employee(**fields).id

    return _make


@pytest.fixture()
def make_asset(app):  # pylint: disable=redefined-outer-name
    """Factory that creates an asset and returns its id."""

    def _make(asset_name="MacBook Pro", **overrides):
        fields = {
            "asset_name": asset_name,
            "asset_type": "Laptop",
            "serial_number": f"SN-{asset_name.replace(' ', '').upper()}",
            "purchase_date": date(2024, 1, 15),
            "status": "Available",
        }
        fields.update(overrides)
        with app.app_context():
            return asset_service.create_asset(**fields).id

    return _make
