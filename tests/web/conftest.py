"""Web test fixtures: TestClient with shared in-memory SQLite."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.pool import StaticPool

from tests.conftest import SCHEMA_DDL

TEST_EMAIL = "tester@example.com"
TEST_PASSWORD = "testpass"


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()

    return engine


def create_property(client, name: str = "Home") -> dict:
    response = client.post("/api/properties", json={"name": name, "description": ""})
    assert response.status_code == 201
    return response.json()


def set_scenario_tariffs(client, property_uuid: str) -> None:
    response = client.put(
        f"/api/properties/{property_uuid}/tariffs",
        json={
            "electricity_rate": 4.32,
            "water_rate": 20.47,
            "gas_rate": 7.95,
            "water_fixed_fee": 5.38,
            "gas_fixed_fee": 289.04,
            "last_readings": {"electricity": 18329, "water": 1224, "gas": 12994},
        },
    )
    assert response.status_code == 200


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch):
    """Set up in-memory DB and patch the web app to use it."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    import web.auth as auth_module

    auth_module._login_attempts.clear()

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)


@pytest.fixture()
def auth_client(client):
    """Client that is already registered and signed in."""
    response = client.post("/api/auth/register", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert response.status_code == 201
    return client


@pytest.fixture()
def other_client():
    """A second signed-in user with their own cookie jar."""
    from starlette.testclient import TestClient

    from web.app import app

    other = TestClient(app)
    other.post("/api/auth/register", json={"email": "other@example.com", "password": "otherpass"})
    return other
