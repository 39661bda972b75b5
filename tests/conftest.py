"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from utiltrack.models.tariff import CustomFieldConfig, FieldType, StandardReadings, TariffConfiguration

# Matches Alembic head: 3f9a1c7d2b10 (initial schema)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email VARCHAR(255) NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at DATETIME NOT NULL
);

CREATE TABLE properties (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    owner_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE tariff_configurations (
    property_id INTEGER PRIMARY KEY REFERENCES properties(id) ON DELETE CASCADE,
    electricity_rate FLOAT NOT NULL DEFAULT 0,
    water_rate FLOAT NOT NULL DEFAULT 0,
    gas_rate FLOAT NOT NULL DEFAULT 0,
    water_fixed_fee FLOAT NOT NULL DEFAULT 0,
    gas_fixed_fee FLOAT NOT NULL DEFAULT 0,
    last_electricity FLOAT NOT NULL DEFAULT 0,
    last_water FLOAT NOT NULL DEFAULT 0,
    last_gas FLOAT NOT NULL DEFAULT 0,
    updated_at DATETIME NOT NULL
);

CREATE TABLE tariff_custom_fields (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    property_id INTEGER NOT NULL REFERENCES tariff_configurations(property_id) ON DELETE CASCADE,
    field_id VARCHAR(26) NOT NULL,
    name TEXT NOT NULL,
    field_type VARCHAR(10) NOT NULL,
    unit TEXT NOT NULL DEFAULT '',
    price FLOAT NOT NULL DEFAULT 0,
    last_reading FLOAT,
    sort_order INTEGER NOT NULL DEFAULT 0,
    UNIQUE (property_id, field_id)
);

CREATE TABLE bills (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    name TEXT NOT NULL DEFAULT '',
    electricity_consumption FLOAT NOT NULL DEFAULT 0,
    water_consumption FLOAT NOT NULL DEFAULT 0,
    gas_consumption FLOAT NOT NULL DEFAULT 0,
    electricity_cost FLOAT NOT NULL DEFAULT 0,
    water_cost FLOAT NOT NULL DEFAULT 0,
    water_fixed_fee FLOAT NOT NULL DEFAULT 0,
    gas_cost FLOAT NOT NULL DEFAULT 0,
    gas_fixed_fee FLOAT NOT NULL DEFAULT 0,
    total_cost FLOAT NOT NULL DEFAULT 0,
    created_at DATETIME NOT NULL
);

CREATE INDEX ix_bills_property_created ON bills (property_id, created_at);

CREATE TABLE bill_custom_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    bill_id INTEGER NOT NULL REFERENCES bills(id) ON DELETE CASCADE,
    field_id VARCHAR(26) NOT NULL,
    name TEXT NOT NULL,
    field_type VARCHAR(10) NOT NULL,
    unit TEXT,
    consumption FLOAT,
    cost FLOAT NOT NULL DEFAULT 0,
    sort_order INTEGER NOT NULL DEFAULT 0
);
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_config(property_id: int = 1, **overrides) -> TariffConfiguration:
    """The tariff used throughout the calculation scenarios."""
    defaults = dict(
        property_id=property_id,
        electricity_rate=4.32,
        water_rate=20.47,
        gas_rate=7.95,
        water_fixed_fee=5.38,
        gas_fixed_fee=289.04,
        last_readings=StandardReadings(electricity=18329, water=1224, gas=12994),
    )
    defaults.update(overrides)
    return TariffConfiguration(**defaults)


def _sample_fields() -> list[CustomFieldConfig]:
    return [
        CustomFieldConfig(id="f-heat", name="Heating", type=FieldType.RATE, unit="Gcal", price=1500.0),
        CustomFieldConfig(id="f-internet", name="Internet", type=FieldType.FEE, price=0),
        CustomFieldConfig(id="f-parking", name="Parking", type=FieldType.FEE, price=200),
    ]


@pytest.fixture()
def sample_config():
    return _sample_config


@pytest.fixture()
def sample_fields():
    return _sample_fields
