from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from ulid import ULID

from utiltrack.models.bill import BillRecord, CostBreakdown, CustomBillRecord
from utiltrack.models.property import Property
from utiltrack.models.tariff import CustomFieldConfig, FieldType, StandardReadings, TariffConfiguration
from utiltrack.models.user import User
from utiltrack.repositories.base import (
    BillRepository,
    PersistenceError,
    PropertyRepository,
    TariffRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _persistence(conn: Connection, action: str) -> Iterator[None]:
    """Roll back and re-raise database failures as PersistenceError."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error while trying to %s: %s", action, exc)
        conn.rollback()
        raise PersistenceError(f"Failed to {action}") from exc


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, user: User) -> User:
        with _persistence(self.conn, "create user"):
            result = self.conn.execute(
                text("INSERT INTO users (email, password_hash, created_at) VALUES (:email, :password_hash, :created_at)"),
                {"email": user.email, "password_hash": user.password_hash, "created_at": _now()},
            )
            self.conn.commit()
        user_id = result.lastrowid
        created = self.get_by_id(user_id)
        if created is None:
            raise PersistenceError(f"Failed to retrieve user after create (id={user_id})")
        return created

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
        )

    def get_by_id(self, user_id: int) -> User | None:
        with _persistence(self.conn, "load user"):
            row = self.conn.execute(text("SELECT * FROM users WHERE id = :id"), {"id": user_id}).mappings().fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def get_by_email(self, email: str) -> User | None:
        with _persistence(self.conn, "load user"):
            row = (
                self.conn.execute(text("SELECT * FROM users WHERE email = :email"), {"email": email})
                .mappings()
                .fetchone()
            )
        if row is None:
            return None
        return self._row_to_user(row)


class SQLAlchemyPropertyRepository(PropertyRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, prop: Property) -> Property:
        now = _now()
        with _persistence(self.conn, "create property"):
            result = self.conn.execute(
                text(
                    "INSERT INTO properties (uuid, owner_id, name, description, created_at, updated_at) "
                    "VALUES (:uuid, :owner_id, :name, :description, :created_at, :updated_at)"
                ),
                {
                    "uuid": str(ULID()),
                    "owner_id": prop.owner_id,
                    "name": prop.name,
                    "description": prop.description,
                    "created_at": now,
                    "updated_at": now,
                },
            )
            self.conn.commit()
        property_id = result.lastrowid
        created = self.get_by_id(property_id)
        if created is None:
            raise PersistenceError(f"Failed to retrieve property after create (id={property_id})")
        return created

    @staticmethod
    def _row_to_property(row: RowMapping) -> Property:
        return Property(
            id=row["id"],
            uuid=row["uuid"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, property_id: int) -> Property | None:
        with _persistence(self.conn, "load property"):
            row = (
                self.conn.execute(text("SELECT * FROM properties WHERE id = :id"), {"id": property_id})
                .mappings()
                .fetchone()
            )
        if row is None:
            return None
        return self._row_to_property(row)

    def get_by_uuid(self, uuid: str) -> Property | None:
        with _persistence(self.conn, "load property"):
            row = (
                self.conn.execute(text("SELECT * FROM properties WHERE uuid = :uuid"), {"uuid": uuid})
                .mappings()
                .fetchone()
            )
        if row is None:
            return None
        return self._row_to_property(row)

    def list_by_owner(self, owner_id: int) -> list[Property]:
        with _persistence(self.conn, "list properties"):
            rows = (
                self.conn.execute(
                    text("SELECT * FROM properties WHERE owner_id = :owner_id ORDER BY created_at DESC, id DESC"),
                    {"owner_id": owner_id},
                )
                .mappings()
                .fetchall()
            )
        return [self._row_to_property(row) for row in rows]

    def update_name(self, property_id: int, name: str) -> None:
        with _persistence(self.conn, "rename property"):
            self.conn.execute(
                text("UPDATE properties SET name = :name, updated_at = :updated_at WHERE id = :id"),
                {"name": name, "updated_at": _now(), "id": property_id},
            )
            self.conn.commit()


class SQLAlchemyTariffRepository(TariffRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _build_config(row: RowMapping, field_rows: list[RowMapping]) -> TariffConfiguration:
        fields = [
            CustomFieldConfig(
                id=field_row["field_id"],
                name=field_row["name"],
                type=FieldType(field_row["field_type"]),
                unit=field_row["unit"],
                price=field_row["price"],
            )
            for field_row in field_rows
        ]
        return TariffConfiguration(
            property_id=row["property_id"],
            electricity_rate=row["electricity_rate"],
            water_rate=row["water_rate"],
            gas_rate=row["gas_rate"],
            water_fixed_fee=row["water_fixed_fee"],
            gas_fixed_fee=row["gas_fixed_fee"],
            custom_fields=fields,
            last_readings=StandardReadings(
                electricity=row["last_electricity"],
                water=row["last_water"],
                gas=row["last_gas"],
            ),
            custom_last_readings={
                field_row["field_id"]: field_row["last_reading"]
                for field_row in field_rows
                if field_row["field_type"] == FieldType.RATE.value and field_row["last_reading"] is not None
            },
            updated_at=row["updated_at"],
        )

    def get(self, property_id: int) -> TariffConfiguration | None:
        with _persistence(self.conn, "load tariff configuration"):
            row = (
                self.conn.execute(
                    text("SELECT * FROM tariff_configurations WHERE property_id = :property_id"),
                    {"property_id": property_id},
                )
                .mappings()
                .fetchone()
            )
            if row is None:
                return None
            field_rows = (
                self.conn.execute(
                    text("SELECT * FROM tariff_custom_fields WHERE property_id = :property_id ORDER BY sort_order"),
                    {"property_id": property_id},
                )
                .mappings()
                .fetchall()
            )
        return self._build_config(row, list(field_rows))

    def put(self, config: TariffConfiguration) -> TariffConfiguration:
        params = {
            "property_id": config.property_id,
            "electricity_rate": config.electricity_rate,
            "water_rate": config.water_rate,
            "gas_rate": config.gas_rate,
            "water_fixed_fee": config.water_fixed_fee,
            "gas_fixed_fee": config.gas_fixed_fee,
            "last_electricity": config.last_readings.electricity,
            "last_water": config.last_readings.water,
            "last_gas": config.last_readings.gas,
            "updated_at": _now(),
        }
        with _persistence(self.conn, "save tariff configuration"):
            exists = self.conn.execute(
                text("SELECT 1 FROM tariff_configurations WHERE property_id = :property_id"),
                {"property_id": config.property_id},
            ).fetchone()
            if exists is None:
                self.conn.execute(
                    text(
                        "INSERT INTO tariff_configurations (property_id, electricity_rate, water_rate, gas_rate, "
                        "water_fixed_fee, gas_fixed_fee, last_electricity, last_water, last_gas, updated_at) "
                        "VALUES (:property_id, :electricity_rate, :water_rate, :gas_rate, "
                        ":water_fixed_fee, :gas_fixed_fee, :last_electricity, :last_water, :last_gas, :updated_at)"
                    ),
                    params,
                )
            else:
                self.conn.execute(
                    text(
                        "UPDATE tariff_configurations SET electricity_rate = :electricity_rate, "
                        "water_rate = :water_rate, gas_rate = :gas_rate, water_fixed_fee = :water_fixed_fee, "
                        "gas_fixed_fee = :gas_fixed_fee, last_electricity = :last_electricity, "
                        "last_water = :last_water, last_gas = :last_gas, updated_at = :updated_at "
                        "WHERE property_id = :property_id"
                    ),
                    params,
                )
            self.conn.execute(
                text("DELETE FROM tariff_custom_fields WHERE property_id = :property_id"),
                {"property_id": config.property_id},
            )
            for i, field in enumerate(config.custom_fields):
                self.conn.execute(
                    text(
                        "INSERT INTO tariff_custom_fields (property_id, field_id, name, field_type, unit, "
                        "price, last_reading, sort_order) VALUES (:property_id, :field_id, :name, :field_type, "
                        ":unit, :price, :last_reading, :sort_order)"
                    ),
                    {
                        "property_id": config.property_id,
                        "field_id": field.id,
                        "name": field.name,
                        "field_type": field.type.value,
                        "unit": field.unit,
                        "price": field.price,
                        "last_reading": config.custom_last_readings.get(field.id, 0) if field.is_metered else None,
                        "sort_order": i,
                    },
                )
            self.conn.commit()
        result = self.get(config.property_id)
        if result is None:
            raise PersistenceError(f"Failed to retrieve tariff configuration after save (property={config.property_id})")
        return result


class SQLAlchemyBillRepository(BillRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, bill: BillRecord) -> BillRecord:
        breakdown = bill.breakdown
        with _persistence(self.conn, "save bill"):
            result = self.conn.execute(
                text(
                    "INSERT INTO bills (uuid, property_id, name, electricity_consumption, water_consumption, "
                    "gas_consumption, electricity_cost, water_cost, water_fixed_fee, gas_cost, gas_fixed_fee, "
                    "total_cost, created_at) VALUES (:uuid, :property_id, :name, :electricity_consumption, "
                    ":water_consumption, :gas_consumption, :electricity_cost, :water_cost, :water_fixed_fee, "
                    ":gas_cost, :gas_fixed_fee, :total_cost, :created_at)"
                ),
                {
                    "uuid": str(ULID()),
                    "property_id": bill.property_id,
                    "name": bill.name,
                    "electricity_consumption": bill.electricity_consumption,
                    "water_consumption": bill.water_consumption,
                    "gas_consumption": bill.gas_consumption,
                    "electricity_cost": breakdown.electricity_cost,
                    "water_cost": breakdown.water_cost,
                    "water_fixed_fee": breakdown.water_fixed_fee,
                    "gas_cost": breakdown.gas_cost,
                    "gas_fixed_fee": breakdown.gas_fixed_fee,
                    "total_cost": bill.total_cost,
                    "created_at": bill.created_at or _now(),
                },
            )
            bill_id = result.lastrowid
            for i, record in enumerate(bill.custom_records):
                self.conn.execute(
                    text(
                        "INSERT INTO bill_custom_records (bill_id, field_id, name, field_type, unit, "
                        "consumption, cost, sort_order) VALUES (:bill_id, :field_id, :name, :field_type, "
                        ":unit, :consumption, :cost, :sort_order)"
                    ),
                    {
                        "bill_id": bill_id,
                        "field_id": record.field_id,
                        "name": record.name,
                        "field_type": record.type.value,
                        "unit": record.unit,
                        "consumption": record.consumption,
                        "cost": record.cost,
                        "sort_order": i,
                    },
                )
            self.conn.commit()
        created = self.get_by_id(bill_id)
        if created is None:
            raise PersistenceError(f"Failed to retrieve bill after create (id={bill_id})")
        return created

    @staticmethod
    def _build_bill(row: RowMapping, record_rows: list[RowMapping]) -> BillRecord:
        return BillRecord(
            id=row["id"],
            uuid=row["uuid"],
            property_id=row["property_id"],
            name=row["name"],
            electricity_consumption=row["electricity_consumption"],
            water_consumption=row["water_consumption"],
            gas_consumption=row["gas_consumption"],
            breakdown=CostBreakdown(
                electricity_cost=row["electricity_cost"],
                water_cost=row["water_cost"],
                water_fixed_fee=row["water_fixed_fee"],
                gas_cost=row["gas_cost"],
                gas_fixed_fee=row["gas_fixed_fee"],
            ),
            custom_records=[
                CustomBillRecord(
                    field_id=record_row["field_id"],
                    name=record_row["name"],
                    type=FieldType(record_row["field_type"]),
                    unit=record_row["unit"],
                    consumption=record_row["consumption"],
                    cost=record_row["cost"],
                )
                for record_row in record_rows
            ],
            total_cost=row["total_cost"],
            created_at=row["created_at"],
        )

    def _row_to_bill(self, row: RowMapping) -> BillRecord:
        records = (
            self.conn.execute(
                text("SELECT * FROM bill_custom_records WHERE bill_id = :bill_id ORDER BY sort_order"),
                {"bill_id": row["id"]},
            )
            .mappings()
            .fetchall()
        )
        return self._build_bill(row, list(records))

    def get_by_id(self, bill_id: int) -> BillRecord | None:
        with _persistence(self.conn, "load bill"):
            row = self.conn.execute(text("SELECT * FROM bills WHERE id = :id"), {"id": bill_id}).mappings().fetchone()
            if row is None:
                return None
            return self._row_to_bill(row)

    def get_by_uuid(self, uuid: str) -> BillRecord | None:
        with _persistence(self.conn, "load bill"):
            row = (
                self.conn.execute(text("SELECT * FROM bills WHERE uuid = :uuid"), {"uuid": uuid})
                .mappings()
                .fetchone()
            )
            if row is None:
                return None
            return self._row_to_bill(row)

    def list_by_property(self, property_id: int) -> list[BillRecord]:
        with _persistence(self.conn, "list bills"):
            rows = (
                self.conn.execute(
                    text("SELECT * FROM bills WHERE property_id = :property_id ORDER BY created_at DESC, id DESC"),
                    {"property_id": property_id},
                )
                .mappings()
                .fetchall()
            )
            if not rows:
                return []
            bill_ids = [row["id"] for row in rows]
            placeholders = ", ".join(f":id{i}" for i in range(len(bill_ids)))
            params = {f"id{i}": bid for i, bid in enumerate(bill_ids)}
            all_records = (
                self.conn.execute(
                    text(f"SELECT * FROM bill_custom_records WHERE bill_id IN ({placeholders}) ORDER BY sort_order"),
                    params,
                )
                .mappings()
                .fetchall()
            )
        records_by_bill: dict[int, list[RowMapping]] = {}
        for record_row in all_records:
            records_by_bill.setdefault(record_row["bill_id"], []).append(record_row)
        return [self._build_bill(row, records_by_bill.get(row["id"], [])) for row in rows]

    def update_name(self, bill_id: int, name: str) -> None:
        with _persistence(self.conn, "rename bill"):
            self.conn.execute(
                text("UPDATE bills SET name = :name WHERE id = :id"),
                {"name": name, "id": bill_id},
            )
            self.conn.commit()
