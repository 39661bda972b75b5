from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from utiltrack.models.tariff import CustomFieldConfig, FieldType, StandardReadings, TariffConfiguration
from utiltrack.repositories.base import PersistenceError
from utiltrack.repositories.sqlalchemy import SQLAlchemyTariffRepository


class TestTariffRepo:
    def test_get_missing(self, tariff_repo, home):
        assert tariff_repo.get(home.id) is None

    def test_put_and_get(self, tariff_repo, home, sample_config):
        saved = tariff_repo.put(sample_config(home.id))

        assert saved.property_id == home.id
        assert saved.electricity_rate == pytest.approx(4.32)
        assert saved.gas_fixed_fee == pytest.approx(289.04)
        assert saved.last_readings == StandardReadings(electricity=18329, water=1224, gas=12994)
        assert saved.updated_at is not None
        assert tariff_repo.get(home.id) == saved

    def test_put_updates_existing(self, tariff_repo, home, sample_config):
        tariff_repo.put(sample_config(home.id))
        tariff_repo.put(sample_config(home.id, electricity_rate=5.0))

        assert tariff_repo.get(home.id).electricity_rate == 5.0

    def test_custom_fields_round_trip_in_order(self, tariff_repo, home, sample_config, sample_fields):
        config = sample_config(home.id, custom_fields=sample_fields(), custom_last_readings={"f-heat": 321.5})

        saved = tariff_repo.put(config)

        assert [f.id for f in saved.custom_fields] == ["f-heat", "f-internet", "f-parking"]
        assert saved.custom_fields[0].unit == "Gcal"
        assert saved.custom_fields[2].price == 200
        assert saved.custom_last_readings == {"f-heat": 321.5}

    def test_removed_field_is_gone(self, tariff_repo, home, sample_config, sample_fields):
        tariff_repo.put(sample_config(home.id, custom_fields=sample_fields()))
        tariff_repo.put(sample_config(home.id, custom_fields=sample_fields()[1:]))

        saved = tariff_repo.get(home.id)
        assert [f.id for f in saved.custom_fields] == ["f-internet", "f-parking"]
        assert saved.custom_last_readings == {}

    def test_fee_fields_store_no_reading(self, tariff_repo, db_connection, home):
        from sqlalchemy import text

        config = TariffConfiguration(
            property_id=home.id,
            custom_fields=[CustomFieldConfig(id="net", name="Internet", type=FieldType.FEE, price=350)],
        )
        tariff_repo.put(config)

        row = db_connection.execute(text("SELECT last_reading FROM tariff_custom_fields")).fetchone()
        assert row[0] is None

    def test_put_for_unknown_property_raises(self, tariff_repo):
        with pytest.raises(PersistenceError, match="Failed to save tariff configuration"):
            tariff_repo.put(TariffConfiguration.default(999))

    def test_get_translates_driver_errors(self):
        conn = MagicMock()
        conn.execute.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
        repo = SQLAlchemyTariffRepository(conn)

        with pytest.raises(PersistenceError, match="Failed to load tariff configuration") as exc_info:
            repo.get(1)

        assert isinstance(exc_info.value.__cause__, OperationalError)
        conn.rollback.assert_called_once()
