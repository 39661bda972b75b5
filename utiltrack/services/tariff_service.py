from __future__ import annotations

import logging

from ulid import ULID

from utiltrack.models.tariff import CustomFieldConfig, FieldType, StandardReadings, TariffConfiguration
from utiltrack.repositories.base import TariffRepository

logger = logging.getLogger(__name__)

RATE_FIELDS = ("electricity_rate", "water_rate", "gas_rate", "water_fixed_fee", "gas_fixed_fee")


class TariffService:
    def __init__(self, repo: TariffRepository) -> None:
        self.repo = repo

    def get_configuration(self, property_id: int) -> TariffConfiguration:
        result = self.repo.get(property_id)
        logger.debug("get_configuration property=%s found=%s", property_id, result is not None)
        if result is None:
            return TariffConfiguration.default(property_id)
        return result

    def save_configuration(self, config: TariffConfiguration) -> TariffConfiguration:
        result = self.repo.put(config)
        logger.info("Tariff configuration saved for property=%s", config.property_id)
        return result

    def _with_rates(self, config: TariffConfiguration, rates: dict[str, float]) -> TariffConfiguration:
        unknown = set(rates) - set(RATE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown tariff settings: {', '.join(sorted(unknown))}")
        data = config.model_dump()
        data.update(rates)
        return TariffConfiguration.model_validate(data)

    def _with_readings(
        self,
        config: TariffConfiguration,
        readings: StandardReadings | None,
        custom_readings: dict[str, float] | None,
    ) -> TariffConfiguration:
        for field_id in custom_readings or {}:
            field = config.get_field(field_id)
            if field is None or not field.is_metered:
                raise ValueError(f"No metered custom field with id '{field_id}'")
        if readings is not None:
            config.last_readings = readings
        config.custom_last_readings.update(custom_readings or {})
        return config

    def update_rates(self, property_id: int, **rates: float) -> TariffConfiguration:
        updated = self._with_rates(self.get_configuration(property_id), rates)
        logger.info("Updating rates for property=%s: %s", property_id, rates)
        return self.save_configuration(updated)

    def set_last_readings(
        self,
        property_id: int,
        readings: StandardReadings | None = None,
        custom_readings: dict[str, float] | None = None,
    ) -> TariffConfiguration:
        """Correct stored baselines by hand, e.g. after a meter replacement."""
        config = self._with_readings(self.get_configuration(property_id), readings, custom_readings)
        logger.info("Last readings corrected for property=%s", property_id)
        return self.save_configuration(config)

    def update_settings(
        self,
        property_id: int,
        rates: dict[str, float],
        readings: StandardReadings | None = None,
        custom_readings: dict[str, float] | None = None,
    ) -> TariffConfiguration:
        """Apply rates and reading corrections together with a single save.

        Everything is validated before the write, so a rejected request
        leaves the stored configuration untouched.
        """
        config = self._with_rates(self.get_configuration(property_id), rates)
        config = self._with_readings(config, readings, custom_readings)
        logger.info("Updating settings for property=%s: %s", property_id, rates)
        return self.save_configuration(config)

    def add_custom_field(
        self,
        property_id: int,
        name: str,
        field_type: FieldType,
        price: float = 0,
        unit: str = "",
        start_reading: float = 0,
    ) -> CustomFieldConfig:
        if not name.strip():
            raise ValueError("Custom field name is required")
        field = CustomFieldConfig(
            id=str(ULID()),
            name=name.strip(),
            type=field_type,
            unit=unit.strip() if field_type == FieldType.RATE else "",
            price=price,
        )
        config = self.get_configuration(property_id)
        config.custom_fields.append(field)
        if field.is_metered:
            config.custom_last_readings[field.id] = start_reading
        self.save_configuration(config)
        logger.info("Custom field added: property=%s id=%s name=%s type=%s", property_id, field.id, field.name, field.type.value)
        return field

    def delete_custom_field(self, property_id: int, field_id: str) -> TariffConfiguration:
        config = self.get_configuration(property_id)
        if config.get_field(field_id) is None:
            logger.warning("Delete failed: custom field %s not found for property=%s", field_id, property_id)
            raise ValueError("Custom field not found")
        config.custom_fields = [field for field in config.custom_fields if field.id != field_id]
        config.custom_last_readings.pop(field_id, None)
        result = self.save_configuration(config)
        logger.info("Custom field %s deleted from property=%s", field_id, property_id)
        return result

    def update_custom_field_price(self, property_id: int, field_id: str, price: float) -> CustomFieldConfig:
        if price < 0:
            raise ValueError("Price cannot be negative")
        config = self.get_configuration(property_id)
        field = config.get_field(field_id)
        if field is None:
            logger.warning("Price update failed: custom field %s not found for property=%s", field_id, property_id)
            raise ValueError("Custom field not found")
        field.price = price
        self.save_configuration(config)
        logger.info("Custom field %s price set to %s for property=%s", field_id, price, property_id)
        return field
