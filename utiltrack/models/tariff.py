from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class FieldType(str, Enum):
    RATE = "rate"
    FEE = "fee"


class CustomFieldConfig(BaseModel):
    id: str
    name: str
    type: FieldType
    unit: str = ""
    price: float = Field(default=0, ge=0)  # per unit for RATE, flat amount for FEE

    @model_validator(mode="after")
    def _unit_required_for_rate(self) -> CustomFieldConfig:
        if self.type == FieldType.RATE and not self.unit:
            raise ValueError("unit is required for metered (rate) fields")
        return self

    @property
    def is_metered(self) -> bool:
        return self.type == FieldType.RATE

    @property
    def is_variable_fee(self) -> bool:
        """A zero-priced fee is entered by hand at billing time."""
        return self.type == FieldType.FEE and self.price == 0


class StandardReadings(BaseModel):
    electricity: float = 0
    water: float = 0
    gas: float = 0


class TariffConfiguration(BaseModel):
    property_id: int
    electricity_rate: float = Field(default=0, ge=0)
    water_rate: float = Field(default=0, ge=0)
    gas_rate: float = Field(default=0, ge=0)
    water_fixed_fee: float = Field(default=0, ge=0)
    gas_fixed_fee: float = Field(default=0, ge=0)
    custom_fields: list[CustomFieldConfig] = []
    last_readings: StandardReadings = StandardReadings()
    custom_last_readings: dict[str, float] = {}
    updated_at: datetime | None = None

    @model_validator(mode="after")
    def _metered_fields_have_readings(self) -> TariffConfiguration:
        for field in self.custom_fields:
            if field.is_metered:
                self.custom_last_readings.setdefault(field.id, 0)
        known = {field.id for field in self.custom_fields if field.is_metered}
        for key in list(self.custom_last_readings):
            if key not in known:
                del self.custom_last_readings[key]
        return self

    @classmethod
    def default(cls, property_id: int) -> TariffConfiguration:
        """Blank slate: zero rates and fees, no custom fields, zero readings."""
        return cls(property_id=property_id)

    @property
    def has_missing_rates(self) -> bool:
        return self.electricity_rate == 0 and self.water_rate == 0 and self.gas_rate == 0

    def get_field(self, field_id: str) -> CustomFieldConfig | None:
        for field in self.custom_fields:
            if field.id == field_id:
                return field
        return None
