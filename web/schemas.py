from __future__ import annotations

from pydantic import BaseModel, Field

from utiltrack.models.reading import MeterEntry
from utiltrack.models.tariff import FieldType, StandardReadings


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


class PropertyIn(BaseModel):
    name: str
    description: str = ""


class NameIn(BaseModel):
    name: str


class TariffUpdate(BaseModel):
    electricity_rate: float | None = Field(default=None, ge=0)
    water_rate: float | None = Field(default=None, ge=0)
    gas_rate: float | None = Field(default=None, ge=0)
    water_fixed_fee: float | None = Field(default=None, ge=0)
    gas_fixed_fee: float | None = Field(default=None, ge=0)
    last_readings: StandardReadings | None = None
    custom_last_readings: dict[str, float] | None = None

    def rates(self) -> dict[str, float]:
        return {
            key: value
            for key, value in self.model_dump(exclude={"last_readings", "custom_last_readings"}).items()
            if value is not None
        }


class CustomFieldIn(BaseModel):
    name: str
    type: FieldType
    unit: str = ""
    price: float = Field(default=0, ge=0)
    start_reading: float = 0


class PriceIn(BaseModel):
    price: float = Field(ge=0)


class CommitIn(MeterEntry):
    name: str = ""
