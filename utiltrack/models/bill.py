from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from utiltrack.models.tariff import FieldType


class ConsumptionData(BaseModel):
    electricity: float = 0
    water: float = 0
    gas: float = 0


class CostBreakdown(BaseModel):
    electricity_cost: float = 0
    water_cost: float = 0
    water_fixed_fee: float = 0
    gas_cost: float = 0
    gas_fixed_fee: float = 0

    @property
    def subtotal(self) -> float:
        return self.electricity_cost + self.water_cost + self.water_fixed_fee + self.gas_cost + self.gas_fixed_fee


class CustomBillRecord(BaseModel):
    field_id: str
    name: str
    type: FieldType
    unit: str | None = None
    consumption: float | None = None  # only for RATE fields
    cost: float = 0


class BillPreview(BaseModel):
    """Computed, unsaved result of a billing cycle."""

    consumption: ConsumptionData = ConsumptionData()
    breakdown: CostBreakdown = CostBreakdown()
    custom_records: list[CustomBillRecord] = []
    total_cost: float = 0

    @property
    def is_empty(self) -> bool:
        # Water, gas and custom consumption are not considered here.
        return self.total_cost == 0 and self.consumption.electricity == 0


class BillRecord(BaseModel):
    id: int | None = None
    uuid: str = ""
    property_id: int
    name: str = ""
    electricity_consumption: float = 0
    water_consumption: float = 0
    gas_consumption: float = 0
    breakdown: CostBreakdown = CostBreakdown()
    custom_records: list[CustomBillRecord] = []
    total_cost: float = 0
    created_at: datetime | None = None

    @classmethod
    def from_preview(cls, property_id: int, preview: BillPreview, name: str = "") -> BillRecord:
        return cls(
            property_id=property_id,
            name=name,
            electricity_consumption=preview.consumption.electricity,
            water_consumption=preview.consumption.water,
            gas_consumption=preview.consumption.gas,
            breakdown=preview.breakdown.model_copy(),
            custom_records=[record.model_copy() for record in preview.custom_records],
            total_cost=preview.total_cost,
        )
