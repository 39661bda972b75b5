"""Consumption and cost calculation for a billing cycle.

Everything here is pure: the same configuration and entry always give the
same result, nothing is mutated and nothing raises on bad input. Empty,
partial or unparsable values simply contribute nothing, so a form can
recompute on every keystroke.
"""

from __future__ import annotations

import re

from utiltrack.models.bill import BillPreview, ConsumptionData, CostBreakdown, CustomBillRecord
from utiltrack.models.reading import MeterEntry
from utiltrack.models.tariff import CustomFieldConfig, StandardReadings, TariffConfiguration

_SPACES = re.compile(r"\s")
_NUMBER = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def parse_decimal(text: str | None) -> float | None:
    """Parse a typed number, accepting ',' or '.' as decimal separator.

    Spaces are treated as digit grouping: '1 234,5' -> 1234.5.
    Returns None for empty or unparsable input.
    """
    if text is None:
        return None
    cleaned = _SPACES.sub("", text).replace(",", ".")
    if not cleaned or not _NUMBER.match(cleaned):
        return None
    return float(cleaned)


def consumption_for(entered: str | None, last_reading: float) -> float:
    """Current minus last reading, never negative.

    A reading below the stored one (rollback, typo, replaced meter) counts as
    zero consumption rather than an error.
    """
    current = parse_decimal(entered)
    if current is None:
        return 0.0
    return max(0.0, current - last_reading)


def _fee_cost(field: CustomFieldConfig, manual_fees: dict[str, str]) -> float:
    if field.price != 0:
        return field.price
    return parse_decimal(manual_fees.get(field.id)) or 0.0


def calculate(config: TariffConfiguration, entry: MeterEntry) -> BillPreview:
    last = config.last_readings
    consumption = ConsumptionData(
        electricity=consumption_for(entry.electricity, last.electricity),
        water=consumption_for(entry.water, last.water),
        gas=consumption_for(entry.gas, last.gas),
    )
    breakdown = CostBreakdown(
        electricity_cost=consumption.electricity * config.electricity_rate,
        water_cost=consumption.water * config.water_rate,
        water_fixed_fee=config.water_fixed_fee,
        gas_cost=consumption.gas * config.gas_rate,
        gas_fixed_fee=config.gas_fixed_fee,
    )

    custom_records: list[CustomBillRecord] = []
    for field in config.custom_fields:
        if field.is_metered:
            used = consumption_for(
                entry.custom_readings.get(field.id),
                config.custom_last_readings.get(field.id, 0),
            )
            custom_records.append(
                CustomBillRecord(
                    field_id=field.id,
                    name=field.name,
                    type=field.type,
                    unit=field.unit,
                    consumption=used,
                    cost=used * field.price,
                )
            )
        else:
            custom_records.append(
                CustomBillRecord(
                    field_id=field.id,
                    name=field.name,
                    type=field.type,
                    cost=_fee_cost(field, entry.manual_fees),
                )
            )

    total = breakdown.subtotal + sum(record.cost for record in custom_records)
    return BillPreview(
        consumption=consumption,
        breakdown=breakdown,
        custom_records=custom_records,
        total_cost=total,
    )


def _advance(entered: str | None, previous: float) -> float:
    value = parse_decimal(entered)
    return previous if value is None else value


def advance_readings(config: TariffConfiguration, entry: MeterEntry) -> TariffConfiguration:
    """Return a copy of ``config`` whose last readings are what was typed.

    Blank fields keep their previous baseline. The stored value is the typed
    one even when it is below the old reading and consumption was clamped.
    """
    last = config.last_readings
    updated = config.model_copy(deep=True)
    updated.last_readings = StandardReadings(
        electricity=_advance(entry.electricity, last.electricity),
        water=_advance(entry.water, last.water),
        gas=_advance(entry.gas, last.gas),
    )
    updated.custom_last_readings = {
        field.id: _advance(
            entry.custom_readings.get(field.id),
            config.custom_last_readings.get(field.id, 0),
        )
        for field in config.custom_fields
        if field.is_metered
    }
    return updated
