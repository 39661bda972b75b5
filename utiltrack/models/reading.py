from __future__ import annotations

from pydantic import BaseModel, field_validator


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return ""
    return str(value)


class MeterEntry(BaseModel):
    """Raw values typed for one billing cycle.

    Everything is kept as text exactly as entered; the calculator decides what
    parses. Custom readings and manual fees are keyed by custom field id.
    """

    electricity: str = ""
    water: str = ""
    gas: str = ""
    custom_readings: dict[str, str] = {}
    manual_fees: dict[str, str] = {}

    @field_validator("electricity", "water", "gas", mode="before")
    @classmethod
    def _coerce_reading(cls, value: object) -> str:
        return _as_text(value)

    @field_validator("custom_readings", "manual_fees", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: object) -> dict[str, str]:
        if not value:
            return {}
        if not isinstance(value, dict):
            return {}
        return {str(key): _as_text(item) for key, item in value.items()}
