from datetime import datetime
from zoneinfo import ZoneInfo

from utiltrack.models.tariff import FieldType
from utiltrack.settings import settings

LOCAL_TZ = ZoneInfo(settings.timezone)

STANDARD_UTILITIES = ("electricity", "water", "gas")

UTILITY_LABELS = {"electricity": "Electricity", "water": "Water", "gas": "Gas"}

UTILITY_UNITS = {"electricity": "kWh", "water": "m³", "gas": "m³"}

TYPE_LABELS = {FieldType.RATE: "Metered", FieldType.FEE: "Fixed fee"}


def format_date(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(LOCAL_TZ)
    return value.strftime("%d.%m.%Y %H:%M")
