from __future__ import annotations

import logging
from datetime import datetime

from utiltrack.calculator import advance_readings, calculate
from utiltrack.models.bill import BillPreview, BillRecord
from utiltrack.models.reading import MeterEntry
from utiltrack.repositories.base import BillRepository, TariffRepository
from utiltrack.services.tariff_service import TariffService

logger = logging.getLogger(__name__)


class BillService:
    def __init__(self, bill_repo: BillRepository, tariff_repo: TariffRepository) -> None:
        self.bill_repo = bill_repo
        self.tariffs = TariffService(tariff_repo)

    def preview(self, property_id: int, entry: MeterEntry) -> BillPreview:
        config = self.tariffs.get_configuration(property_id)
        return calculate(config, entry)

    def commit(self, property_id: int, entry: MeterEntry, name: str = "") -> BillRecord | None:
        """Save the cycle as a bill and advance the stored last readings.

        Returns None without writing anything when nothing meaningful was
        entered (zero total and zero electricity consumption). The bill is
        written first, then the configuration; the two writes are not atomic.
        """
        config = self.tariffs.get_configuration(property_id)
        preview = calculate(config, entry)
        if preview.is_empty:
            logger.info("Commit skipped for property=%s: nothing entered", property_id)
            return None

        bill = self.bill_repo.create(BillRecord.from_preview(property_id, preview, name=name.strip()))
        logger.info(
            "Bill created: id=%s, property=%s, total=%.2f",
            bill.id,
            property_id,
            bill.total_cost,
        )

        self.tariffs.save_configuration(advance_readings(config, entry))
        return bill

    def list_bills(self, property_id: int) -> list[BillRecord]:
        result = self.bill_repo.list_by_property(property_id)
        logger.debug("Listed %d bills for property=%s", len(result), property_id)
        return result

    def cost_trend(self, property_id: int) -> list[tuple[datetime | None, float]]:
        """Oldest-first (date, total) pairs for charting."""
        return [(bill.created_at, bill.total_cost) for bill in reversed(self.list_bills(property_id))]

    def get_bill(self, bill_id: int) -> BillRecord | None:
        result = self.bill_repo.get_by_id(bill_id)
        logger.debug("get_bill id=%s found=%s", bill_id, result is not None)
        return result

    def get_bill_by_uuid(self, uuid: str) -> BillRecord | None:
        result = self.bill_repo.get_by_uuid(uuid)
        logger.debug("get_bill_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def rename_bill(self, bill: BillRecord, name: str) -> BillRecord:
        if bill.id is None:
            raise ValueError("Cannot rename bill without an id")
        name = name.strip()
        self.bill_repo.update_name(bill.id, name)
        bill.name = name
        logger.info("Bill %s renamed to %r", bill.id, name)
        return bill
