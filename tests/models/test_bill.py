import pytest

from utiltrack.models.bill import BillPreview, BillRecord, ConsumptionData, CostBreakdown, CustomBillRecord
from utiltrack.models.tariff import FieldType


def _preview(**overrides) -> BillPreview:
    defaults = dict(
        consumption=ConsumptionData(electricity=100, water=6, gas=6),
        breakdown=CostBreakdown(
            electricity_cost=432.0,
            water_cost=122.82,
            water_fixed_fee=5.38,
            gas_cost=47.7,
            gas_fixed_fee=289.04,
        ),
        custom_records=[CustomBillRecord(field_id="p", name="Parking", type=FieldType.FEE, cost=200)],
        total_cost=1096.94,
    )
    defaults.update(overrides)
    return BillPreview(**defaults)


class TestCostBreakdown:
    def test_subtotal(self):
        breakdown = CostBreakdown(
            electricity_cost=1, water_cost=2, water_fixed_fee=3, gas_cost=4, gas_fixed_fee=5
        )
        assert breakdown.subtotal == 15


class TestBillPreview:
    def test_is_empty(self):
        assert BillPreview().is_empty

    def test_not_empty_with_total(self):
        assert not _preview().is_empty

    def test_not_empty_with_electricity_only(self):
        preview = BillPreview(consumption=ConsumptionData(electricity=5))
        assert not preview.is_empty

    def test_water_consumption_alone_is_still_empty(self):
        # Free water with no electricity counts as nothing entered.
        preview = BillPreview(consumption=ConsumptionData(water=5))
        assert preview.is_empty


class TestBillRecord:
    def test_from_preview(self):
        preview = _preview()
        bill = BillRecord.from_preview(3, preview, name="March")

        assert bill.id is None
        assert bill.property_id == 3
        assert bill.name == "March"
        assert bill.electricity_consumption == 100
        assert bill.water_consumption == 6
        assert bill.gas_consumption == 6
        assert bill.breakdown == preview.breakdown
        assert bill.custom_records == preview.custom_records
        assert bill.total_cost == pytest.approx(1096.94)

    def test_from_preview_copies_records(self):
        preview = _preview()
        bill = BillRecord.from_preview(3, preview)

        preview.custom_records[0].cost = 1
        preview.breakdown.electricity_cost = 0

        assert bill.custom_records[0].cost == 200
        assert bill.breakdown.electricity_cost == 432.0
