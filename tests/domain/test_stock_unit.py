"""Unit tests for the StockUnit aggregate and its status guards."""

import pytest

from phoneshop.domain.exceptions import InvalidTransitionError, ValidationError
from phoneshop.domain.model.stock_unit import Condition, LifecycleStatus, StockUnit
from phoneshop.domain.model.value_objects import Money


def _make_unit(status: LifecycleStatus = LifecycleStatus.IN_STOCK, cost: str = "800") -> StockUnit:
    """Helper to build a persisted-looking unit in the given status."""
    unit = StockUnit.acquire(
        brand="Apple",
        model="iPhone 13",
        acquisition_cost=Money.of(cost),
        barcode="PH17078308000011234",
        imei="356938035643809",
    )
    unit.id = 1
    unit.status = status
    return unit


class TestAcquire:

    def test_new_unit_is_in_stock_at_purchase_price(self):
        unit = _make_unit()
        assert unit.status == LifecycleStatus.IN_STOCK
        assert unit.accumulated_cost == unit.acquisition_cost == Money.of("800")
        assert unit.repair_cost == Money.zero()
        assert unit.condition == Condition.NEW

    def test_strips_text_fields(self):
        unit = StockUnit.acquire(" Samsung ", " S22 ", Money.of("500"), "PH1", imei=" 123 ")
        assert unit.brand == "Samsung"
        assert unit.model == "S22"
        assert unit.imei == "123"

    def test_brand_required(self):
        with pytest.raises(ValidationError, match="Brand"):
            StockUnit.acquire("", "S22", Money.of("500"), "PH1")

    def test_zero_cost_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            StockUnit.acquire("Samsung", "S22", Money.zero(), "PH1")


class TestRepairTransitions:

    @pytest.mark.parametrize(
        "status",
        [LifecycleStatus.IN_STOCK, LifecycleStatus.IN_REPAIR, LifecycleStatus.READY_FOR_SALE],
    )
    def test_enter_repair_from_repairable_status(self, status):
        unit = _make_unit(status)
        unit.enter_repair()
        assert unit.status == LifecycleStatus.IN_REPAIR

    @pytest.mark.parametrize("status", [LifecycleStatus.SOLD, LifecycleStatus.RETURNED])
    def test_enter_repair_rejected_when_gone(self, status):
        unit = _make_unit(status)
        with pytest.raises(InvalidTransitionError, match="Cannot repair"):
            unit.enter_repair()
        assert unit.status == status

    def test_finish_last_repair_makes_unit_ready(self):
        unit = _make_unit(LifecycleStatus.IN_REPAIR)
        unit.finish_repair(other_jobs_active=False)
        assert unit.status == LifecycleStatus.READY_FOR_SALE

    def test_finish_with_other_jobs_open_stays_in_repair(self):
        unit = _make_unit(LifecycleStatus.IN_REPAIR)
        unit.finish_repair(other_jobs_active=True)
        assert unit.status == LifecycleStatus.IN_REPAIR

    def test_finish_requires_in_repair(self):
        with pytest.raises(InvalidTransitionError, match="not in repair"):
            _make_unit(LifecycleStatus.IN_STOCK).finish_repair(other_jobs_active=False)

    def test_abandon_last_repair_returns_to_stock(self):
        unit = _make_unit(LifecycleStatus.IN_REPAIR)
        unit.abandon_repair(other_jobs_active=False)
        assert unit.status == LifecycleStatus.IN_STOCK

    def test_abandon_with_other_jobs_open_stays_in_repair(self):
        unit = _make_unit(LifecycleStatus.IN_REPAIR)
        unit.abandon_repair(other_jobs_active=True)
        assert unit.status == LifecycleStatus.IN_REPAIR


class TestSell:

    @pytest.mark.parametrize("status", [LifecycleStatus.IN_STOCK, LifecycleStatus.READY_FOR_SALE])
    def test_sellable(self, status):
        unit = _make_unit(status)
        assert unit.is_available
        unit.sell()
        assert unit.status == LifecycleStatus.SOLD

    def test_in_repair_rejected(self):
        with pytest.raises(InvalidTransitionError, match="in repair"):
            _make_unit(LifecycleStatus.IN_REPAIR).sell()

    def test_already_sold_rejected(self):
        with pytest.raises(InvalidTransitionError, match="already been sold"):
            _make_unit(LifecycleStatus.SOLD).sell()

    def test_returned_rejected(self):
        with pytest.raises(InvalidTransitionError, match="RETURNED"):
            _make_unit(LifecycleStatus.RETURNED).sell()


class TestChangeStatus:

    def test_sold_unit_can_be_returned(self):
        unit = _make_unit(LifecycleStatus.SOLD)
        unit.change_status(LifecycleStatus.RETURNED, has_active_repairs=False)
        assert unit.status == LifecycleStatus.RETURNED

    def test_sold_unit_cannot_go_back_to_stock(self):
        unit = _make_unit(LifecycleStatus.SOLD)
        with pytest.raises(InvalidTransitionError, match="Use return flow"):
            unit.change_status(LifecycleStatus.IN_STOCK, has_active_repairs=False)
        assert unit.status == LifecycleStatus.SOLD

    def test_cannot_mark_sold_directly(self):
        with pytest.raises(InvalidTransitionError, match="creating a sale"):
            _make_unit().change_status(LifecycleStatus.SOLD, has_active_repairs=False)

    def test_open_repairs_keep_unit_in_repair(self):
        unit = _make_unit(LifecycleStatus.IN_REPAIR)
        with pytest.raises(InvalidTransitionError, match="open repair jobs"):
            unit.change_status(LifecycleStatus.READY_FOR_SALE, has_active_repairs=True)

    def test_same_status_is_a_no_op(self):
        unit = _make_unit(LifecycleStatus.SOLD)
        unit.change_status(LifecycleStatus.SOLD, has_active_repairs=False)
        assert unit.status == LifecycleStatus.SOLD


class TestRemove:

    def test_fresh_unit_can_be_removed(self):
        unit = _make_unit()
        unit.ensure_removable(has_repairs=False, has_sale=False)
        unit.remove()
        assert unit.audit.is_deleted

    def test_unit_with_repairs_cannot_be_removed(self):
        with pytest.raises(InvalidTransitionError, match="repair history"):
            _make_unit().ensure_removable(has_repairs=True, has_sale=False)

    def test_sold_unit_cannot_be_removed(self):
        with pytest.raises(InvalidTransitionError, match="has a sale"):
            _make_unit(LifecycleStatus.SOLD).ensure_removable(has_repairs=False, has_sale=True)
