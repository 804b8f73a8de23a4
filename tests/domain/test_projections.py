"""Unit tests for read-side projections and barcode generation."""

import pytest

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.sale import PaymentType, Sale
from phoneshop.domain.model.stock_unit import LifecycleStatus, StockUnit
from phoneshop.domain.model.value_objects import DebtorRef, Money
from phoneshop.domain.service.barcode import generate_barcodes, is_valid_barcode
from phoneshop.domain.service.projections import (
    outstanding_balance,
    profit,
    status_counts,
)


def _unit(unit_id: int = 1, cost: str = "950") -> StockUnit:
    unit = StockUnit.acquire("Apple", "iPhone 13", Money.of(cost), "PH1")
    unit.id = unit_id
    return unit


class TestProfit:

    def test_price_minus_accumulated_cost(self):
        sale = Sale.create(1, Money.of("1200"), PaymentType.CASH)
        assert profit(sale, _unit()) == 250

    def test_sale_of_another_unit_rejected(self):
        sale = Sale.create(2, Money.of("1200"), PaymentType.CASH)
        with pytest.raises(ValidationError, match="not for unit #1"):
            profit(sale, _unit())


class TestOutstandingBalance:

    def test_sums_only_open_obligations(self):
        debtor = DebtorRef.customer(1)
        obligations = [
            Obligation.open(Money.of("550"), Money.of("550"), debtor),
            Obligation.open(Money.of("1350"), Money.of("350"), debtor),
        ]
        assert outstanding_balance(obligations, "USD") == Money.of("1000")

    def test_nothing_owed(self):
        assert outstanding_balance([], "USD").is_zero


class TestStatusCounts:

    def test_every_status_present(self):
        units = [_unit(1), _unit(2)]
        units[1].status = LifecycleStatus.SOLD
        counts = status_counts(units)
        assert counts[LifecycleStatus.IN_STOCK] == 1
        assert counts[LifecycleStatus.SOLD] == 1
        assert counts[LifecycleStatus.RETURNED] == 0


class TestBarcode:

    def test_format(self):
        (code,) = generate_barcodes(1)
        assert is_valid_barcode(code)
        assert code.startswith("PH")
        assert len(code) == 19

    def test_batch_is_distinct(self):
        codes = generate_barcodes(50)
        assert len(set(codes)) == 50

    def test_rejects_foreign_codes(self):
        assert not is_valid_barcode("4006381333931")
