"""Integration tests for the ApplySettlement and ShowBalance use cases."""

from datetime import datetime, timezone

import pytest

from phoneshop.application.apply_settlement import ApplySettlementHandler
from phoneshop.application.create_acquisition import CreateAcquisitionHandler
from phoneshop.application.create_sale import CreateSaleHandler
from phoneshop.application.dto import UnitSpec
from phoneshop.application.show_balance import ShowBalanceHandler
from phoneshop.application.show_payments import ShowPaymentsHandler
from phoneshop.domain.exceptions import (
    EntityNotFoundError,
    NoOutstandingObligationsError,
    OverAllocationError,
    ValidationError,
)
from phoneshop.domain.model.value_objects import DebtorRef
from tests.fakes import FakeUnitOfWork


def _setup() -> tuple[FakeUnitOfWork, DebtorRef, DebtorRef]:
    """A customer with two unpaid credit sales: 550 (older) and 1350."""
    uow = FakeUnitOfWork()
    supplier = uow.add_supplier()
    customer = uow.add_customer()
    purchase = CreateAcquisitionHandler(uow).handle(
        supplier.id,
        [UnitSpec("Samsung", "Galaxy A54", "400"), UnitSpec("Apple", "iPhone 14", "1000")],
    )
    sell = CreateSaleHandler(uow)
    for unit, price, day in zip(purchase.units, ("550", "1350"), (1, 2)):
        sell.handle(
            unit.id,
            price,
            payment_type="PAY_LATER",
            customer_id=customer.id,
            occurred_at=datetime(2025, 3, day, tzinfo=timezone.utc),
        )
    return uow, customer, supplier


class TestApplySettlement:

    def test_fifo_split(self):
        uow, customer, _ = _setup()
        dto = ApplySettlementHandler(uow).handle(customer, "900.00", method="bank_transfer")

        assert dto.amount == "$900.00"
        assert dto.method == "BANK_TRANSFER"
        assert dto.debtor == "customer#1"
        assert [(a.applied, a.paid_amount, a.payment_state) for a in dto.applied] == [
            ("$550.00", "$550.00", "PAID"),
            ("$350.00", "$350.00", "PARTIAL"),
        ]

    def test_balance_after_payment(self):
        uow, customer, _ = _setup()
        ApplySettlementHandler(uow).handle(customer, "900")

        balance = ShowBalanceHandler(uow).handle(customer)

        assert balance.outstanding == "$1000.00"
        assert len(balance.obligations) == 1
        assert balance.obligations[0].principal == "$1350.00"
        assert balance.obligations[0].payment_state == "PARTIAL"

    def test_over_allocation_changes_nothing(self):
        uow, customer, _ = _setup()
        with pytest.raises(OverAllocationError, match="exceeds total debt"):
            ApplySettlementHandler(uow).handle(customer, "2000")

        balance = ShowBalanceHandler(uow).handle(customer)
        assert balance.outstanding == "$1900.00"
        assert [o.payment_state for o in balance.obligations] == ["UNPAID", "UNPAID"]
        assert uow.settlements.list_for_debtor(customer) == []

    def test_second_payment_continues_where_first_stopped(self):
        uow, customer, _ = _setup()
        handler = ApplySettlementHandler(uow)
        handler.handle(customer, "900")
        dto = handler.handle(customer, "1000")

        assert [(a.applied, a.payment_state) for a in dto.applied] == [("$1000.00", "PAID")]
        with pytest.raises(NoOutstandingObligationsError):
            handler.handle(customer, "1")

    def test_paying_the_supplier(self):
        uow, _, supplier = _setup()
        dto = ApplySettlementHandler(uow).handle(supplier, "1400")
        assert dto.applied[0].payment_state == "PAID"
        assert ShowBalanceHandler(uow).handle(supplier).outstanding == "$0.00"

    def test_open_obligations_are_read_under_lock(self):
        uow, customer, _ = _setup()
        ApplySettlementHandler(uow).handle(customer, "100")
        assert uow.parties.locked == [customer]
        assert uow.sales.locked == [customer.id]

    def test_unknown_method(self):
        uow, customer, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown payment method"):
            ApplySettlementHandler(uow).handle(customer, "10", method="CHEQUE")


class TestShowBalance:

    def test_lists_open_obligations_oldest_first(self):
        uow, customer, _ = _setup()
        balance = ShowBalanceHandler(uow).handle(customer)
        assert balance.name == "Alice"
        assert balance.outstanding == "$1900.00"
        assert [o.principal for o in balance.obligations] == ["$550.00", "$1350.00"]

    def test_reading_a_balance_takes_no_locks(self):
        uow, customer, supplier = _setup()
        ShowBalanceHandler(uow).handle(customer)
        ShowBalanceHandler(uow).handle(supplier)
        assert uow.parties.locked == []
        assert uow.sales.locked == []
        assert uow.purchases.locked == []

    def test_unknown_debtor(self):
        uow, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Customer #5"):
            ShowBalanceHandler(uow).handle(DebtorRef.customer(5))


class TestShowPayments:

    def test_history_lists_payments_with_their_split(self):
        uow, customer, _ = _setup()
        handler = ApplySettlementHandler(uow)
        first = handler.handle(customer, "900", notes="deposit")
        second = handler.handle(customer, "200", method="CARD")

        history = ShowPaymentsHandler(uow).handle(customer)

        assert history.name == "Alice"
        assert history.total_paid == "$1100.00"
        assert history.outstanding == "$800.00"
        assert [(p.id, p.amount, p.method) for p in history.payments] == [
            (first.id, "$900.00", "CASH"),
            (second.id, "$200.00", "CARD"),
        ]
        assert history.payments[0].notes == "deposit"
        sale_ids = [o.id for o in history.obligations]
        assert history.payments[0].allocations == [
            (sale_ids[0], "$550.00"),
            (sale_ids[1], "$350.00"),
        ]
        assert history.payments[1].allocations == [(sale_ids[1], "$200.00")]

    def test_settled_obligations_stay_in_history(self):
        uow, customer, _ = _setup()
        ApplySettlementHandler(uow).handle(customer, "1900")

        history = ShowPaymentsHandler(uow).handle(customer)

        assert history.outstanding == "$0.00"
        assert [o.payment_state for o in history.obligations] == ["PAID", "PAID"]
        assert ShowBalanceHandler(uow).handle(customer).obligations == []

    def test_no_payments_yet(self):
        uow, _, supplier = _setup()
        history = ShowPaymentsHandler(uow).handle(supplier)
        assert history.payments == []
        assert history.total_paid == "$0.00"
        assert history.outstanding == "$1400.00"
        assert len(history.obligations) == 1

    def test_unknown_debtor(self):
        uow, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Supplier #9"):
            ShowPaymentsHandler(uow).handle(DebtorRef.supplier(9))
