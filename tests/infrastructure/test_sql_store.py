"""Tests for the SQLAlchemy store against SQLite.

The handlers run unchanged on SqlAlchemyUnitOfWork; these tests check
that the mapping, the atomic commit and the conflict detection hold up
on a real database.
"""

import threading
from datetime import datetime, timezone

import pytest

from phoneshop.application.apply_settlement import ApplySettlementHandler
from phoneshop.application.complete_repair import CompleteRepairHandler
from phoneshop.application.create_acquisition import CreateAcquisitionHandler
from phoneshop.application.create_sale import CreateSaleHandler
from phoneshop.application.dto import UnitSpec
from phoneshop.application.register_party import RegisterPartyHandler
from phoneshop.application.remove_unit import RemoveUnitHandler
from phoneshop.application.show_balance import ShowBalanceHandler
from phoneshop.application.start_repair import StartRepairHandler
from phoneshop.domain.exceptions import (
    ConcurrencyConflictError,
    OverAllocationError,
    ValidationError,
)
from phoneshop.domain.model.obligation import PaymentState
from phoneshop.domain.model.sale import PaymentType, Sale
from phoneshop.domain.model.stock_unit import StockUnit
from phoneshop.domain.model.value_objects import DebtorRef, Money
from phoneshop.infrastructure.persistence.engine import (
    build_engine,
    create_tables,
    session_factory,
)
from phoneshop.infrastructure.persistence.sql_unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def factory(tmp_path):
    # a file database, so separate sessions really are separate connections
    engine = build_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    create_tables(engine)
    yield session_factory(engine)
    engine.dispose()


@pytest.fixture
def uow(factory):
    return SqlAlchemyUnitOfWork(factory)


def _stock(uow, *costs: str) -> tuple[int, list[int]]:
    supplier = RegisterPartyHandler(uow).handle("SUPPLIER", "Phone Wholesale Ltd")
    purchase = CreateAcquisitionHandler(uow).handle(
        supplier.id, [UnitSpec("Apple", f"iPhone {i}", c) for i, c in enumerate(costs, 12)]
    )
    return supplier.id, [u.id for u in purchase.units]


class TestMapping:

    def test_unit_round_trip(self, uow):
        _, (unit_id,) = _stock(uow, "800.00")
        with uow:
            unit = uow.units.get_by_id(unit_id)
        assert unit.acquisition_cost == Money.of("800")
        assert unit.accumulated_cost == Money.of("800")
        assert unit.barcode.startswith("PH")
        assert unit.audit.created_at.tzinfo is not None

    def test_purchase_lists_its_units(self, uow):
        supplier_id, unit_ids = _stock(uow, "400", "600")
        with uow:
            (purchase,) = uow.purchases.list_for_debtor(supplier_id)
        assert purchase.unit_ids == unit_ids
        assert purchase.total_amount == Money.of("1000")

    def test_find_by_barcode(self, uow):
        _, (unit_id,) = _stock(uow, "800")
        with uow:
            barcode = uow.units.get_by_id(unit_id).barcode
            assert uow.units.get_by_barcode(barcode).id == unit_id
            assert uow.units.get_by_barcode("PH00000000000000000") is None

    def test_loaded_entities_carry_their_row_version(self, uow):
        _, (unit_id,) = _stock(uow, "800")
        with uow:
            unit = uow.units.get_by_id(unit_id)
            loaded = unit.version
            unit.notes = "scratch on the back"
            uow.units.save(unit)
            assert unit.version == loaded + 1
            uow.commit()
        with uow:
            assert uow.units.get_by_id(unit_id).version == loaded + 1

    def test_removed_unit_is_hidden(self, uow):
        _, (unit_id,) = _stock(uow, "800")
        RemoveUnitHandler(uow).handle(unit_id)
        with uow:
            assert uow.units.get_by_id(unit_id) is None
            assert uow.units.list_all() == []

    def test_settlement_keeps_allocations(self, uow):
        supplier = RegisterPartyHandler(uow).handle("SUPPLIER", "Phone Wholesale Ltd")
        entered_first, dated_earlier = (
            CreateAcquisitionHandler(uow).handle(
                supplier.id,
                [UnitSpec("Apple", "iPhone 13", cost)],
                occurred_at=datetime(2025, 3, day, tzinfo=timezone.utc),
            )
            for cost, day in (("600", 2), ("400", 1))
        )
        debtor = DebtorRef.supplier(supplier.id)

        ApplySettlementHandler(uow).handle(debtor, "500", method="CARD")

        with uow:
            (settlement,) = uow.settlements.list_for_debtor(debtor)
            purchases = {p.id: p for p in uow.purchases.list_for_debtor(supplier.id)}
        assert settlement.amount == Money.of("500")
        assert [(a.obligation_id, a.amount) for a in settlement.allocations] == [
            (dated_earlier.id, Money.of("400")),
            (entered_first.id, Money.of("100")),
        ]
        assert purchases[dated_earlier.id].obligation.payment_state is PaymentState.PAID
        assert purchases[entered_first.id].obligation.amount_paid == Money.of("100")


class TestScenarios:

    def test_repair_then_sale(self, uow):
        _, (unit_id,) = _stock(uow, "800.00")
        job = StartRepairHandler(uow).handle(unit_id, "150.00", "Screen")
        assert CompleteRepairHandler(uow).handle(job.id).unit.accumulated_cost == "$950.00"

        sale = CreateSaleHandler(uow).handle(unit_id, "1200.00")
        assert sale.profit == "250.00"

    def test_fifo_payment(self, uow):
        _, unit_ids = _stock(uow, "400", "1000")
        customer = RegisterPartyHandler(uow).handle("CUSTOMER", "Alice")
        for unit_id, price, day in zip(unit_ids, ("550", "1350"), (1, 2)):
            CreateSaleHandler(uow).handle(
                unit_id,
                price,
                payment_type="PAY_LATER",
                customer_id=customer.id,
                occurred_at=datetime(2025, 3, day, tzinfo=timezone.utc),
            )
        debtor = DebtorRef.customer(customer.id)

        dto = ApplySettlementHandler(uow).handle(debtor, "900")
        assert [a.payment_state for a in dto.applied] == ["PAID", "PARTIAL"]

        with pytest.raises(OverAllocationError):
            ApplySettlementHandler(uow).handle(debtor, "1000.01")
        assert ShowBalanceHandler(uow).handle(debtor).outstanding == "$1000.00"


class TestAtomicity:

    def test_uncommitted_work_is_rolled_back(self, uow):
        with uow:
            uow.units.save(StockUnit.acquire("Apple", "iPhone 13", Money.of("800"), "PH1"))
        with uow:
            assert uow.units.list_all() == []

    def test_failed_event_leaves_no_trace(self, uow):
        _, (unit_id,) = _stock(uow, "800")
        customer = RegisterPartyHandler(uow).handle("CUSTOMER", "Alice")
        with pytest.raises(ValidationError):
            CreateSaleHandler(uow).handle(
                unit_id, "1200", payment_type="PAY_LATER", customer_id=customer.id, paid_amount="5000"
            )
        with uow:
            assert uow.sales.get_by_unit_id(unit_id) is None
            assert uow.units.get_by_id(unit_id).status.value == "IN_STOCK"


class TestConcurrency:

    def test_stale_write_is_a_conflict(self, factory):
        setup = SqlAlchemyUnitOfWork(factory)
        _, (unit_id,) = _stock(setup, "800")
        customer = RegisterPartyHandler(setup).handle("CUSTOMER", "Alice")
        sale = CreateSaleHandler(setup).handle(
            unit_id, "1200", payment_type="PAY_LATER", customer_id=customer.id
        )

        first, second = SqlAlchemyUnitOfWork(factory), SqlAlchemyUnitOfWork(factory)
        with first, second:
            mine = first.sales.get_by_id(sale.id)
            theirs = second.sales.get_by_id(sale.id)

            mine.obligation.apply(Money.of("100"))
            first.sales.save(mine)
            first.commit()

            theirs.obligation.apply(Money.of("100"))
            with pytest.raises(ConcurrencyConflictError):
                second.sales.save(theirs)

        with setup:
            stored = setup.sales.get_by_id(sale.id)
        assert stored.obligation.amount_paid == Money.of("100")
        assert stored.obligation.payment_state is PaymentState.PARTIAL

    def test_second_sale_of_a_unit_is_refused_by_the_database(self, uow):
        _, (unit_id,) = _stock(uow, "800")
        CreateSaleHandler(uow).handle(unit_id, "1200")
        with uow:
            duplicate = Sale.create(unit_id, Money.of("1300"), PaymentType.CASH)
            with pytest.raises(ConcurrencyConflictError):
                uow.sales.save(duplicate)

    def test_concurrent_payments_by_one_customer_apply_only_once(self, factory):
        setup = SqlAlchemyUnitOfWork(factory)
        _, (unit_id,) = _stock(setup, "800")
        customer = RegisterPartyHandler(setup).handle("CUSTOMER", "Alice")
        CreateSaleHandler(setup).handle(
            unit_id, "1200", payment_type="PAY_LATER", customer_id=customer.id
        )
        debtor = DebtorRef.customer(customer.id)

        both_read = threading.Barrier(2, timeout=10)
        outcomes: dict[str, object] = {}

        def pay(amount: str) -> None:
            uow = _PausingUnitOfWork(factory, both_read)
            try:
                outcomes[amount] = ApplySettlementHandler(uow).handle(debtor, amount)
            except ConcurrencyConflictError as exc:
                outcomes[amount] = exc

        threads = [threading.Thread(target=pay, args=(a,)) for a in ("100", "50")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert set(outcomes) == {"100", "50"}
        applied = [a for a, o in outcomes.items() if not isinstance(o, ConcurrencyConflictError)]
        assert len(applied) == 1

        with setup:
            sale = setup.sales.get_by_unit_id(unit_id)
            settlements = setup.settlements.list_for_debtor(debtor)
        assert sale.obligation.amount_paid == Money.of(applied[0])
        assert [s.amount for s in settlements] == [Money.of(applied[0])]


class _PausingUnitOfWork(SqlAlchemyUnitOfWork):
    """Holds each payment after it has read the open sales until the other
    payment has read them too, so both work from the same snapshot."""

    def __init__(self, factory, barrier: threading.Barrier) -> None:
        super().__init__(factory)
        self._barrier = barrier

    def __enter__(self):
        uow = super().__enter__()
        list_open = self.sales.list_open

        def list_open_then_wait(debtor_id: int, lock: bool = False):
            holders = list_open(debtor_id, lock=lock)
            self._barrier.wait()
            return holders

        self.sales.list_open = list_open_then_wait  # type: ignore[method-assign]
        return uow
