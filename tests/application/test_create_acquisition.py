"""Integration tests for the CreateAcquisition use case.

Uses the in-memory fake unit of work — no database.
"""

import pytest

from phoneshop.application.create_acquisition import CreateAcquisitionHandler
from phoneshop.application.dto import UnitSpec
from phoneshop.domain.exceptions import EntityNotFoundError, ValidationError
from phoneshop.domain.service.barcode import is_valid_barcode
from tests.fakes import FakeUnitOfWork


def _setup() -> tuple[CreateAcquisitionHandler, FakeUnitOfWork, int]:
    uow = FakeUnitOfWork()
    supplier = uow.add_supplier()
    return CreateAcquisitionHandler(uow), uow, supplier.id


def _items() -> list[UnitSpec]:
    return [
        UnitSpec("Apple", "iPhone 13", "800.00", imei="356938035643809"),
        UnitSpec("Samsung", "Galaxy S22", "550.00", condition="good"),
    ]


class TestCreateAcquisitionHappyPath:

    def test_units_enter_stock_at_purchase_price(self):
        handler, uow, supplier_id = _setup()
        dto = handler.handle(supplier_id, _items())

        assert [u.status for u in dto.units] == ["IN_STOCK", "IN_STOCK"]
        assert [u.accumulated_cost for u in dto.units] == ["$800.00", "$550.00"]
        assert dto.units[1].condition == "GOOD"
        assert all(u.purchase_id == dto.id for u in dto.units)

    def test_purchase_total_is_owed_to_supplier(self):
        handler, uow, supplier_id = _setup()
        dto = handler.handle(supplier_id, _items(), paid_amount="350")

        assert dto.total == "$1350.00"
        assert dto.paid_amount == "$350.00"
        assert dto.payment_state == "PARTIAL"
        assert len(uow.purchases.list_open(supplier_id)) == 1

    def test_unpaid_by_default(self):
        handler, _, supplier_id = _setup()
        assert handler.handle(supplier_id, _items()).payment_state == "UNPAID"

    def test_barcodes_are_generated_and_distinct(self):
        handler, _, supplier_id = _setup()
        dto = handler.handle(supplier_id, _items())
        barcodes = [u.barcode for u in dto.units]
        assert all(is_valid_barcode(b) for b in barcodes)
        assert len(set(barcodes)) == 2

    def test_single_commit(self):
        handler, uow, supplier_id = _setup()
        handler.handle(supplier_id, _items())
        assert uow.commits == 1


class TestCreateAcquisitionValidation:

    def test_unknown_supplier(self):
        handler, uow, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Supplier #42"):
            handler.handle(42, _items())

    def test_empty_purchase(self):
        handler, _, supplier_id = _setup()
        with pytest.raises(ValidationError, match="at least one unit"):
            handler.handle(supplier_id, [])

    def test_duplicate_imei_in_batch(self):
        handler, uow, supplier_id = _setup()
        items = [UnitSpec("Apple", "iPhone 13", "800", imei="111"), UnitSpec("Apple", "iPhone 13", "800", imei="111")]
        with pytest.raises(ValidationError, match="IMEI 111"):
            handler.handle(supplier_id, items)
        assert uow.units.list_all() == []

    def test_imei_already_in_stock(self):
        handler, uow, supplier_id = _setup()
        handler.handle(supplier_id, _items())
        with pytest.raises(ValidationError, match="already exists"):
            handler.handle(supplier_id, [UnitSpec("Apple", "iPhone 13", "790", imei="356938035643809")])
        assert len(uow.units.list_all()) == 2

    def test_overpayment_leaves_nothing_behind(self):
        handler, uow, supplier_id = _setup()
        with pytest.raises(ValidationError, match="cannot exceed"):
            handler.handle(supplier_id, _items(), paid_amount="2000")
        assert uow.units.list_all() == []
        assert uow.purchases.list_for_debtor(supplier_id) == []

    def test_unknown_condition(self):
        handler, _, supplier_id = _setup()
        with pytest.raises(ValidationError, match="Unknown condition"):
            handler.handle(supplier_id, [UnitSpec("Apple", "iPhone 13", "800", condition="MINT")])
