"""Application service: Create Acquisition use case.

Records a purchase from a supplier: every phone on it becomes a
StockUnit IN_STOCK at its purchase price, and the purchase opens a debt
to the supplier for the total.  All of it is written in one unit of work.
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.application.dto import PurchaseDTO, UnitSpec
from phoneshop.application.views import load_purchase
from phoneshop.domain.exceptions import EntityNotFoundError, ValidationError
from phoneshop.domain.model.purchase import Purchase
from phoneshop.domain.model.stock_unit import Condition, StockUnit
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, DebtorRef, Money
from phoneshop.domain.service.barcode import generate_barcodes
from phoneshop.domain.unit_of_work import UnitOfWork
from phoneshop.logging_config import get_logger

logger = get_logger("application.acquisition")


class CreateAcquisitionHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        supplier_id: int,
        items: list[UnitSpec],
        paid_amount: str = "0",
        occurred_at: datetime | None = None,
        notes: str | None = None,
    ) -> PurchaseDTO:
        """Create a purchase and its stock units.

        Steps:
        1. Verify the supplier exists.
        2. Build a StockUnit per item (IMEIs must be unique).
        3. Let the Purchase aggregate validate the paid amount.
        4. Persist purchase and units together, then reload.
        """
        with self._uow:
            if self._uow.parties.get(DebtorRef.supplier(supplier_id)) is None:
                raise EntityNotFoundError(f"Supplier #{supplier_id} not found")
            if not items:
                raise ValidationError("Purchase must contain at least one unit")

            self._check_imeis(items)
            barcodes = generate_barcodes(len(items))
            units = [
                StockUnit.acquire(
                    brand=spec.brand,
                    model=spec.model,
                    acquisition_cost=Money.of(spec.acquisition_cost, self._currency),
                    barcode=barcode,
                    condition=self._condition(spec.condition),
                    imei=spec.imei,
                    color=spec.color,
                    notes=spec.notes,
                )
                for spec, barcode in zip(items, barcodes)
            ]

            purchase = Purchase.create(
                supplier_id=supplier_id,
                units=units,
                paid_amount=Money.of(paid_amount, self._currency),
                occurred_at=occurred_at,
                notes=notes,
            )
            self._uow.purchases.save(purchase)
            for unit in units:
                unit.purchase_id = purchase.id
                self._uow.units.save(unit)
            purchase.unit_ids = [unit.id for unit in units]  # type: ignore[misc]
            self._uow.purchases.save(purchase)
            self._uow.commit()

        logger.info(
            "acquisition_created",
            extra={
                "purchase_id": purchase.id,
                "supplier_id": supplier_id,
                "units": len(units),
                "total": str(purchase.total_amount.amount),
            },
        )
        with self._uow:
            return load_purchase(self._uow, purchase.id)  # type: ignore[arg-type]

    # --- Internal helpers -----------------------------------------------------

    def _check_imeis(self, items: list[UnitSpec]) -> None:
        seen: set[str] = set()
        for spec in items:
            if not spec.imei:
                continue
            imei = spec.imei.strip()
            if imei in seen or self._uow.units.get_by_imei(imei) is not None:
                raise ValidationError(f"A unit with IMEI {imei} already exists")
            seen.add(imei)

    @staticmethod
    def _condition(raw: str) -> Condition:
        try:
            return Condition(raw.upper())
        except ValueError:
            raise ValidationError(f"Unknown condition '{raw}'")
