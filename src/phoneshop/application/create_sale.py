"""Application service: Create Sale use case.

Sells a unit that is IN_STOCK or READY_FOR_SALE.  The sale, the
customer's debt (if any) and the unit's move to SOLD are written
together.  A unit in repair or already sold cannot be sold.
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.application.dto import SaleDTO
from phoneshop.application.views import load_sale
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.sale import PaymentType
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, Money
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class CreateSaleHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        unit_id: int,
        sale_price: str,
        payment_type: str = "CASH",
        customer_id: int | None = None,
        paid_amount: str | None = None,
        occurred_at: datetime | None = None,
        notes: str | None = None,
    ) -> SaleDTO:
        try:
            kind = PaymentType(payment_type.upper())
        except ValueError:
            raise ValidationError(f"Unknown payment type '{payment_type}'")

        with self._uow:
            sale = LifecycleService(self._uow).sell(
                unit_id=unit_id,
                sale_price=Money.of(sale_price, self._currency),
                payment_type=kind,
                customer_id=customer_id,
                paid_amount=(
                    Money.of(paid_amount, self._currency) if paid_amount is not None else None
                ),
                occurred_at=occurred_at,
                notes=notes,
            )
            self._uow.commit()

        with self._uow:
            return load_sale(self._uow, sale.id)  # type: ignore[arg-type]
