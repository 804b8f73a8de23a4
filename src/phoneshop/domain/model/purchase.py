"""Purchase aggregate: a batch of units bought from one supplier.

The shop owes the supplier the sum of the units' acquisition costs; that
debt is the purchase's Obligation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.stock_unit import StockUnit
from phoneshop.domain.model.value_objects import AuditFields, DebtorRef, Money, total


@dataclass
class Purchase:
    id: int | None
    supplier_id: int
    obligation: Obligation
    unit_ids: list[int] = field(default_factory=list)
    notes: str | None = None
    audit: AuditFields = field(default_factory=AuditFields)
    version: int | None = None

    @staticmethod
    def create(
        supplier_id: int,
        units: list[StockUnit],
        paid_amount: Money | None = None,
        occurred_at: datetime | None = None,
        notes: str | None = None,
    ) -> Purchase:
        if not units:
            raise ValidationError("Purchase must contain at least one unit")
        currency = units[0].acquisition_cost.currency
        principal = total([u.acquisition_cost for u in units], currency)
        paid = paid_amount if paid_amount is not None else Money.zero(currency)
        obligation = Obligation.open(
            principal, paid, DebtorRef.supplier(supplier_id), occurred_at
        )
        return Purchase(
            id=None,
            supplier_id=supplier_id,
            obligation=obligation,
            notes=notes,
        )

    @property
    def total_amount(self) -> Money:
        return self.obligation.principal
