"""Sale aggregate: one unit sold, with the money the customer owes for it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.value_objects import AuditFields, DebtorRef, Money


class PaymentType(Enum):
    CASH = "CASH"
    PAY_LATER = "PAY_LATER"


@dataclass
class Sale:
    id: int | None
    unit_id: int
    customer_id: int | None
    payment_type: PaymentType
    obligation: Obligation
    notes: str | None = None
    audit: AuditFields = field(default_factory=AuditFields)
    version: int | None = None

    @staticmethod
    def create(
        unit_id: int,
        sale_price: Money,
        payment_type: PaymentType,
        customer_id: int | None = None,
        paid_amount: Money | None = None,
        occurred_at: datetime | None = None,
        notes: str | None = None,
    ) -> Sale:
        """Create a new sale, enforcing the payment rules.

        - a PAY_LATER (credit) sale needs a customer to owe the money
        - a CASH sale is always paid in full at creation
        """
        if sale_price.is_zero:
            raise ValidationError("Sale price must be greater than zero")
        if payment_type == PaymentType.PAY_LATER and customer_id is None:
            raise ValidationError("Customer is required for PAY_LATER sales")

        if payment_type == PaymentType.CASH:
            paid = sale_price
        else:
            paid = paid_amount if paid_amount is not None else Money.zero(sale_price.currency)

        debtor = DebtorRef.customer(customer_id) if customer_id is not None else None
        obligation = Obligation.open(sale_price, paid, debtor, occurred_at)
        return Sale(
            id=None,
            unit_id=unit_id,
            customer_id=customer_id,
            payment_type=payment_type,
            obligation=obligation,
            notes=notes,
        )

    @property
    def sale_price(self) -> Money:
        return self.obligation.principal
