"""Obligation: the money-owed shape shared by sales and purchases.

A Sale is owed by a customer, a Purchase is owed by the shop to a
supplier.  Both embed an Obligation so the settlement engine can treat
them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.value_objects import DebtorRef, Money, utcnow


class PaymentState(Enum):
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


def payment_state(amount_paid: Money, principal: Money) -> PaymentState:
    """Derive the payment state from what was paid against what is owed."""
    if amount_paid >= principal:
        return PaymentState.PAID
    if amount_paid.is_zero:
        return PaymentState.UNPAID
    return PaymentState.PARTIAL


@dataclass
class Obligation:
    """Principal owed plus the amount paid so far.

    Invariant: ``0 <= amount_paid <= principal``.  ``payment_state`` is
    always computed, never stored.
    """

    principal: Money
    amount_paid: Money
    occurred_at: datetime = field(default_factory=utcnow)
    debtor: DebtorRef | None = None

    @staticmethod
    def open(
        principal: Money,
        amount_paid: Money,
        debtor: DebtorRef | None,
        occurred_at: datetime | None = None,
    ) -> Obligation:
        """Create a new obligation, rejecting an initial overpayment."""
        if amount_paid > principal:
            raise ValidationError(
                f"Paid amount {amount_paid} cannot exceed {principal}"
            )
        return Obligation(
            principal=principal,
            amount_paid=amount_paid,
            occurred_at=occurred_at or utcnow(),
            debtor=debtor,
        )

    @property
    def payment_state(self) -> PaymentState:
        return payment_state(self.amount_paid, self.principal)

    @property
    def outstanding(self) -> Money:
        return self.principal - self.amount_paid

    @property
    def is_open(self) -> bool:
        return self.payment_state is not PaymentState.PAID

    def apply(self, amount: Money) -> None:
        """Record a payment of *amount* against this obligation."""
        if amount.is_zero:
            raise ValidationError("Applied amount must be positive")
        if amount > self.outstanding:
            raise ValidationError(
                f"Cannot apply {amount}; only {self.outstanding} outstanding"
            )
        self.amount_paid = self.amount_paid + amount
