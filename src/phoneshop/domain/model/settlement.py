"""Settlement: the immutable record of one payment and how it was allocated."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.value_objects import DebtorRef, Money, utcnow


class PaymentMethod(Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    MOBILE_PAYMENT = "MOBILE_PAYMENT"


@dataclass(frozen=True)
class Allocation:
    """The part of a settlement applied to a single sale or purchase."""

    obligation_id: int
    amount: Money


@dataclass(frozen=True)
class Settlement:
    id: int | None
    debtor: DebtorRef
    amount: Money
    method: PaymentMethod
    allocations: tuple[Allocation, ...] = ()
    occurred_at: datetime = field(default_factory=utcnow)
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.amount.is_zero:
            raise ValidationError("Payment amount must be greater than zero")
