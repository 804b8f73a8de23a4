"""Value objects for the phone shop: money, audit stamps and debtor references."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from functools import total_ordering

from phoneshop.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "USD"
CENTS = Decimal("0.01")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@total_ordering
@dataclass(frozen=True)
class Money:
    """A non-negative amount in one currency.

    Costs, prices and payments all use this type.  Amounts from outside
    the domain go through ``Money.of`` which rounds them to whole cents.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise ValidationError(f"Not a valid amount: {self.amount!r}")
        if self.amount < 0:
            raise ValidationError(f"Amount cannot be negative, got {self.amount}")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._check_currency(other)
        if other.amount > self.amount:
            raise ValidationError(f"Cannot subtract {other} from {self}")
        return Money(self.amount - other.amount, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        if self.currency == "USD":
            return f"${self.amount:.2f}"
        return f"{self.amount:.2f} {self.currency}"

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Currency mismatch: {self.currency} and {other.currency}"
            )

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return Money(value.quantize(CENTS, rounding=ROUND_HALF_UP), currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)


def total(amounts: list[Money], currency: str = DEFAULT_CURRENCY) -> Money:
    """Sum of *amounts*; zero for an empty list."""
    result = Money.zero(currency)
    for amount in amounts:
        result = result + amount
    return result


@dataclass(frozen=True)
class AuditFields:
    """Bookkeeping timestamps embedded in every entity.

    ``deleted_at`` marks a soft delete; repositories hide such rows.
    """

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def touched(self, at: datetime | None = None) -> AuditFields:
        return replace(self, updated_at=at or utcnow())

    def deleted(self, at: datetime | None = None) -> AuditFields:
        moment = at or utcnow()
        return replace(self, updated_at=moment, deleted_at=moment)


class DebtorKind(Enum):
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"


@dataclass(frozen=True)
class DebtorRef:
    """Identifies who owes an obligation: a customer or a supplier.

    Sales are owed by customers, purchases are owed (by the shop) to
    suppliers; settlement treats both the same way.
    """

    kind: DebtorKind
    id: int

    @staticmethod
    def customer(customer_id: int) -> DebtorRef:
        return DebtorRef(DebtorKind.CUSTOMER, customer_id)

    @staticmethod
    def supplier(supplier_id: int) -> DebtorRef:
        return DebtorRef(DebtorKind.SUPPLIER, supplier_id)

    def __str__(self) -> str:
        return f"{self.kind.value.lower()}#{self.id}"
