"""Domain service: FIFO settlement of a debtor's obligations.

A payment is applied to the debtor's oldest open obligation first, then
the next oldest, until the payment is used up.  The allocation is exact:
if the payment is larger than everything the debtor owes, nothing is
applied at all.

The two-phase approach (plan-then-apply) ensures no obligation is touched
unless the whole payment fits.

Concurrent payments for the same debtor are serialized by locking the
debtor's party row before the open obligations are read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from phoneshop.domain.exceptions import (
    EntityNotFoundError,
    NoOutstandingObligationsError,
    OverAllocationError,
    ValidationError,
)
from phoneshop.domain.model.obligation import PaymentState
from phoneshop.domain.model.settlement import Allocation, PaymentMethod, Settlement
from phoneshop.domain.model.value_objects import DebtorRef, Money, utcnow
from phoneshop.domain.repository.obligation_repository import ObligationHolder
from phoneshop.domain.unit_of_work import UnitOfWork
from phoneshop.logging_config import get_logger

logger = get_logger("domain.settlement")


@dataclass(frozen=True)
class ObligationUpdate:
    """How one sale or purchase changed as a result of an allocation."""

    holder_id: int
    applied: Money
    amount_paid: Money
    payment_state: PaymentState


@dataclass(frozen=True)
class AllocationResult:
    settlement: Settlement
    updates: list[ObligationUpdate]


def fifo_order(holders: list[ObligationHolder]) -> list[ObligationHolder]:
    """Oldest first; obligations from the same moment go in ID order."""
    return sorted(holders, key=lambda h: (h.obligation.occurred_at, h.id or 0))


def plan_allocation(
    holders: list[ObligationHolder], amount: Money
) -> tuple[list[tuple[ObligationHolder, Money]], Money]:
    """Walk *holders* oldest-first and split *amount* across them.

    Returns the (holder, amount to apply) pairs and whatever could not be
    placed.  Nothing is mutated.
    """
    plan: list[tuple[ObligationHolder, Money]] = []
    remaining = amount
    for holder in fifo_order(holders):
        if remaining.is_zero:
            break
        due = holder.obligation.outstanding
        if due.is_zero:
            continue
        applied = min(remaining, due)
        plan.append((holder, applied))
        remaining = remaining - applied
    return plan, remaining


class SettlementEngine:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def allocate(
        self,
        debtor: DebtorRef,
        amount: Money,
        method: PaymentMethod,
        notes: str | None = None,
        occurred_at: datetime | None = None,
    ) -> AllocationResult:
        """Apply *amount* to the debtor's open obligations, oldest first.

        Phase 1 — lock and plan: lock the debtor, load the open
                  obligations and compute the split.  Fails before any
                  mutation if there is no debt or the payment exceeds it.
        Phase 2 — apply and persist: update each touched obligation and
                  record exactly one Settlement for the full amount.
        """
        if amount.is_zero:
            raise ValidationError("Payment amount must be greater than zero")

        # Phase 1: lock, load and plan
        if self._uow.parties.get(debtor, for_update=True) is None:
            raise EntityNotFoundError(f"{debtor.kind.value.title()} #{debtor.id} not found")

        repo = self._uow.obligations(debtor.kind)
        open_holders = [
            h for h in repo.list_open(debtor.id, lock=True) if h.obligation.is_open
        ]
        if not open_holders:
            raise NoOutstandingObligationsError(
                f"No unpaid obligations found for {debtor}"
            )

        plan, leftover = plan_allocation(open_holders, amount)
        if not leftover.is_zero:
            logger.warning(
                "allocation_rejected",
                extra={"debtor": str(debtor), "amount": str(amount.amount)},
            )
            raise OverAllocationError(
                f"Payment amount exceeds total debt. Remaining: {leftover}"
            )

        # Phase 2: apply and persist
        updates: list[ObligationUpdate] = []
        for holder, applied in plan:
            holder.obligation.apply(applied)
            repo.save(holder)
            updates.append(
                ObligationUpdate(
                    holder_id=holder.id,  # type: ignore[arg-type]
                    applied=applied,
                    amount_paid=holder.obligation.amount_paid,
                    payment_state=holder.obligation.payment_state,
                )
            )

        settlement = self._uow.settlements.add(
            Settlement(
                id=None,
                debtor=debtor,
                amount=amount,
                method=method,
                allocations=tuple(
                    Allocation(obligation_id=u.holder_id, amount=u.applied)
                    for u in updates
                ),
                occurred_at=occurred_at or utcnow(),
                notes=notes,
            )
        )

        logger.info(
            "payment_allocated",
            extra={
                "debtor": str(debtor),
                "amount": str(amount.amount),
                "settlement_id": settlement.id,
                "obligations": len(updates),
            },
        )
        return AllocationResult(settlement=settlement, updates=updates)
