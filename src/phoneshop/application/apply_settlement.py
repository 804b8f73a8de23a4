"""Application service: Apply Settlement use case.

Hands a customer's (or the shop's, for suppliers) payment to the FIFO
settlement engine.  Either the whole amount is allocated and recorded,
or nothing changes.
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.application.dto import AppliedDTO, SettlementDTO
from phoneshop.application.views import fmt_ts
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.settlement import PaymentMethod
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, DebtorRef, Money
from phoneshop.domain.service.settlement_engine import AllocationResult, SettlementEngine
from phoneshop.domain.unit_of_work import UnitOfWork


class ApplySettlementHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        debtor: DebtorRef,
        amount: str,
        method: str = "CASH",
        notes: str | None = None,
        occurred_at: datetime | None = None,
    ) -> SettlementDTO:
        try:
            payment_method = PaymentMethod(method.upper())
        except ValueError:
            raise ValidationError(f"Unknown payment method '{method}'")

        with self._uow:
            result = SettlementEngine(self._uow).allocate(
                debtor=debtor,
                amount=Money.of(amount, self._currency),
                method=payment_method,
                notes=notes,
                occurred_at=occurred_at,
            )
            self._uow.commit()

        return self._to_dto(result)

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(result: AllocationResult) -> SettlementDTO:
        settlement = result.settlement
        return SettlementDTO(
            id=settlement.id,  # type: ignore[arg-type]
            debtor=str(settlement.debtor),
            amount=str(settlement.amount),
            method=settlement.method.value,
            occurred_at=fmt_ts(settlement.occurred_at),  # type: ignore[arg-type]
            applied=[
                AppliedDTO(
                    holder_id=update.holder_id,
                    applied=str(update.applied),
                    paid_amount=str(update.amount_paid),
                    payment_state=update.payment_state.value,
                )
                for update in result.updates
            ],
        )
