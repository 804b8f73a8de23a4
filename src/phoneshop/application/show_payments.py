"""Application service: Show Payments use case (query).

A debtor's payment history: every recorded payment with the sales (or
purchases) it was split across, plus every sale or purchase ever made
with that debtor, settled or not.
"""

from __future__ import annotations

from phoneshop.application.dto import PaymentHistoryDTO, PaymentRecordDTO
from phoneshop.application.views import fmt_ts, obligation_line
from phoneshop.domain.exceptions import EntityNotFoundError
from phoneshop.domain.model.settlement import Settlement
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, DebtorRef, total
from phoneshop.domain.service.projections import outstanding_balance
from phoneshop.domain.unit_of_work import UnitOfWork


class ShowPaymentsHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, debtor: DebtorRef) -> PaymentHistoryDTO:
        with self._uow:
            party = self._uow.parties.get(debtor)
            if party is None:
                raise EntityNotFoundError(
                    f"{debtor.kind.value.title()} #{debtor.id} not found"
                )
            settlements = self._uow.settlements.list_for_debtor(debtor)
            holders = self._uow.obligations(debtor.kind).list_for_debtor(debtor.id)

        return PaymentHistoryDTO(
            debtor=str(debtor),
            name=party.name,
            total_paid=str(total([s.amount for s in settlements], self._currency)),
            outstanding=str(
                outstanding_balance([h.obligation for h in holders], self._currency)
            ),
            payments=[self._to_dto(s) for s in settlements],
            obligations=[obligation_line(h) for h in holders],
        )

    @staticmethod
    def _to_dto(settlement: Settlement) -> PaymentRecordDTO:
        return PaymentRecordDTO(
            id=settlement.id,  # type: ignore[arg-type]
            amount=str(settlement.amount),
            method=settlement.method.value,
            occurred_at=fmt_ts(settlement.occurred_at),  # type: ignore[arg-type]
            notes=settlement.notes,
            allocations=[(a.obligation_id, str(a.amount)) for a in settlement.allocations],
        )
