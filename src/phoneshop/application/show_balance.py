"""Application service: Show Balance use case (query).

What a customer owes the shop, or what the shop owes a supplier, as the
list of open sales/purchases oldest first.
"""

from __future__ import annotations

from phoneshop.application.dto import BalanceDTO
from phoneshop.application.views import obligation_line
from phoneshop.domain.exceptions import EntityNotFoundError
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, DebtorRef
from phoneshop.domain.service.projections import outstanding_balance
from phoneshop.domain.service.settlement_engine import fifo_order
from phoneshop.domain.unit_of_work import UnitOfWork


class ShowBalanceHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, debtor: DebtorRef) -> BalanceDTO:
        with self._uow:
            party = self._uow.parties.get(debtor)
            if party is None:
                raise EntityNotFoundError(
                    f"{debtor.kind.value.title()} #{debtor.id} not found"
                )
            holders = fifo_order(self._uow.obligations(debtor.kind).list_open(debtor.id))

        return BalanceDTO(
            debtor=str(debtor),
            name=party.name,
            outstanding=str(
                outstanding_balance([h.obligation for h in holders], self._currency)
            ),
            obligations=[obligation_line(h) for h in holders],
        )
