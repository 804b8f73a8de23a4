"""SQLAlchemy implementation of SettlementRepository (append-only)."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.model.settlement import Allocation, PaymentMethod, Settlement
from phoneshop.domain.model.value_objects import DebtorKind, DebtorRef, utcnow
from phoneshop.domain.repository.settlement_repository import SettlementRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import money
from phoneshop.infrastructure.persistence.tables import (
    SettlementAllocationRow,
    SettlementRow,
)


class SqlSettlementRepository(SettlementRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, settlement: Settlement) -> Settlement:
        is_customer = settlement.debtor.kind is DebtorKind.CUSTOMER
        row = SettlementRow(
            customer_id=settlement.debtor.id if is_customer else None,
            supplier_id=None if is_customer else settlement.debtor.id,
            amount=settlement.amount.amount,
            currency=settlement.amount.currency,
            method=settlement.method.value,
            occurred_at=settlement.occurred_at,
            notes=settlement.notes,
            created_at=utcnow(),
        )
        self._session.add(row)
        with translating_conflicts(f"record payment from {settlement.debtor}"):
            self._session.flush()
            for allocation in settlement.allocations:
                self._session.add(
                    SettlementAllocationRow(
                        settlement_id=row.id,
                        sale_id=allocation.obligation_id if is_customer else None,
                        purchase_id=None if is_customer else allocation.obligation_id,
                        amount=allocation.amount.amount,
                    )
                )
            self._session.flush()
        return replace(settlement, id=row.id)

    def list_for_debtor(self, debtor: DebtorRef) -> list[Settlement]:
        column = (
            SettlementRow.customer_id
            if debtor.kind is DebtorKind.CUSTOMER
            else SettlementRow.supplier_id
        )
        rows = self._session.scalars(
            select(SettlementRow)
            .where(column == debtor.id)
            .order_by(SettlementRow.occurred_at, SettlementRow.id)
        ).all()
        return [self._to_domain(row, debtor) for row in rows]

    def _to_domain(self, row: SettlementRow, debtor: DebtorRef) -> Settlement:
        allocations = self._session.scalars(
            select(SettlementAllocationRow)
            .where(SettlementAllocationRow.settlement_id == row.id)
            .order_by(SettlementAllocationRow.id)
        )
        return Settlement(
            id=row.id,
            debtor=debtor,
            amount=money(row.amount, row.currency),
            method=PaymentMethod(row.method),
            allocations=tuple(
                Allocation(
                    obligation_id=a.sale_id if a.sale_id is not None else a.purchase_id,
                    amount=money(a.amount, row.currency),
                )
                for a in allocations
            ),
            occurred_at=row.occurred_at,
            notes=row.notes,
        )
