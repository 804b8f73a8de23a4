"""SQLAlchemy implementation of PurchaseRepository.

The units of a purchase are not stored on the purchase row; each unit
row points back at its purchase and ``unit_ids`` is rebuilt on load.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.purchase import Purchase
from phoneshop.domain.model.value_objects import DebtorRef
from phoneshop.domain.repository.obligation_repository import PurchaseRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import (
    audit_of,
    load_for_write,
    money,
    write_audit,
)
from phoneshop.infrastructure.persistence.tables import PurchaseRow, StockUnitRow


class SqlPurchaseRepository(PurchaseRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, purchase_id: int) -> Purchase | None:
        row = self._session.get(PurchaseRow, purchase_id)
        if row is None or row.deleted_at is not None:
            return None
        return self._to_domain(row)

    def list_open(self, debtor_id: int, lock: bool = False) -> list[Purchase]:
        stmt = (
            select(PurchaseRow)
            .where(
                PurchaseRow.supplier_id == debtor_id,
                PurchaseRow.deleted_at.is_(None),
                PurchaseRow.amount_paid < PurchaseRow.principal,
            )
            .order_by(PurchaseRow.occurred_at, PurchaseRow.id)
        )
        if lock:
            stmt = stmt.with_for_update()
        with translating_conflicts(f"read open purchases of supplier #{debtor_id}"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def list_for_debtor(self, debtor_id: int) -> list[Purchase]:
        rows = self._session.scalars(
            select(PurchaseRow)
            .where(PurchaseRow.supplier_id == debtor_id, PurchaseRow.deleted_at.is_(None))
            .order_by(PurchaseRow.occurred_at, PurchaseRow.id)
        )
        return [self._to_domain(row) for row in rows]

    def save(self, purchase: Purchase) -> None:
        is_new = purchase.id is None
        if is_new:
            row = PurchaseRow()
            self._session.add(row)
        else:
            row = load_for_write(
                self._session, PurchaseRow, purchase, f"Purchase #{purchase.id}"
            )

        obligation = purchase.obligation
        row.supplier_id = purchase.supplier_id
        row.principal = obligation.principal.amount
        row.amount_paid = obligation.amount_paid.amount
        row.currency = obligation.principal.currency
        row.occurred_at = obligation.occurred_at
        row.notes = purchase.notes
        write_audit(row, purchase.audit, is_new)

        with translating_conflicts(f"save purchase from supplier #{purchase.supplier_id}"):
            self._session.flush()
        purchase.id = row.id
        purchase.version = row.version

    def _to_domain(self, row: PurchaseRow) -> Purchase:
        unit_ids = self._session.scalars(
            select(StockUnitRow.id)
            .where(StockUnitRow.purchase_id == row.id)
            .order_by(StockUnitRow.id)
        ).all()
        return Purchase(
            id=row.id,
            supplier_id=row.supplier_id,
            obligation=Obligation(
                principal=money(row.principal, row.currency),
                amount_paid=money(row.amount_paid, row.currency),
                occurred_at=row.occurred_at,
                debtor=DebtorRef.supplier(row.supplier_id),
            ),
            unit_ids=list(unit_ids),
            notes=row.notes,
            audit=audit_of(row),
            version=row.version,
        )
