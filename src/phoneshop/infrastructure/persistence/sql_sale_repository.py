"""SQLAlchemy implementation of SaleRepository.

``list_open`` filters on the stored amounts (``amount_paid < principal``)
rather than a stored state.  The settlement engine asks it to lock the
rows it returns; balance queries read them without locking.

Updates re-read the row and refuse to overwrite a version other than the
one the sale was loaded at.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.sale import PaymentType, Sale
from phoneshop.domain.model.value_objects import DebtorRef
from phoneshop.domain.repository.obligation_repository import SaleRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import (
    audit_of,
    load_for_write,
    money,
    write_audit,
)
from phoneshop.infrastructure.persistence.tables import SaleRow


class SqlSaleRepository(SaleRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- SaleRepository interface ---------------------------------------------

    def get_by_id(self, sale_id: int) -> Sale | None:
        row = self._session.get(SaleRow, sale_id)
        if row is None or row.deleted_at is not None:
            return None
        return self._to_domain(row)

    def get_by_unit_id(self, unit_id: int) -> Sale | None:
        row = self._session.scalars(
            select(SaleRow).where(SaleRow.unit_id == unit_id, SaleRow.deleted_at.is_(None))
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def list_open(self, debtor_id: int, lock: bool = False) -> list[Sale]:
        stmt = (
            select(SaleRow)
            .where(
                SaleRow.customer_id == debtor_id,
                SaleRow.deleted_at.is_(None),
                SaleRow.amount_paid < SaleRow.principal,
            )
            .order_by(SaleRow.occurred_at, SaleRow.id)
        )
        if lock:
            stmt = stmt.with_for_update()
        with translating_conflicts(f"read open sales of customer #{debtor_id}"):
            rows = self._session.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def list_for_debtor(self, debtor_id: int) -> list[Sale]:
        rows = self._session.scalars(
            select(SaleRow)
            .where(SaleRow.customer_id == debtor_id, SaleRow.deleted_at.is_(None))
            .order_by(SaleRow.occurred_at, SaleRow.id)
        )
        return [self._to_domain(row) for row in rows]

    def save(self, sale: Sale) -> None:
        is_new = sale.id is None
        if is_new:
            row = SaleRow()
            self._session.add(row)
        else:
            row = load_for_write(self._session, SaleRow, sale, f"Sale #{sale.id}")

        obligation = sale.obligation
        row.unit_id = sale.unit_id
        row.customer_id = sale.customer_id
        row.payment_type = sale.payment_type.value
        row.principal = obligation.principal.amount
        row.amount_paid = obligation.amount_paid.amount
        row.currency = obligation.principal.currency
        row.occurred_at = obligation.occurred_at
        row.notes = sale.notes
        write_audit(row, sale.audit, is_new)

        with translating_conflicts(f"save sale of unit #{sale.unit_id}"):
            self._session.flush()
        sale.id = row.id
        sale.version = row.version

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: SaleRow) -> Sale:
        debtor = DebtorRef.customer(row.customer_id) if row.customer_id is not None else None
        return Sale(
            id=row.id,
            unit_id=row.unit_id,
            customer_id=row.customer_id,
            payment_type=PaymentType(row.payment_type),
            obligation=Obligation(
                principal=money(row.principal, row.currency),
                amount_paid=money(row.amount_paid, row.currency),
                occurred_at=row.occurred_at,
                debtor=debtor,
            ),
            notes=row.notes,
            audit=audit_of(row),
            version=row.version,
        )
