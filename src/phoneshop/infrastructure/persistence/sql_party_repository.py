"""SQLAlchemy implementation of PartyRepository.

Customers and suppliers live in separate tables; the DebtorRef kind
picks the table.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.exceptions import EntityNotFoundError
from phoneshop.domain.model.party import Party
from phoneshop.domain.model.value_objects import DebtorKind, DebtorRef
from phoneshop.domain.repository.party_repository import PartyRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import audit_of, write_audit
from phoneshop.infrastructure.persistence.tables import CustomerRow, SupplierRow

_ROWS = {
    DebtorKind.CUSTOMER: CustomerRow,
    DebtorKind.SUPPLIER: SupplierRow,
}


class SqlPartyRepository(PartyRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, ref: DebtorRef, for_update: bool = False) -> Party | None:
        row_type = _ROWS[ref.kind]
        stmt = select(row_type).where(
            row_type.id == ref.id,
            row_type.is_active.is_(True),
            row_type.deleted_at.is_(None),
        )
        if for_update:
            # SQLite ignores FOR UPDATE; its writer lock serializes instead
            stmt = stmt.with_for_update()
        with translating_conflicts(f"lock {ref}"):
            row = self._session.scalars(stmt).one_or_none()
        return self._to_domain(ref.kind, row) if row is not None else None

    def save(self, party: Party) -> None:
        row_type = _ROWS[party.kind]
        is_new = party.id is None
        if is_new:
            row = row_type()
            self._session.add(row)
        else:
            row = self._session.get(row_type, party.id)
            if row is None:
                raise EntityNotFoundError(f"{party.kind.value.title()} #{party.id} not found")
        row.name = party.name
        row.phone = party.phone
        row.is_active = party.is_active
        write_audit(row, party.audit, is_new)
        with translating_conflicts(f"save {party.kind.value.lower()}"):
            self._session.flush()
        party.id = row.id

    @staticmethod
    def _to_domain(kind: DebtorKind, row) -> Party:
        return Party(
            id=row.id,
            kind=kind,
            name=row.name,
            phone=row.phone,
            is_active=row.is_active,
            audit=audit_of(row),
        )
