"""Small helpers shared by the row <-> domain mappings."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from phoneshop.domain.exceptions import ConcurrencyConflictError, EntityNotFoundError
from phoneshop.domain.model.value_objects import AuditFields, Money, utcnow
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.logging_config import get_logger

logger = get_logger("persistence.mapping")


def money(amount: Decimal, currency: str) -> Money:
    return Money(Decimal(amount), currency)


def audit_of(row) -> AuditFields:
    return AuditFields(
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def write_audit(row, audit: AuditFields, is_new: bool) -> None:
    if is_new:
        row.created_at = audit.created_at
        row.updated_at = audit.updated_at
    else:
        row.updated_at = max(audit.updated_at, utcnow())
    row.deleted_at = audit.deleted_at


def load_for_write(session: Session, row_cls, entity, label: str):
    """Re-read the stored row behind *entity* before it is overwritten.

    The row is always fetched from the database, not the session's
    identity map, and its version must still be the one the entity was
    loaded at.  Otherwise another transaction committed in between and
    writing now would silently discard its change.
    """
    with translating_conflicts(f"load {label}"):
        row = session.get(row_cls, entity.id, populate_existing=True)
    if row is None:
        raise EntityNotFoundError(f"{label} not found")
    if entity.version is not None and row.version != entity.version:
        logger.warning(
            "stale_entity",
            extra={"entity": label, "loaded": entity.version, "stored": row.version},
        )
        raise ConcurrencyConflictError(
            f"Could not save {label}: the record was changed by another transaction"
        )
    return row
