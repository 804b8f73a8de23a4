"""SQLAlchemy implementation of StockUnitRepository.

Removed units keep their row (``deleted_at`` is set) and are hidden
from every query.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.model.stock_unit import Condition, LifecycleStatus, StockUnit
from phoneshop.domain.repository.stock_unit_repository import StockUnitRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import (
    audit_of,
    load_for_write,
    money,
    write_audit,
)
from phoneshop.infrastructure.persistence.tables import StockUnitRow


class SqlStockUnitRepository(StockUnitRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- StockUnitRepository interface ----------------------------------------

    def get_by_id(self, unit_id: int) -> StockUnit | None:
        row = self._session.get(StockUnitRow, unit_id)
        if row is None or row.deleted_at is not None:
            return None
        return self._to_domain(row)

    def get_by_barcode(self, barcode: str) -> StockUnit | None:
        row = self._session.scalars(
            select(StockUnitRow).where(
                StockUnitRow.barcode == barcode, StockUnitRow.deleted_at.is_(None)
            )
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def get_by_imei(self, imei: str) -> StockUnit | None:
        row = self._session.scalars(
            select(StockUnitRow)
            .where(StockUnitRow.imei == imei, StockUnitRow.deleted_at.is_(None))
            .limit(1)
        ).first()
        return self._to_domain(row) if row is not None else None

    def list_all(self, status: LifecycleStatus | None = None) -> list[StockUnit]:
        stmt = select(StockUnitRow).where(StockUnitRow.deleted_at.is_(None))
        if status is not None:
            stmt = stmt.where(StockUnitRow.status == status.value)
        rows = self._session.scalars(stmt.order_by(StockUnitRow.id))
        return [self._to_domain(row) for row in rows]

    def save(self, unit: StockUnit) -> None:
        is_new = unit.id is None
        if is_new:
            row = StockUnitRow()
            self._session.add(row)
        else:
            row = load_for_write(self._session, StockUnitRow, unit, f"Unit #{unit.id}")
        self._apply(row, unit, is_new)
        with translating_conflicts(f"save unit #{unit.id or 'new'}"):
            self._session.flush()
        unit.id = row.id
        unit.version = row.version

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _apply(row: StockUnitRow, unit: StockUnit, is_new: bool) -> None:
        row.purchase_id = unit.purchase_id
        row.barcode = unit.barcode
        row.brand = unit.brand
        row.model = unit.model
        row.imei = unit.imei
        row.color = unit.color
        row.condition = unit.condition.value
        row.status = unit.status.value
        row.acquisition_cost = unit.acquisition_cost.amount
        row.accumulated_cost = unit.accumulated_cost.amount
        row.currency = unit.acquisition_cost.currency
        row.notes = unit.notes
        write_audit(row, unit.audit, is_new)

    @staticmethod
    def _to_domain(row: StockUnitRow) -> StockUnit:
        return StockUnit(
            id=row.id,
            purchase_id=row.purchase_id,
            brand=row.brand,
            model=row.model,
            acquisition_cost=money(row.acquisition_cost, row.currency),
            accumulated_cost=money(row.accumulated_cost, row.currency),
            barcode=row.barcode,
            condition=Condition(row.condition),
            imei=row.imei,
            color=row.color,
            notes=row.notes,
            status=LifecycleStatus(row.status),
            audit=audit_of(row),
            version=row.version,
        )
