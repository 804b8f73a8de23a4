"""SQLAlchemy implementation of RepairJobRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from phoneshop.domain.model.repair_job import RepairJob, RepairStatus
from phoneshop.domain.repository.repair_job_repository import RepairJobRepository
from phoneshop.infrastructure.persistence.conflicts import translating_conflicts
from phoneshop.infrastructure.persistence.mapping import (
    audit_of,
    load_for_write,
    money,
    write_audit,
)
from phoneshop.infrastructure.persistence.tables import RepairJobRow


class SqlRepairJobRepository(RepairJobRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, job_id: int) -> RepairJob | None:
        row = self._session.get(RepairJobRow, job_id)
        if row is None or row.deleted_at is not None:
            return None
        return self._to_domain(row)

    def list_for_unit(self, unit_id: int) -> list[RepairJob]:
        rows = self._session.scalars(
            select(RepairJobRow)
            .where(RepairJobRow.unit_id == unit_id, RepairJobRow.deleted_at.is_(None))
            .order_by(RepairJobRow.started_at, RepairJobRow.id)
        )
        return [self._to_domain(row) for row in rows]

    def save(self, job: RepairJob) -> None:
        is_new = job.id is None
        if is_new:
            row = RepairJobRow()
            self._session.add(row)
        else:
            row = load_for_write(self._session, RepairJobRow, job, f"Repair #{job.id}")

        row.unit_id = job.unit_id
        row.description = job.description
        row.cost = job.cost.amount
        row.currency = job.cost.currency
        row.status = job.status.value
        row.started_at = job.started_at
        row.completed_at = job.completed_at
        row.notes = job.notes
        write_audit(row, job.audit, is_new)

        with translating_conflicts(f"save repair #{job.id or 'new'}"):
            self._session.flush()
        job.id = row.id
        job.version = row.version

    @staticmethod
    def _to_domain(row: RepairJobRow) -> RepairJob:
        return RepairJob(
            id=row.id,
            unit_id=row.unit_id,
            description=row.description,
            cost=money(row.cost, row.currency),
            status=RepairStatus(row.status),
            started_at=row.started_at,
            completed_at=row.completed_at,
            notes=row.notes,
            audit=audit_of(row),
            version=row.version,
        )
