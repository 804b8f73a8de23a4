"""RepairJob entity: work done on one stock unit at a fixed cost."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from phoneshop.domain.exceptions import InvalidTransitionError, ValidationError
from phoneshop.domain.model.value_objects import AuditFields, Money, utcnow


class RepairStatus(Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


ACTIVE_REPAIR_STATUSES = frozenset({RepairStatus.PENDING, RepairStatus.IN_PROGRESS})


@dataclass
class RepairJob:
    """A repair on a unit.  Only moves forward; COMPLETED and CANCELLED
    are final, which is what keeps a job's cost from being added twice.
    """

    id: int | None
    unit_id: int
    description: str
    cost: Money
    status: RepairStatus = RepairStatus.PENDING
    started_at: datetime = field(default_factory=utcnow)
    completed_at: datetime | None = None
    notes: str | None = None
    audit: AuditFields = field(default_factory=AuditFields)
    version: int | None = None

    @staticmethod
    def open(
        unit_id: int,
        description: str,
        cost: Money,
        status: RepairStatus = RepairStatus.PENDING,
        started_at: datetime | None = None,
    ) -> RepairJob:
        if not description or not description.strip():
            raise ValidationError("Repair description is required")
        if cost.is_zero:
            raise ValidationError("Repair cost must be greater than zero")
        if status not in ACTIVE_REPAIR_STATUSES:
            raise ValidationError(
                f"A new repair must be PENDING or IN_PROGRESS, got {status.value}"
            )
        return RepairJob(
            id=None,
            unit_id=unit_id,
            description=description.strip(),
            cost=cost,
            status=status,
            started_at=started_at or utcnow(),
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_REPAIR_STATUSES

    def begin(self) -> None:
        """PENDING -> IN_PROGRESS."""
        if self.status != RepairStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot start work on repair #{self.id} — status is {self.status.value}"
            )
        self.status = RepairStatus.IN_PROGRESS
        self.audit = self.audit.touched()

    def complete(self, note: str | None = None, at: datetime | None = None) -> None:
        self._close(RepairStatus.COMPLETED, note, at)

    def cancel(self, note: str | None = None, at: datetime | None = None) -> None:
        self._close(RepairStatus.CANCELLED, note, at)

    def _close(self, status: RepairStatus, note: str | None, at: datetime | None) -> None:
        if not self.is_active:
            raise InvalidTransitionError(
                f"Repair #{self.id} is already {self.status.value}"
            )
        self.status = status
        self.completed_at = at or utcnow()
        if note:
            self.notes = note
        self.audit = self.audit.touched(self.completed_at)
