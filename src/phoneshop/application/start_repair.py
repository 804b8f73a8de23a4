"""Application service: Start Repair use case.

Opens a repair job on a unit and moves the unit IN_REPAIR in the same
unit of work.  Sold units cannot be repaired.
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.application.dto import RepairDTO
from phoneshop.application.views import load_repair
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.repair_job import RepairStatus
from phoneshop.domain.model.value_objects import DEFAULT_CURRENCY, Money
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class StartRepairHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(
        self,
        unit_id: int,
        cost: str,
        description: str,
        status: str = "PENDING",
        started_at: datetime | None = None,
    ) -> RepairDTO:
        try:
            initial = RepairStatus(status.upper())
        except ValueError:
            raise ValidationError(f"Unknown repair status '{status}'")

        with self._uow:
            job = LifecycleService(self._uow).start_repair(
                unit_id=unit_id,
                description=description,
                cost=Money.of(cost, self._currency),
                status=initial,
                started_at=started_at,
            )
            self._uow.commit()

        with self._uow:
            return load_repair(self._uow, job.id)  # type: ignore[arg-type]
