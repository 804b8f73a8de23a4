"""Application service: Complete Repair use case.

Closes the job and charges its cost to the unit in one unit of work:
the job becomes COMPLETED, the unit's accumulated cost grows by the job's
cost and the unit becomes READY_FOR_SALE (unless another job is open).
"""

from __future__ import annotations

from phoneshop.application.dto import RepairDTO
from phoneshop.application.views import load_repair
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class CompleteRepairHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, job_id: int, completion_note: str | None = None) -> RepairDTO:
        with self._uow:
            LifecycleService(self._uow).complete_repair(job_id, completion_note)
            self._uow.commit()

        with self._uow:
            return load_repair(self._uow, job_id)
