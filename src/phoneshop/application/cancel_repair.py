"""Application service: Cancel Repair use case.

The unit's cost is untouched.  If this was the unit's last open job the
unit returns to IN_STOCK; otherwise it stays IN_REPAIR.
"""

from __future__ import annotations

from phoneshop.application.dto import RepairDTO
from phoneshop.application.views import load_repair
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class CancelRepairHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, job_id: int, note: str | None = None) -> RepairDTO:
        with self._uow:
            LifecycleService(self._uow).cancel_repair(job_id, note)
            self._uow.commit()

        with self._uow:
            return load_repair(self._uow, job_id)
