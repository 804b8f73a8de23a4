"""Application service: Begin Repair use case (PENDING -> IN_PROGRESS)."""

from __future__ import annotations

from phoneshop.application.dto import RepairDTO
from phoneshop.application.views import load_repair
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class BeginRepairHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, job_id: int) -> RepairDTO:
        with self._uow:
            LifecycleService(self._uow).begin_repair(job_id)
            self._uow.commit()

        with self._uow:
            return load_repair(self._uow, job_id)
