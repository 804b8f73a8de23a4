"""Application service: Remove Unit use case (soft delete)."""

from __future__ import annotations

from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class RemoveUnitHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, unit_id: int) -> None:
        """Remove a unit entered by mistake; units with history stay."""
        with self._uow:
            LifecycleService(self._uow).remove(unit_id)
            self._uow.commit()
