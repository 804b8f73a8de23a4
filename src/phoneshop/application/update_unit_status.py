"""Application service: Update Unit Status use case (manual edit).

Only for corrections the events cannot express, such as the return of a
sold unit.  The StockUnit aggregate rejects edits that would bypass the
repair and sale events.
"""

from __future__ import annotations

from phoneshop.application.dto import UnitDTO
from phoneshop.application.views import load_unit, unit_to_dto
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.stock_unit import LifecycleStatus
from phoneshop.domain.service.lifecycle_service import LifecycleService
from phoneshop.domain.unit_of_work import UnitOfWork


class UpdateUnitStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, unit_id: int, status: str) -> UnitDTO:
        try:
            new_status = LifecycleStatus(status.upper())
        except ValueError:
            raise ValidationError(f"Unknown unit status '{status}'")

        with self._uow:
            LifecycleService(self._uow).change_status(unit_id, new_status)
            self._uow.commit()

        with self._uow:
            return unit_to_dto(load_unit(self._uow, unit_id))
