"""Application service: Show Unit use case (query).

The full history of one unit: where it stands, what it cost, every
repair, and its sale with the profit made.
"""

from __future__ import annotations

from phoneshop.application.dto import UnitHistoryDTO
from phoneshop.application.views import load_unit, repair_to_dto, sale_to_dto, unit_to_dto
from phoneshop.domain.service.projections import profit
from phoneshop.domain.unit_of_work import UnitOfWork


class ShowUnitHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, unit_id: int) -> UnitHistoryDTO:
        with self._uow:
            unit = load_unit(self._uow, unit_id)
            jobs = self._uow.repairs.list_for_unit(unit_id)
            sale = self._uow.sales.get_by_unit_id(unit_id)

            return UnitHistoryDTO(
                unit=unit_to_dto(unit),
                repairs=[repair_to_dto(job, unit) for job in jobs],
                sale=sale_to_dto(sale, unit) if sale is not None else None,
                profit=f"{profit(sale, unit):.2f}" if sale is not None else None,
            )
