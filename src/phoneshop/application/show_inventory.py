"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from phoneshop.application.dto import InventoryDTO
from phoneshop.application.views import unit_to_dto
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.stock_unit import LifecycleStatus
from phoneshop.domain.service.projections import status_counts
from phoneshop.domain.unit_of_work import UnitOfWork


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, status: str | None = None, available_only: bool = False) -> InventoryDTO:
        """List units, optionally filtered, with counts for the whole stock."""
        wanted: LifecycleStatus | None = None
        if status is not None:
            try:
                wanted = LifecycleStatus(status.upper())
            except ValueError:
                raise ValidationError(f"Unknown unit status '{status}'")

        with self._uow:
            units = self._uow.units.list_all()

        listed = [
            unit
            for unit in units
            if (wanted is None or unit.status == wanted)
            and (not available_only or unit.is_available)
        ]
        return InventoryDTO(
            units=[unit_to_dto(unit) for unit in listed],
            by_status={s.value: n for s, n in status_counts(units).items()},
        )
