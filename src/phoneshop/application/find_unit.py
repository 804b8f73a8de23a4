"""Application service: Find Unit use case (query).

Looks a unit up by the barcode printed on its label or by its IMEI, the
two things a clerk can read off a phone on the counter.
"""

from __future__ import annotations

from phoneshop.application.dto import UnitDTO
from phoneshop.application.views import unit_to_dto
from phoneshop.domain.exceptions import EntityNotFoundError, ValidationError
from phoneshop.domain.service.barcode import is_valid_barcode
from phoneshop.domain.unit_of_work import UnitOfWork


class FindUnitHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, barcode: str | None = None, imei: str | None = None) -> UnitDTO:
        if (barcode is None) == (imei is None):
            raise ValidationError("Search by exactly one of barcode or IMEI")

        with self._uow:
            if barcode is not None:
                code = barcode.strip().upper()
                if not is_valid_barcode(code):
                    raise ValidationError(f"'{barcode}' is not a valid unit barcode")
                unit = self._uow.units.get_by_barcode(code)
                wanted = f"barcode {code}"
            else:
                unit = self._uow.units.get_by_imei(imei.strip())  # type: ignore[union-attr]
                wanted = f"IMEI {imei.strip()}"  # type: ignore[union-attr]

            if unit is None:
                raise EntityNotFoundError(f"No unit with {wanted}")
            return unit_to_dto(unit)
