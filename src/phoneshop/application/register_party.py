"""Application service: Register Customer / Supplier use case."""

from __future__ import annotations

from phoneshop.application.dto import PartyDTO
from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.party import Party
from phoneshop.domain.model.value_objects import DebtorKind
from phoneshop.domain.unit_of_work import UnitOfWork


class RegisterPartyHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, kind: str, name: str, phone: str | None = None) -> PartyDTO:
        try:
            party_kind = DebtorKind(kind.upper())
        except ValueError:
            raise ValidationError(f"Unknown party kind '{kind}'")

        with self._uow:
            party = Party.register(party_kind, name, phone)
            self._uow.parties.save(party)
            self._uow.commit()

        return PartyDTO(
            id=party.id,  # type: ignore[arg-type]
            kind=party.kind.value,
            name=party.name,
            phone=party.phone,
        )
