"""Abstract repository for customers and suppliers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from phoneshop.domain.model.party import Party
from phoneshop.domain.model.value_objects import DebtorRef


class PartyRepository(ABC):

    @abstractmethod
    def get(self, ref: DebtorRef, for_update: bool = False) -> Party | None:
        """Return an active customer or supplier, or None.

        With ``for_update`` the store must hold a write lock on the party
        until the unit of work ends; allocations for one debtor are
        serialized on it.
        """

    @abstractmethod
    def save(self, party: Party) -> None:
        """Persist a new or updated party, assigning its ID."""
