"""Abstract repository for Settlement records (append-only)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from phoneshop.domain.model.settlement import Settlement
from phoneshop.domain.model.value_objects import DebtorRef


class SettlementRepository(ABC):

    @abstractmethod
    def add(self, settlement: Settlement) -> Settlement:
        """Persist a new settlement and return it with its ID assigned."""

    @abstractmethod
    def list_for_debtor(self, debtor: DebtorRef) -> list[Settlement]:
        """Return the debtor's settlements, oldest first."""
