"""Abstract unit of work: the atomic boundary of one business event.

Application handlers open a unit of work, load and mutate aggregates
through its repositories, and call ``commit()`` once everything is valid.
Leaving the ``with`` block without a commit rolls every write back, so a
failed guard never leaves a partial change behind.

Domain services receive the unit of work explicitly; it is the only way
they can reach storage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from phoneshop.domain.model.value_objects import DebtorKind
from phoneshop.domain.repository.obligation_repository import (
    ObligationRepository,
    PurchaseRepository,
    SaleRepository,
)
from phoneshop.domain.repository.party_repository import PartyRepository
from phoneshop.domain.repository.repair_job_repository import RepairJobRepository
from phoneshop.domain.repository.settlement_repository import SettlementRepository
from phoneshop.domain.repository.stock_unit_repository import StockUnitRepository


class UnitOfWork(ABC):

    parties: PartyRepository
    units: StockUnitRepository
    repairs: RepairJobRepository
    sales: SaleRepository
    purchases: PurchaseRepository
    settlements: SettlementRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, *args) -> None:
        self.rollback()

    def obligations(self, kind: DebtorKind) -> ObligationRepository:
        """Repository of the obligations a debtor of *kind* can owe."""
        if kind is DebtorKind.CUSTOMER:
            return self.sales
        return self.purchases

    @abstractmethod
    def commit(self) -> None:
        """Make every write since the unit of work began durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted write (no-op after a commit)."""
