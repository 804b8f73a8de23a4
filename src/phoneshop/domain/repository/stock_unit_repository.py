"""Abstract repository for the StockUnit aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from phoneshop.domain.model.stock_unit import LifecycleStatus, StockUnit


class StockUnitRepository(ABC):

    @abstractmethod
    def get_by_id(self, unit_id: int) -> StockUnit | None:
        """Return a live unit by its ID, or None if not found."""

    @abstractmethod
    def get_by_barcode(self, barcode: str) -> StockUnit | None:
        """Return the live unit carrying this barcode, or None."""

    @abstractmethod
    def get_by_imei(self, imei: str) -> StockUnit | None:
        """Return the live unit with this IMEI, or None."""

    @abstractmethod
    def list_all(self, status: LifecycleStatus | None = None) -> list[StockUnit]:
        """Return every live unit, optionally only those in *status*."""

    @abstractmethod
    def save(self, unit: StockUnit) -> None:
        """Persist a new or updated unit, assigning its ID."""
