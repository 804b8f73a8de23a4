"""Abstract repositories for the two kinds of obligation holder.

Sales are owed by customers and purchases by the shop to suppliers.  The
settlement engine only needs the shared ``list_open``/``save`` contract,
so it can allocate against either kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from phoneshop.domain.model.purchase import Purchase
from phoneshop.domain.model.sale import Sale

ObligationHolder = Union[Sale, Purchase]


class ObligationRepository(ABC):

    @abstractmethod
    def list_open(self, debtor_id: int, lock: bool = False) -> list[ObligationHolder]:
        """Return the debtor's UNPAID/PARTIAL holders, oldest first.

        Ordered by ``occurred_at`` ascending, ties broken by ID.  With
        *lock*, stores that support row locking hold the returned rows
        until the unit of work ends; plain reads leave them unlocked.
        """

    @abstractmethod
    def list_for_debtor(self, debtor_id: int) -> list[ObligationHolder]:
        """Return every holder owed by the debtor, oldest first."""

    @abstractmethod
    def save(self, holder: ObligationHolder) -> None:
        """Persist a new or updated holder, assigning its ID."""


class SaleRepository(ObligationRepository):

    @abstractmethod
    def get_by_id(self, sale_id: int) -> Sale | None:
        """Return a sale by its ID, or None if not found."""

    @abstractmethod
    def get_by_unit_id(self, unit_id: int) -> Sale | None:
        """Return the live sale of a unit, or None if it was never sold."""


class PurchaseRepository(ObligationRepository):

    @abstractmethod
    def get_by_id(self, purchase_id: int) -> Purchase | None:
        """Return a purchase by its ID, or None if not found."""
