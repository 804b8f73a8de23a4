"""StockUnit aggregate: one purchased phone and its lifecycle.

A unit enters the shop IN_STOCK through a purchase, may go through any
number of repairs, and leaves as SOLD.  RETURNED is reached only through
the explicit return flow.  Every status change goes through one of the
methods below so the guards cannot be bypassed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from phoneshop.domain.exceptions import InvalidTransitionError, ValidationError
from phoneshop.domain.model.value_objects import AuditFields, Money


class LifecycleStatus(Enum):
    IN_STOCK = "IN_STOCK"
    IN_REPAIR = "IN_REPAIR"
    READY_FOR_SALE = "READY_FOR_SALE"
    SOLD = "SOLD"
    RETURNED = "RETURNED"


class Condition(Enum):
    NEW = "NEW"
    LIKE_NEW = "LIKE_NEW"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


SELLABLE = frozenset({LifecycleStatus.IN_STOCK, LifecycleStatus.READY_FOR_SALE})
REPAIRABLE = frozenset(
    {
        LifecycleStatus.IN_STOCK,
        LifecycleStatus.IN_REPAIR,
        LifecycleStatus.READY_FOR_SALE,
    }
)


@dataclass
class StockUnit:
    """Aggregate root for a single phone in stock.

    Invariants:
    - ``accumulated_cost`` is never below ``acquisition_cost`` and never
      decreases
    - ``status`` is SOLD exactly when a sale references the unit
    """

    id: int | None
    purchase_id: int | None
    brand: str
    model: str
    acquisition_cost: Money
    accumulated_cost: Money
    barcode: str
    condition: Condition = Condition.NEW
    imei: str | None = None
    color: str | None = None
    notes: str | None = None
    status: LifecycleStatus = LifecycleStatus.IN_STOCK
    audit: AuditFields = field(default_factory=AuditFields)
    # row version this copy was loaded at; None until first stored
    version: int | None = None

    # --- Factory (used for NEW units only) ------------------------------------

    @staticmethod
    def acquire(
        brand: str,
        model: str,
        acquisition_cost: Money,
        barcode: str,
        condition: Condition = Condition.NEW,
        imei: str | None = None,
        color: str | None = None,
        notes: str | None = None,
    ) -> StockUnit:
        """Create a freshly purchased unit, IN_STOCK at its purchase price."""
        if not brand or not brand.strip():
            raise ValidationError("Brand is required")
        if not model or not model.strip():
            raise ValidationError("Model is required")
        if acquisition_cost.is_zero:
            raise ValidationError("Acquisition cost must be greater than zero")
        return StockUnit(
            id=None,
            purchase_id=None,
            brand=brand.strip(),
            model=model.strip(),
            acquisition_cost=acquisition_cost,
            accumulated_cost=acquisition_cost,
            barcode=barcode,
            condition=condition,
            imei=imei.strip() if imei else None,
            color=color,
            notes=notes,
        )

    # --- State transitions ----------------------------------------------------

    def enter_repair(self) -> None:
        """Any new repair job puts the unit IN_REPAIR."""
        if self.status not in REPAIRABLE:
            raise InvalidTransitionError(
                f"Cannot repair unit #{self.id} — current status is {self.status.value}"
            )
        self._set_status(LifecycleStatus.IN_REPAIR)

    def ensure_in_repair(self) -> None:
        if self.status != LifecycleStatus.IN_REPAIR:
            raise InvalidTransitionError(
                f"Unit #{self.id} is not in repair (status {self.status.value})"
            )

    def finish_repair(self, other_jobs_active: bool) -> None:
        """The unit is ready for sale once no repair job is left open."""
        self.ensure_in_repair()
        if not other_jobs_active:
            self._set_status(LifecycleStatus.READY_FOR_SALE)

    def abandon_repair(self, other_jobs_active: bool) -> None:
        """A cancelled job returns the unit to stock if it was the last one."""
        if self.status == LifecycleStatus.IN_REPAIR and not other_jobs_active:
            self._set_status(LifecycleStatus.IN_STOCK)

    def sell(self) -> None:
        if self.status == LifecycleStatus.SOLD:
            raise InvalidTransitionError(f"Unit #{self.id} has already been sold")
        if self.status == LifecycleStatus.IN_REPAIR:
            raise InvalidTransitionError(
                f"Cannot sell unit #{self.id} while it is in repair"
            )
        if self.status not in SELLABLE:
            raise InvalidTransitionError(
                f"Cannot sell unit #{self.id} in {self.status.value} status"
            )
        self._set_status(LifecycleStatus.SOLD)

    def change_status(self, new_status: LifecycleStatus, has_active_repairs: bool) -> None:
        """Manual status edit, restricted so it cannot bypass the events above.

        - a SOLD unit can only be RETURNED
        - no unit can be set to SOLD (only a sale does that)
        - a unit with open repair jobs stays IN_REPAIR
        """
        if new_status == self.status:
            return
        if self.status == LifecycleStatus.SOLD and new_status != LifecycleStatus.RETURNED:
            raise InvalidTransitionError(
                "Cannot change status of sold unit. Use return flow if needed."
            )
        if new_status == LifecycleStatus.SOLD:
            raise InvalidTransitionError("Units are marked SOLD only by creating a sale")
        if self.status == LifecycleStatus.IN_REPAIR and has_active_repairs:
            raise InvalidTransitionError(
                f"Unit #{self.id} has open repair jobs; complete or cancel them first"
            )
        self._set_status(new_status)

    def ensure_removable(self, has_repairs: bool, has_sale: bool) -> None:
        if has_sale or self.status == LifecycleStatus.SOLD:
            raise InvalidTransitionError(f"Cannot remove unit #{self.id}: it has a sale")
        if has_repairs:
            raise InvalidTransitionError(
                f"Cannot remove unit #{self.id}: it has repair history"
            )

    def remove(self) -> None:
        self.audit = self.audit.deleted()

    # --- Computed properties --------------------------------------------------

    @property
    def repair_cost(self) -> Money:
        """Portion of the accumulated cost spent on completed repairs."""
        return self.accumulated_cost - self.acquisition_cost

    @property
    def is_available(self) -> bool:
        return self.status in SELLABLE

    # --- Internal helpers -----------------------------------------------------

    def _set_status(self, status: LifecycleStatus) -> None:
        self.status = status
        self.audit = self.audit.touched()
