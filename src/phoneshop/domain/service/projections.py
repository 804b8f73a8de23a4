"""Read-side values derived from stored state.

Nothing here is persisted: profit and balances are recomputed from the
entities every time so they can never drift from the data they summarize.
"""

from __future__ import annotations

from decimal import Decimal

from phoneshop.domain.exceptions import ValidationError
from phoneshop.domain.model.obligation import Obligation
from phoneshop.domain.model.sale import Sale
from phoneshop.domain.model.stock_unit import LifecycleStatus, StockUnit
from phoneshop.domain.model.value_objects import Money, total


def profit(sale: Sale, unit: StockUnit) -> Decimal:
    """Sale price minus the unit's accumulated cost (negative on a loss)."""
    if sale.unit_id != unit.id:
        raise ValidationError(f"Sale #{sale.id} is not for unit #{unit.id}")
    return sale.sale_price.amount - unit.accumulated_cost.amount


def outstanding_balance(obligations: list[Obligation], currency: str) -> Money:
    return total([o.outstanding for o in obligations if o.is_open], currency)


def status_counts(units: list[StockUnit]) -> dict[LifecycleStatus, int]:
    counts = {status: 0 for status in LifecycleStatus}
    for unit in units:
        counts[unit.status] += 1
    return counts
