"""Cost accumulation for stock units.

A unit's total cost is its purchase price plus the cost of every repair
completed on it.  The total is maintained incrementally (``accrue`` runs
once per completed job); ``accumulated_cost`` recomputes it from scratch
for read-side checks.
"""

from __future__ import annotations

from phoneshop.domain.exceptions import InvalidTransitionError
from phoneshop.domain.model.repair_job import RepairJob, RepairStatus
from phoneshop.domain.model.stock_unit import StockUnit
from phoneshop.domain.model.value_objects import Money, total


def accumulated_cost(unit: StockUnit, jobs: list[RepairJob]) -> Money:
    """Acquisition cost plus the cost of the unit's COMPLETED repairs."""
    completed = [
        job.cost
        for job in jobs
        if job.unit_id == unit.id and job.status is RepairStatus.COMPLETED
    ]
    return unit.acquisition_cost + total(completed, unit.acquisition_cost.currency)


def accrue(unit: StockUnit, job: RepairJob) -> None:
    """Add a just-completed job's cost to the unit's accumulated cost."""
    if job.unit_id != unit.id:
        raise InvalidTransitionError(
            f"Repair #{job.id} belongs to unit #{job.unit_id}, not #{unit.id}"
        )
    if job.status is not RepairStatus.COMPLETED:
        raise InvalidTransitionError(
            f"Only a completed repair adds cost (repair #{job.id} is {job.status.value})"
        )
    unit.accumulated_cost = unit.accumulated_cost + job.cost


def is_consistent(unit: StockUnit, jobs: list[RepairJob]) -> bool:
    """True when the stored accumulated cost matches a full recomputation."""
    return unit.accumulated_cost == accumulated_cost(unit, jobs)
