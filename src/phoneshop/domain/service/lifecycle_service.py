"""Domain service: stock unit lifecycle.

Coordinates the events that move a unit between statuses and touch more
than one aggregate: opening, completing and cancelling repair jobs, and
selling.  Every method validates first and only then mutates and saves
through the unit of work, so a rejected event leaves nothing half-done.

    IN_STOCK ──repair──> IN_REPAIR ──complete──> READY_FOR_SALE ──sale──> SOLD
        ^                    │                         │
        └──cancel (last)─────┘                         └──repair──> IN_REPAIR
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.domain.exceptions import (
    EntityNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from phoneshop.domain.model.repair_job import RepairJob, RepairStatus
from phoneshop.domain.model.sale import PaymentType, Sale
from phoneshop.domain.model.stock_unit import LifecycleStatus, StockUnit
from phoneshop.domain.model.value_objects import DebtorRef, Money
from phoneshop.domain.service import cost_accumulator
from phoneshop.domain.unit_of_work import UnitOfWork
from phoneshop.logging_config import get_logger

logger = get_logger("domain.lifecycle")


class LifecycleService:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    # --- Repairs --------------------------------------------------------------

    def start_repair(
        self,
        unit_id: int,
        description: str,
        cost: Money,
        status: RepairStatus = RepairStatus.PENDING,
        started_at: datetime | None = None,
    ) -> RepairJob:
        """Open a repair job and put the unit IN_REPAIR."""
        unit = self._get_unit(unit_id)
        job = RepairJob.open(unit.id, description, cost, status, started_at)  # type: ignore[arg-type]

        unit.enter_repair()
        self._uow.repairs.save(job)
        self._uow.units.save(unit)

        logger.info(
            "repair_started",
            extra={"unit_id": unit.id, "job_id": job.id, "cost": str(cost.amount)},
        )
        return job

    def begin_repair(self, job_id: int) -> RepairJob:
        job = self._get_job(job_id)
        job.begin()
        self._uow.repairs.save(job)
        return job

    def complete_repair(self, job_id: int, note: str | None = None) -> RepairJob:
        """Close a job as COMPLETED and charge its cost to the unit.

        The unit becomes READY_FOR_SALE unless another job is still open
        on it, in which case it stays IN_REPAIR.
        """
        job = self._get_job(job_id)
        unit = self._get_unit(job.unit_id)

        # Phase 1: validate
        if not job.is_active:
            raise InvalidTransitionError(
                f"Repair #{job.id} is already {job.status.value}"
            )
        unit.ensure_in_repair()
        others_open = self._other_jobs_active(unit, job)

        # Phase 2: mutate and persist
        job.complete(note)
        cost_accumulator.accrue(unit, job)
        unit.finish_repair(other_jobs_active=others_open)
        self._uow.repairs.save(job)
        self._uow.units.save(unit)

        logger.info(
            "repair_completed",
            extra={
                "unit_id": unit.id,
                "job_id": job.id,
                "accumulated_cost": str(unit.accumulated_cost.amount),
                "unit_status": unit.status.value,
            },
        )
        return job

    def cancel_repair(self, job_id: int, note: str | None = None) -> RepairJob:
        """Close a job as CANCELLED.  The unit's cost never changes; it goes
        back to IN_STOCK only when no other job is open on it.
        """
        job = self._get_job(job_id)
        unit = self._get_unit(job.unit_id)

        if not job.is_active:
            raise InvalidTransitionError(
                f"Repair #{job.id} is already {job.status.value}"
            )
        others_open = self._other_jobs_active(unit, job)

        job.cancel(note)
        unit.abandon_repair(other_jobs_active=others_open)
        self._uow.repairs.save(job)
        self._uow.units.save(unit)

        logger.info(
            "repair_cancelled",
            extra={"unit_id": unit.id, "job_id": job.id, "unit_status": unit.status.value},
        )
        return job

    # --- Sales ----------------------------------------------------------------

    def sell(
        self,
        unit_id: int,
        sale_price: Money,
        payment_type: PaymentType,
        customer_id: int | None = None,
        paid_amount: Money | None = None,
        occurred_at: datetime | None = None,
        notes: str | None = None,
    ) -> Sale:
        """Create the sale of a unit together with the debt it opens."""
        unit = self._get_unit(unit_id)

        if unit.status == LifecycleStatus.SOLD or self._uow.sales.get_by_unit_id(unit_id):
            raise InvalidTransitionError(f"Unit #{unit_id} has already been sold")
        if unit.status == LifecycleStatus.IN_REPAIR:
            raise InvalidTransitionError(
                f"Cannot sell unit #{unit_id} while it is in repair"
            )

        if customer_id is not None:
            if self._uow.parties.get(DebtorRef.customer(customer_id)) is None:
                raise EntityNotFoundError(f"Customer #{customer_id} not found")
        elif payment_type == PaymentType.PAY_LATER:
            raise ValidationError("Customer is required for PAY_LATER sales")

        sale = Sale.create(
            unit_id=unit_id,
            sale_price=sale_price,
            payment_type=payment_type,
            customer_id=customer_id,
            paid_amount=paid_amount,
            occurred_at=occurred_at,
            notes=notes,
        )
        unit.sell()
        self._uow.sales.save(sale)
        self._uow.units.save(unit)

        logger.info(
            "unit_sold",
            extra={
                "unit_id": unit.id,
                "sale_id": sale.id,
                "sale_price": str(sale_price.amount),
                "payment_state": sale.obligation.payment_state.value,
            },
        )
        return sale

    # --- Manual edits ---------------------------------------------------------

    def change_status(self, unit_id: int, status: LifecycleStatus) -> StockUnit:
        unit = self._get_unit(unit_id)
        jobs = self._uow.repairs.list_for_unit(unit_id)
        has_active = any(job.is_active for job in jobs)

        unit.change_status(status, has_active_repairs=has_active)
        if status == LifecycleStatus.IN_REPAIR and not has_active:
            logger.warning(
                "unit_in_repair_without_job",
                extra={"unit_id": unit_id},
            )
        self._uow.units.save(unit)
        return unit

    def remove(self, unit_id: int) -> None:
        """Soft-delete a unit that was never repaired or sold."""
        unit = self._get_unit(unit_id)
        has_repairs = bool(self._uow.repairs.list_for_unit(unit_id))
        has_sale = self._uow.sales.get_by_unit_id(unit_id) is not None

        unit.ensure_removable(has_repairs=has_repairs, has_sale=has_sale)
        unit.remove()
        self._uow.units.save(unit)
        logger.info("unit_removed", extra={"unit_id": unit_id})

    # --- Internal helpers -----------------------------------------------------

    def _get_unit(self, unit_id: int) -> StockUnit:
        unit = self._uow.units.get_by_id(unit_id)
        if unit is None:
            raise EntityNotFoundError(f"Unit #{unit_id} not found")
        return unit

    def _get_job(self, job_id: int) -> RepairJob:
        job = self._uow.repairs.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundError(f"Repair #{job_id} not found")
        return job

    def _other_jobs_active(self, unit: StockUnit, job: RepairJob) -> bool:
        return any(
            other.is_active and other.id != job.id
            for other in self._uow.repairs.list_for_unit(unit.id)  # type: ignore[arg-type]
        )
