"""Reload-and-map helpers shared by the handlers.

Every command handler commits its unit of work and then reloads the
aggregate it changed through these functions, so the caller always sees
what was actually stored.
"""

from __future__ import annotations

from datetime import datetime

from phoneshop.application.dto import (
    ObligationLineDTO,
    PurchaseDTO,
    RepairDTO,
    SaleDTO,
    UnitDTO,
)
from phoneshop.domain.exceptions import EntityNotFoundError
from phoneshop.domain.model.repair_job import RepairJob
from phoneshop.domain.model.sale import Sale
from phoneshop.domain.model.stock_unit import StockUnit
from phoneshop.domain.repository.obligation_repository import ObligationHolder
from phoneshop.domain.service.projections import profit
from phoneshop.domain.unit_of_work import UnitOfWork

_TS_FORMAT = "%Y-%m-%d %H:%M UTC"


def fmt_ts(ts: datetime | None) -> str | None:
    return ts.strftime(_TS_FORMAT) if ts is not None else None


# --- Mapping ------------------------------------------------------------------


def unit_to_dto(unit: StockUnit) -> UnitDTO:
    return UnitDTO(
        id=unit.id,  # type: ignore[arg-type]
        purchase_id=unit.purchase_id,
        barcode=unit.barcode,
        brand=unit.brand,
        model=unit.model,
        imei=unit.imei,
        condition=unit.condition.value,
        status=unit.status.value,
        acquisition_cost=str(unit.acquisition_cost),
        accumulated_cost=str(unit.accumulated_cost),
    )


def repair_to_dto(job: RepairJob, unit: StockUnit) -> RepairDTO:
    return RepairDTO(
        id=job.id,  # type: ignore[arg-type]
        unit_id=job.unit_id,
        description=job.description,
        cost=str(job.cost),
        status=job.status.value,
        started_at=fmt_ts(job.started_at),  # type: ignore[arg-type]
        completed_at=fmt_ts(job.completed_at),
        notes=job.notes,
        unit=unit_to_dto(unit),
    )


def sale_to_dto(sale: Sale, unit: StockUnit) -> SaleDTO:
    obligation = sale.obligation
    return SaleDTO(
        id=sale.id,  # type: ignore[arg-type]
        unit_id=sale.unit_id,
        customer_id=sale.customer_id,
        payment_type=sale.payment_type.value,
        sale_price=str(sale.sale_price),
        paid_amount=str(obligation.amount_paid),
        remaining=str(obligation.outstanding),
        payment_state=obligation.payment_state.value,
        profit=f"{profit(sale, unit):.2f}",
        sold_at=fmt_ts(obligation.occurred_at),  # type: ignore[arg-type]
        unit=unit_to_dto(unit),
    )


def obligation_line(holder: ObligationHolder) -> ObligationLineDTO:
    obligation = holder.obligation
    return ObligationLineDTO(
        id=holder.id,  # type: ignore[arg-type]
        occurred_at=fmt_ts(obligation.occurred_at),  # type: ignore[arg-type]
        principal=str(obligation.principal),
        paid_amount=str(obligation.amount_paid),
        outstanding=str(obligation.outstanding),
        payment_state=obligation.payment_state.value,
    )


# --- Reloading ----------------------------------------------------------------


def load_unit(uow: UnitOfWork, unit_id: int) -> StockUnit:
    unit = uow.units.get_by_id(unit_id)
    if unit is None:
        raise EntityNotFoundError(f"Unit #{unit_id} not found")
    return unit


def load_repair(uow: UnitOfWork, job_id: int) -> RepairDTO:
    job = uow.repairs.get_by_id(job_id)
    if job is None:
        raise EntityNotFoundError(f"Repair #{job_id} not found")
    return repair_to_dto(job, load_unit(uow, job.unit_id))


def load_sale(uow: UnitOfWork, sale_id: int) -> SaleDTO:
    sale = uow.sales.get_by_id(sale_id)
    if sale is None:
        raise EntityNotFoundError(f"Sale #{sale_id} not found")
    return sale_to_dto(sale, load_unit(uow, sale.unit_id))


def load_purchase(uow: UnitOfWork, purchase_id: int) -> PurchaseDTO:
    purchase = uow.purchases.get_by_id(purchase_id)
    if purchase is None:
        raise EntityNotFoundError(f"Purchase #{purchase_id} not found")
    obligation = purchase.obligation
    # removed units stay on the purchase but are no longer visible
    units = [uow.units.get_by_id(uid) for uid in purchase.unit_ids]
    return PurchaseDTO(
        id=purchase.id,  # type: ignore[arg-type]
        supplier_id=purchase.supplier_id,
        total=str(purchase.total_amount),
        paid_amount=str(obligation.amount_paid),
        payment_state=obligation.payment_state.value,
        purchased_at=fmt_ts(obligation.occurred_at),  # type: ignore[arg-type]
        units=[unit_to_dto(unit) for unit in units if unit is not None],
    )
