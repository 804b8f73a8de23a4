"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Money is carried
pre-formatted (e.g. "$950.00").
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UnitSpec:
    """Input: one phone on a purchase."""

    brand: str
    model: str
    acquisition_cost: str
    condition: str = "NEW"
    imei: str | None = None
    color: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PartyDTO:
    id: int
    kind: str
    name: str
    phone: str | None


@dataclass(frozen=True)
class UnitDTO:
    id: int
    purchase_id: int | None
    barcode: str
    brand: str
    model: str
    imei: str | None
    condition: str
    status: str
    acquisition_cost: str
    accumulated_cost: str


@dataclass(frozen=True)
class RepairDTO:
    id: int
    unit_id: int
    description: str
    cost: str
    status: str
    started_at: str
    completed_at: str | None
    notes: str | None
    unit: UnitDTO


@dataclass(frozen=True)
class SaleDTO:
    id: int
    unit_id: int
    customer_id: int | None
    payment_type: str
    sale_price: str
    paid_amount: str
    remaining: str
    payment_state: str
    profit: str
    sold_at: str
    unit: UnitDTO


@dataclass(frozen=True)
class PurchaseDTO:
    id: int
    supplier_id: int
    total: str
    paid_amount: str
    payment_state: str
    purchased_at: str
    units: list[UnitDTO]


@dataclass(frozen=True)
class ObligationLineDTO:
    """Output: one sale or purchase as it stands against its debtor."""

    id: int
    occurred_at: str
    principal: str
    paid_amount: str
    outstanding: str
    payment_state: str


@dataclass(frozen=True)
class AppliedDTO:
    holder_id: int
    applied: str
    paid_amount: str
    payment_state: str


@dataclass(frozen=True)
class SettlementDTO:
    id: int
    debtor: str
    amount: str
    method: str
    occurred_at: str
    applied: list[AppliedDTO]


@dataclass(frozen=True)
class BalanceDTO:
    debtor: str
    name: str
    outstanding: str
    obligations: list[ObligationLineDTO]


@dataclass(frozen=True)
class PaymentRecordDTO:
    """Output: one recorded payment and how it was split."""

    id: int
    amount: str
    method: str
    occurred_at: str
    notes: str | None
    allocations: list[tuple[int, str]]


@dataclass(frozen=True)
class PaymentHistoryDTO:
    debtor: str
    name: str
    total_paid: str
    outstanding: str
    payments: list[PaymentRecordDTO]
    obligations: list[ObligationLineDTO]


@dataclass(frozen=True)
class UnitHistoryDTO:
    unit: UnitDTO
    repairs: list[RepairDTO]
    sale: SaleDTO | None
    profit: str | None


@dataclass(frozen=True)
class InventoryDTO:
    units: list[UnitDTO]
    by_status: dict[str, int] = field(default_factory=dict)

    @property
    def available(self) -> int:
        return self.by_status.get("IN_STOCK", 0) + self.by_status.get("READY_FOR_SALE", 0)
