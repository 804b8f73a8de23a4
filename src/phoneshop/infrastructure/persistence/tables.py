"""SQLAlchemy table definitions.

Rows are plain storage records; the repositories map them to and from
the domain model.  Every mutable row carries a ``version`` column used
by SQLAlchemy's optimistic version check, so two transactions that both
read a row and then update it cannot both succeed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend.

    SQLite drops tzinfo, so values are stored as naive UTC and tagged as
    UTC again when loaded.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    type_annotation_map = {
        Decimal: Numeric(12, 2),
        datetime: UTCDateTime(),
    }


class AuditMixin:
    created_at: Mapped[datetime] = mapped_column()
    updated_at: Mapped[datetime] = mapped_column()
    deleted_at: Mapped[datetime | None] = mapped_column()


# --- Parties ------------------------------------------------------------------


class CustomerRow(AuditMixin, Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str | None] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(default=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class SupplierRow(AuditMixin, Base):
    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str | None] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(default=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


# --- Stock --------------------------------------------------------------------


class PurchaseRow(AuditMixin, Base):
    __tablename__ = "purchases"

    id: Mapped[int] = mapped_column(primary_key=True)
    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), index=True)
    principal: Mapped[Decimal]
    amount_paid: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    occurred_at: Mapped[datetime]
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        CheckConstraint("amount_paid >= 0 AND amount_paid <= principal", name="ck_purchase_paid"),
    )


class StockUnitRow(AuditMixin, Base):
    __tablename__ = "stock_units"

    id: Mapped[int] = mapped_column(primary_key=True)
    purchase_id: Mapped[int | None] = mapped_column(ForeignKey("purchases.id"), index=True)
    barcode: Mapped[str] = mapped_column(String(32), unique=True)
    brand: Mapped[str] = mapped_column(String(100))
    model: Mapped[str] = mapped_column(String(100))
    imei: Mapped[str | None] = mapped_column(String(20), index=True)
    color: Mapped[str | None] = mapped_column(String(50))
    condition: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(20), index=True)
    acquisition_cost: Mapped[Decimal]
    accumulated_cost: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        CheckConstraint("accumulated_cost >= acquisition_cost", name="ck_unit_cost"),
    )


class RepairJobRow(AuditMixin, Base):
    __tablename__ = "repair_jobs"

    id: Mapped[int] = mapped_column(primary_key=True)
    unit_id: Mapped[int] = mapped_column(ForeignKey("stock_units.id"), index=True)
    description: Mapped[str] = mapped_column(Text)
    cost: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    status: Mapped[str] = mapped_column(String(20))
    started_at: Mapped[datetime]
    completed_at: Mapped[datetime | None]
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


# --- Sales and settlements ----------------------------------------------------


class SaleRow(AuditMixin, Base):
    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(primary_key=True)
    # one sale per unit, enforced by the database as well
    unit_id: Mapped[int] = mapped_column(ForeignKey("stock_units.id"), unique=True)
    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"), index=True)
    payment_type: Mapped[str] = mapped_column(String(20))
    principal: Mapped[Decimal]
    amount_paid: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    occurred_at: Mapped[datetime]
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        CheckConstraint("amount_paid >= 0 AND amount_paid <= principal", name="ck_sale_paid"),
    )


class SettlementRow(Base):
    __tablename__ = "settlements"

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"), index=True)
    supplier_id: Mapped[int | None] = mapped_column(ForeignKey("suppliers.id"), index=True)
    amount: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    method: Mapped[str] = mapped_column(String(20))
    occurred_at: Mapped[datetime]
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column()

    __table_args__ = (
        CheckConstraint(
            "(customer_id IS NULL) <> (supplier_id IS NULL)",
            name="ck_settlement_one_debtor",
        ),
        CheckConstraint("amount > 0", name="ck_settlement_amount"),
    )


class SettlementAllocationRow(Base):
    __tablename__ = "settlement_allocations"

    id: Mapped[int] = mapped_column(primary_key=True)
    settlement_id: Mapped[int] = mapped_column(ForeignKey("settlements.id"), index=True)
    sale_id: Mapped[int | None] = mapped_column(ForeignKey("sales.id"))
    purchase_id: Mapped[int | None] = mapped_column(ForeignKey("purchases.id"))
    amount: Mapped[Decimal]
