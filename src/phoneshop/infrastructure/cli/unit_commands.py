"""CLI commands for stock units."""

from __future__ import annotations

import click

from phoneshop.application.find_unit import FindUnitHandler
from phoneshop.application.remove_unit import RemoveUnitHandler
from phoneshop.application.show_inventory import ShowInventoryHandler
from phoneshop.application.show_unit import ShowUnitHandler
from phoneshop.application.update_unit_status import UpdateUnitStatusHandler
from phoneshop.domain.model.stock_unit import LifecycleStatus
from phoneshop.infrastructure.bootstrap import unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors

_STATUSES = click.Choice([s.value for s in LifecycleStatus], case_sensitive=False)


@click.command("show")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID to display.")
def unit_show(unit_id: int) -> None:
    """Show a unit with its repairs, sale and profit."""
    handler = ShowUnitHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(unit_id)

    u = dto.unit
    click.echo(f"Unit #{u.id}  {u.brand} {u.model}  (status={u.status})")
    click.echo(f"Barcode:   {u.barcode}")
    if u.imei:
        click.echo(f"IMEI:      {u.imei}")
    click.echo(f"Condition: {u.condition}")
    click.echo(f"Bought:    {u.acquisition_cost}")
    click.echo(f"Total cost:{u.accumulated_cost:>11}")

    if dto.repairs:
        click.echo()
        click.echo(f"  {'Repair':<8} {'Status':<12} {'Cost':>10}  Description")
        click.echo(f"  {'-'*56}")
        for r in dto.repairs:
            click.echo(f"  {r.id:<8} {r.status:<12} {r.cost:>10}  {r.description}")

    if dto.sale is not None:
        s = dto.sale
        click.echo()
        click.echo(f"Sold:      {s.sale_price} on {s.sold_at} ({s.payment_type}, {s.payment_state})")
        click.echo(f"Profit:    {dto.profit}")


@click.command("find")
@click.option("--barcode", default=None, help="Barcode from the unit's label.")
@click.option("--imei", default=None, help="IMEI of the phone.")
def unit_find(barcode: str | None, imei: str | None) -> None:
    """Find a unit by barcode or IMEI."""
    if (barcode is None) == (imei is None):
        raise click.UsageError("Give exactly one of --barcode or --imei.")
    handler = FindUnitHandler(uow=unit_of_work())

    with domain_errors():
        u = handler.handle(barcode=barcode, imei=imei)

    click.echo(f"Unit #{u.id}  {u.brand} {u.model}  (status={u.status})  {u.barcode}")


@click.command("list")
@click.option("--status", type=_STATUSES, default=None, help="Only units in this status.")
@click.option("--available", is_flag=True, default=False, help="Only units that can be sold.")
def unit_list(status: str | None, available: bool) -> None:
    """List units in stock."""
    handler = ShowInventoryHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(status=status, available_only=available)

    if not dto.units:
        click.echo("No units found.")
    else:
        click.echo(
            f"{'ID':<6} {'Brand':<12} {'Model':<16} {'Status':<16} {'Cost':>10}"
        )
        click.echo("-" * 64)
        for u in dto.units:
            click.echo(
                f"{u.id:<6} {u.brand:<12} {u.model:<16} {u.status:<16} {u.accumulated_cost:>10}"
            )

    click.echo()
    counts = ", ".join(f"{name}={n}" for name, n in dto.by_status.items() if n)
    click.echo(f"Available for sale: {dto.available}" + (f"  ({counts})" if counts else ""))


@click.command("status")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID.")
@click.option("--to", "status", required=True, type=_STATUSES, help="New status.")
def unit_status(unit_id: int, status: str) -> None:
    """Correct a unit's status (e.g. mark a sold unit RETURNED)."""
    handler = UpdateUnitStatusHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(unit_id, status)

    click.echo(f"Unit #{dto.id} status is now {dto.status}")


@click.command("remove")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID.")
def unit_remove(unit_id: int) -> None:
    """Remove a unit entered by mistake."""
    handler = RemoveUnitHandler(uow=unit_of_work())

    with domain_errors():
        handler.handle(unit_id)

    click.echo(f"Unit #{unit_id} removed.")
