"""CLI commands for purchases (acquisitions)."""

from __future__ import annotations

import click

from phoneshop.application.create_acquisition import CreateAcquisitionHandler
from phoneshop.application.dto import UnitSpec
from phoneshop.infrastructure.bootstrap import currency, unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors


def _parse_item(raw: str) -> UnitSpec:
    """Parse 'Brand:Model:Cost[:IMEI[:CONDITION]]' into a UnitSpec."""
    parts = [p.strip() for p in raw.split(":")]
    if len(parts) < 3 or len(parts) > 5:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'Brand:Model:Cost[:IMEI[:CONDITION]]'."
        )
    brand, model, cost = parts[:3]
    imei = parts[3] if len(parts) > 3 and parts[3] else None
    condition = parts[4] if len(parts) > 4 and parts[4] else "NEW"
    return UnitSpec(
        brand=brand,
        model=model,
        acquisition_cost=cost,
        condition=condition,
        imei=imei,
    )


@click.command("create")
@click.option("--supplier", "supplier_id", required=True, type=int, help="Supplier ID.")
@click.option(
    "--item",
    "items",
    required=True,
    multiple=True,
    help="Unit as 'Brand:Model:Cost[:IMEI[:CONDITION]]'; repeat per unit.",
)
@click.option("--paid", default="0", show_default=True, help="Amount paid up front.")
@click.option("--notes", default=None, help="Free-text notes.")
def purchase_create(supplier_id: int, items: tuple[str, ...], paid: str, notes: str | None) -> None:
    """Record a purchase; every item becomes a unit IN_STOCK."""
    specs = [_parse_item(raw) for raw in items]

    handler = CreateAcquisitionHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(
            supplier_id=supplier_id, items=specs, paid_amount=paid, notes=notes
        )

    click.echo(f"Purchase #{dto.id} recorded  (payment={dto.payment_state})")
    click.echo(f"Supplier: #{dto.supplier_id}")
    click.echo()
    click.echo(f"  {'Unit':<6} {'Barcode':<20} {'Brand':<12} {'Model':<16} {'Cost':>10}")
    click.echo(f"  {'-'*68}")
    for u in dto.units:
        click.echo(
            f"  {u.id:<6} {u.barcode:<20} {u.brand:<12} {u.model:<16} {u.acquisition_cost:>10}"
        )
    click.echo(f"  {'-'*68}")
    click.echo(f"  {'Total':<27} {dto.total:>43}")
    click.echo(f"  {'Paid':<27} {dto.paid_amount:>43}")
