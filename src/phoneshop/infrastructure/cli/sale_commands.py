"""CLI commands for sales."""

from __future__ import annotations

import click

from phoneshop.application.create_sale import CreateSaleHandler
from phoneshop.infrastructure.bootstrap import currency, unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors


@click.command("create")
@click.option("--unit", "unit_id", required=True, type=int, help="Unit ID to sell.")
@click.option("--price", required=True, help="Sale price (e.g. 1200.00).")
@click.option(
    "--pay-later",
    is_flag=True,
    default=False,
    help="Credit sale; the customer owes the unpaid part.",
)
@click.option("--customer", "customer_id", type=int, default=None, help="Customer ID.")
@click.option("--paid", default=None, help="Amount paid now (credit sales only).")
@click.option("--notes", default=None, help="Free-text notes.")
def sale_create(
    unit_id: int,
    price: str,
    pay_later: bool,
    customer_id: int | None,
    paid: str | None,
    notes: str | None,
) -> None:
    """Sell a unit that is IN_STOCK or READY_FOR_SALE."""
    handler = CreateSaleHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(
            unit_id=unit_id,
            sale_price=price,
            payment_type="PAY_LATER" if pay_later else "CASH",
            customer_id=customer_id,
            paid_amount=paid,
            notes=notes,
        )

    click.echo(f"Sale #{dto.id}: unit #{dto.unit_id} sold for {dto.sale_price}")
    click.echo(f"Paid {dto.paid_amount}, remaining {dto.remaining}  ({dto.payment_state})")
    click.echo(f"Profit: {dto.profit}")
