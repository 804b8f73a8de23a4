import click

from phoneshop.infrastructure.bootstrap import settings
from phoneshop.infrastructure.cli.party_commands import customer_add, supplier_add
from phoneshop.infrastructure.cli.payment_commands import (
    balance_show,
    payment_apply,
    payment_list,
)
from phoneshop.infrastructure.cli.purchase_commands import purchase_create
from phoneshop.infrastructure.cli.repair_commands import (
    repair_begin,
    repair_cancel,
    repair_complete,
    repair_start,
)
from phoneshop.infrastructure.cli.sale_commands import sale_create
from phoneshop.infrastructure.cli.unit_commands import (
    unit_find,
    unit_list,
    unit_remove,
    unit_show,
    unit_status,
)
from phoneshop.logging_config import configure_logging


@click.group()
def cli() -> None:
    """Phone shop — stock, repairs, sales and payments"""
    configure_logging(level=settings().log_level)


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def supplier() -> None:
    """Manage suppliers."""


@cli.group()
def purchase() -> None:
    """Record purchases from suppliers."""


@cli.group()
def unit() -> None:
    """Inspect and correct stock units."""


@cli.group()
def repair() -> None:
    """Manage repair jobs."""


@cli.group()
def sale() -> None:
    """Sell units."""


@cli.group()
def payment() -> None:
    """Apply payments to outstanding sales and purchases, and list them."""


@cli.group()
def balance() -> None:
    """Show what a customer or supplier balance stands at."""


# Register subcommands
customer.add_command(customer_add)
supplier.add_command(supplier_add)
purchase.add_command(purchase_create)
unit.add_command(unit_show)
unit.add_command(unit_find)
unit.add_command(unit_list)
unit.add_command(unit_status)
unit.add_command(unit_remove)
repair.add_command(repair_start)
repair.add_command(repair_begin)
repair.add_command(repair_complete)
repair.add_command(repair_cancel)
sale.add_command(sale_create)
payment.add_command(payment_apply)
payment.add_command(payment_list)
balance.add_command(balance_show)
