"""CLI commands for customers and suppliers."""

from __future__ import annotations

import click

from phoneshop.application.register_party import RegisterPartyHandler
from phoneshop.infrastructure.bootstrap import unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors


def _register(kind: str, name: str, phone: str | None) -> None:
    handler = RegisterPartyHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(kind=kind, name=name, phone=phone)

    click.echo(f"{dto.kind.title()} #{dto.id} '{dto.name}' registered")


@click.command("add")
@click.option("--name", required=True, help="Customer name.")
@click.option("--phone", default=None, help="Contact phone number.")
def customer_add(name: str, phone: str | None) -> None:
    """Register a new customer."""
    _register("CUSTOMER", name, phone)


@click.command("add")
@click.option("--name", required=True, help="Supplier name.")
@click.option("--phone", default=None, help="Contact phone number.")
def supplier_add(name: str, phone: str | None) -> None:
    """Register a new supplier."""
    _register("SUPPLIER", name, phone)
