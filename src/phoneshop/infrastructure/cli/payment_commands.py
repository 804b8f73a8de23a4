"""CLI commands for payments and balances."""

from __future__ import annotations

import click

from phoneshop.application.apply_settlement import ApplySettlementHandler
from phoneshop.application.show_balance import ShowBalanceHandler
from phoneshop.application.show_payments import ShowPaymentsHandler
from phoneshop.domain.model.settlement import PaymentMethod
from phoneshop.domain.model.value_objects import DebtorRef
from phoneshop.infrastructure.bootstrap import currency, unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors


def _debtor(customer_id: int | None, supplier_id: int | None) -> DebtorRef:
    if (customer_id is None) == (supplier_id is None):
        raise click.UsageError("Give exactly one of --customer or --supplier.")
    if customer_id is not None:
        return DebtorRef.customer(customer_id)
    return DebtorRef.supplier(supplier_id)  # type: ignore[arg-type]


@click.command("apply")
@click.option("--customer", "customer_id", type=int, default=None, help="Customer paying.")
@click.option("--supplier", "supplier_id", type=int, default=None, help="Supplier being paid.")
@click.option("--amount", required=True, help="Payment amount (e.g. 900.00).")
@click.option(
    "--method",
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
    default="CASH",
    show_default=True,
)
@click.option("--notes", default=None, help="Free-text notes.")
def payment_apply(
    customer_id: int | None,
    supplier_id: int | None,
    amount: str,
    method: str,
    notes: str | None,
) -> None:
    """Apply a payment to the oldest open sales (or purchases) first."""
    debtor = _debtor(customer_id, supplier_id)
    handler = ApplySettlementHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(debtor=debtor, amount=amount, method=method, notes=notes)

    click.echo(f"Payment #{dto.id} of {dto.amount} from {dto.debtor} applied")
    click.echo()
    click.echo(f"  {'Ref':<8} {'Applied':>12} {'Paid':>12} {'State':<8}")
    click.echo(f"  {'-'*44}")
    for a in dto.applied:
        click.echo(f"  {a.holder_id:<8} {a.applied:>12} {a.paid_amount:>12} {a.payment_state:<8}")


@click.command("list")
@click.option("--customer", "customer_id", type=int, default=None, help="Customer ID.")
@click.option("--supplier", "supplier_id", type=int, default=None, help="Supplier ID.")
def payment_list(customer_id: int | None, supplier_id: int | None) -> None:
    """List recorded payments and every sale (or purchase) of one debtor."""
    debtor = _debtor(customer_id, supplier_id)
    handler = ShowPaymentsHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(debtor)

    click.echo(f"{dto.name} ({dto.debtor})  paid {dto.total_paid}, outstanding {dto.outstanding}")
    click.echo()
    if not dto.payments:
        click.echo("No payments recorded.")
    for p in dto.payments:
        split = ", ".join(f"#{ref} {amount}" for ref, amount in p.allocations)
        click.echo(f"  Payment #{p.id:<5} {p.occurred_at:<22} {p.amount:>12} {p.method:<15} -> {split}")

    if dto.obligations:
        click.echo()
        click.echo(f"  {'Ref':<8} {'Date':<22} {'Total':>12} {'Paid':>12} {'State':<8}")
        click.echo(f"  {'-'*66}")
        for o in dto.obligations:
            click.echo(
                f"  {o.id:<8} {o.occurred_at:<22} {o.principal:>12} {o.paid_amount:>12} {o.payment_state:<8}"
            )


@click.command("show")
@click.option("--customer", "customer_id", type=int, default=None, help="Customer ID.")
@click.option("--supplier", "supplier_id", type=int, default=None, help="Supplier ID.")
def balance_show(customer_id: int | None, supplier_id: int | None) -> None:
    """Show open sales (or purchases) for one customer (or supplier)."""
    debtor = _debtor(customer_id, supplier_id)
    handler = ShowBalanceHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(debtor)

    click.echo(f"{dto.name} ({dto.debtor})  outstanding {dto.outstanding}")
    if not dto.obligations:
        click.echo("Nothing outstanding.")
        return

    click.echo()
    click.echo(f"  {'Ref':<8} {'Date':<22} {'Total':>12} {'Paid':>12} {'Due':>12}")
    click.echo(f"  {'-'*70}")
    for o in dto.obligations:
        click.echo(
            f"  {o.id:<8} {o.occurred_at:<22} {o.principal:>12} {o.paid_amount:>12} {o.outstanding:>12}"
        )
