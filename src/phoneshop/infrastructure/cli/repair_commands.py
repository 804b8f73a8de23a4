"""CLI commands for repair jobs."""

from __future__ import annotations

import click

from phoneshop.application.begin_repair import BeginRepairHandler
from phoneshop.application.cancel_repair import CancelRepairHandler
from phoneshop.application.complete_repair import CompleteRepairHandler
from phoneshop.application.start_repair import StartRepairHandler
from phoneshop.infrastructure.bootstrap import currency, unit_of_work
from phoneshop.infrastructure.cli.errors import domain_errors


@click.command("start")
@click.option("--unit", "unit_id", required=True, type=int, help="Unit ID.")
@click.option("--cost", required=True, help="Repair cost (e.g. 150.00).")
@click.option("--description", required=True, help="What is being repaired.")
@click.option(
    "--in-progress",
    is_flag=True,
    default=False,
    help="Work has already started (default: PENDING).",
)
def repair_start(unit_id: int, cost: str, description: str, in_progress: bool) -> None:
    """Open a repair job; the unit goes IN_REPAIR."""
    handler = StartRepairHandler(uow=unit_of_work(), currency=currency())

    with domain_errors():
        dto = handler.handle(
            unit_id=unit_id,
            cost=cost,
            description=description,
            status="IN_PROGRESS" if in_progress else "PENDING",
        )

    click.echo(f"Repair #{dto.id} opened on unit #{dto.unit_id}  (status={dto.status})")
    click.echo(f"Unit #{dto.unit_id} is now {dto.unit.status}")


@click.command("begin")
@click.option("--id", "job_id", required=True, type=int, help="Repair ID.")
def repair_begin(job_id: int) -> None:
    """Mark a pending repair as IN_PROGRESS."""
    handler = BeginRepairHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(job_id)

    click.echo(f"Repair #{dto.id} is now {dto.status}")


@click.command("complete")
@click.option("--id", "job_id", required=True, type=int, help="Repair ID.")
@click.option("--note", default=None, help="Completion note.")
def repair_complete(job_id: int, note: str | None) -> None:
    """Complete a repair; its cost is added to the unit."""
    handler = CompleteRepairHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(job_id, completion_note=note)

    click.echo(f"Repair #{dto.id} completed — cost {dto.cost} added.")
    click.echo(
        f"Unit #{dto.unit_id} total cost {dto.unit.accumulated_cost}  (status={dto.unit.status})"
    )


@click.command("cancel")
@click.option("--id", "job_id", required=True, type=int, help="Repair ID.")
@click.option("--note", default=None, help="Reason for cancelling.")
def repair_cancel(job_id: int, note: str | None) -> None:
    """Cancel a repair; the unit's cost is unchanged."""
    handler = CancelRepairHandler(uow=unit_of_work())

    with domain_errors():
        dto = handler.handle(job_id, note=note)

    click.echo(f"Repair #{dto.id} cancelled.  Unit #{dto.unit_id} is now {dto.unit.status}")
