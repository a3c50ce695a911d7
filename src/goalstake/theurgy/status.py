"""
Status - Show the session as the coordinator sees it.

Uses only already-authorised accounts; never prompts.
"""

from __future__ import annotations

import click

from ..pneuma.units import format_ether
from ..session.coordinator import TransactionCoordinator
from .common import run_workflow


async def _status(coordinator: TransactionCoordinator) -> None:
    click.echo(click.style("  Account:    ", dim=True) + (coordinator.account or "not connected"))
    click.echo(click.style("  State:      ", dim=True) + coordinator.state.value)
    if coordinator.account is not None:
        balance = await coordinator.get_balance()
        click.echo(click.style("  Balance:    ", dim=True) + f"{format_ether(balance)} ({balance} minor units)")
    if coordinator.last_error:
        click.secho(f"  Last error: {coordinator.last_error}", fg="yellow")


@click.command()
def status() -> None:
    """Show wallet connection, registration and balance."""
    click.echo("=== goalstake Status ===")
    click.echo("")
    run_workflow(_status, connect=False)
