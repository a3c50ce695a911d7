"""
Register - Create the on-chain user for the connected wallet.

The wallet must hold the minimum registration balance; the check runs
before anything is submitted.
"""

from __future__ import annotations

import sys

import click

from .common import run_workflow, yes_option


@click.command()
@yes_option
def register(assume_yes: bool) -> None:
    """Register the connected wallet as a goalstake user."""
    click.echo("=== goalstake Register ===")
    click.echo("")

    async def _register(coordinator):
        ok = await coordinator.register()
        return ok, coordinator.last_error

    ok, error = run_workflow(_register, assume_yes=assume_yes)
    if ok:
        click.secho("SUCCESS: Wallet registered.", fg="green")
    else:
        click.secho(f"FAILED: {error}", fg="red")
        sys.exit(1)
