"""Stake - Join a goal by staking native currency."""

from __future__ import annotations

import sys

import click

from .common import run_workflow, yes_option


@click.command()
@click.option("--goal-id", required=True, help="Goal id")
@click.option("--amount", required=True, help="Amount to stake in major units (e.g. 0.5)")
@yes_option
def stake(goal_id: str, amount: str, assume_yes: bool) -> None:
    """
    Join a goal.

    The amount is parsed exactly as a decimal; it is never rounded
    through a float.
    """
    click.echo("=== goalstake Stake ===")
    click.echo("")
    click.echo(f"  Goal: {goal_id}")
    click.echo(f"  Amount: {amount}")
    click.echo("")

    if not run_workflow(lambda coordinator: coordinator.stake(goal_id, amount), assume_yes=assume_yes):
        sys.exit(1)
