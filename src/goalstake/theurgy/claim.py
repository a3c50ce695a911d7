"""Claim - Claim rewards for a completed goal."""

from __future__ import annotations

import sys

import click

from .common import run_workflow, yes_option


@click.command()
@click.option("--goal-id", required=True, help="Goal id")
@yes_option
def claim(goal_id: str, assume_yes: bool) -> None:
    """Claim rewards for a goal."""
    click.echo("=== goalstake Claim ===")
    click.echo("")

    if not run_workflow(lambda coordinator: coordinator.claim(goal_id), assume_yes=assume_yes):
        sys.exit(1)
