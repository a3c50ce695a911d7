"""
Request Data - Ask for verification data for a goal activity.

Exchanges the connected wallet address for a backend access token and
prints the resulting data request record as JSON.
"""

from __future__ import annotations

import json

import click

from ..session.models import DataRequest
from .common import run_workflow, yes_option


def _print_request(record: DataRequest) -> None:
    click.echo(json.dumps(record.to_dict(), indent=2))


@click.command("request-data")
@click.option("--activity-type", required=True, help="Activity type (e.g. running)")
@click.option("--goal-id", required=True, help="Goal id")
@yes_option
def request_data(activity_type: str, goal_id: str, assume_yes: bool) -> None:
    """Request verification data for a goal."""
    run_workflow(
        lambda coordinator: coordinator.request_verification_data(activity_type, goal_id),
        assume_yes=assume_yes,
        data_sink=_print_request,
    )
