"""
goalstake CLI

Command-line client for the goal staking protocol. The wallet is a local
ECDSA key; every command restores the wallet session, checks on-chain
registration, then runs one workflow.

Commands:
  init          - Create a local wallet key (--add for another account)
  whoami        - Show current wallet address
  info          - Show configuration
  status        - Show account, registration and balance
  register      - Register the wallet on-chain
  stake         - Join a goal with a stake
  claim         - Claim goal rewards
  request-data  - Request verification data for a goal
"""

from __future__ import annotations

import logging
import sys

import click

from .config import MIN_REGISTRATION_BALANCE_WEI, load_settings
from .pneuma.units import format_ether
from .sigil.eth import get_address, load_private_key


# ============ Constants ============

VERSION = "0.3.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="goalstake")
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug)")
@click.pass_context
def cli(ctx: click.Context, verbose: int) -> None:
    """goalstake: stake on your goals."""
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", force=True)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.init import init
from .theurgy.status import status
from .theurgy.register import register
from .theurgy.stake import stake
from .theurgy.claim import claim
from .theurgy.request_data import request_data

cli.add_command(init)
cli.add_command(status)
cli.add_command(register)
cli.add_command(stake)
cli.add_command(claim)
cli.add_command(request_data)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        pk = load_private_key()
        address = get_address(pk)
        click.echo(f"Address: {address}")
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Run 'goalstake init' to create one.")
        sys.exit(1)


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration."""
    settings = load_settings()

    try:
        address = get_address(load_private_key(settings.env_path))
    except ValueError:
        address = click.style("not initialized", fg="yellow") + click.style("  (run: goalstake init)", dim=True)

    rows = [
        ("Version:     ", f"goalstake v{VERSION}"),
        ("Address:     ", address),
        ("RPC:         ", settings.rpc_url),
        ("Chain ID:    ", str(settings.chain_id)),
        ("Contract:    ", settings.contract_address or click.style("not set", fg="yellow")),
        ("Token API:   ", settings.token_service_url),
        ("Min balance: ", f"{format_ether(MIN_REGISTRATION_BALANCE_WEI)} {settings.native_symbol}"),
    ]
    for label, value in rows:
        click.echo(click.style("  " + label, dim=True) + value)


# ============ Entry Points ============


def main() -> None:
    """goalstake CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
