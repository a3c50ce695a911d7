"""
Init - Create the local wallet.

Generates an ECDSA key and stores it in ~/.goalstake/.env, unless one is
already there. ``--add`` stores another account next to the existing one.
"""

from __future__ import annotations

import click

from ..config import default_env_path
from ..sigil.eth import create_key, get_address, load_private_key


@click.command()
@click.option("--force", is_flag=True, help="Replace an existing key")
@click.option("--add", "add_account", is_flag=True, help="Add another account to the key store")
def init(force: bool, add_account: bool) -> None:
    """Create a local wallet key."""
    env_path = default_env_path()

    if not force and not add_account:
        try:
            address = get_address(load_private_key(env_path))
        except ValueError:
            pass
        else:
            click.echo(f"Wallet already exists: {address}")
            return

    account = create_key(env_path, append=add_account)
    click.secho("Account added." if add_account else "Wallet created.", fg="green")
    click.echo(f"  Address: {account.address}")
    click.echo(f"  Key file: {env_path}")
