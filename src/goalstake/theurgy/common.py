"""Shared wiring for the workflow commands."""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import click

from ..config import Settings, load_settings
from ..errors import GoalStakeError
from ..pneuma.abi import goal_pool_abi
from ..pneuma.contract import ContractClient
from ..pneuma.rpc import RpcClient
from ..relay.exchange import TokenExchangeClient
from ..session.coordinator import TransactionCoordinator
from ..session.models import DataRequest, Notice
from ..sigil.eth import get_account, load_authorized_accounts, load_private_keys, remember_authorized_accounts
from ..sigil.provider import LocalKeyProvider
from ..sigil.wallet import WalletGateway

logger = logging.getLogger(__name__)

yes_option = click.option("--yes", "-y", "assume_yes", is_flag=True, help="Connect the wallet without prompting")


def _approver(settings: Settings, assume_yes: bool) -> Callable[[list[str]], bool]:
    """Access prompt for the local wallet; approvals are remembered in the key store."""

    def approve(addresses: list[str]) -> bool:
        if not assume_yes and not click.confirm(f"Connect wallet {addresses[0]} to goalstake?", default=True):
            return False
        remember_authorized_accounts(addresses, settings.env_path)
        return True

    return approve


def echo_notice(notice: Notice) -> None:
    colour = {"success": "green", "error": "red"}.get(notice.level)
    click.secho(f"  {notice.message}", fg=colour)


def build_clients(settings: Settings, assume_yes: bool = False) -> tuple[WalletGateway, ContractClient, TokenExchangeClient]:
    """Wire the wallet gateway, contract client and token client from settings."""
    rpc = RpcClient(settings.rpc_url)

    provider = None
    try:
        keys = load_private_keys(settings.env_path)
    except ValueError as exc:
        logger.info("No local wallet: %s", exc)
    else:
        accounts = [get_account(key) for key in keys]
        remembered = load_authorized_accounts(settings.env_path)
        provider = LocalKeyProvider(
            accounts,
            rpc,
            approve=_approver(settings, assume_yes),
            authorized=all(acct.address.lower() in remembered for acct in accounts),
            chain_id=settings.chain_id,
        )

    gateway = WalletGateway(provider)
    contract = ContractClient(
        settings.require_contract_address(),
        gateway,
        abi=goal_pool_abi(settings.contract_abi_path),
    )
    exchange = TokenExchangeClient(settings.token_service_url)
    return gateway, contract, exchange


@asynccontextmanager
async def open_coordinator(
    settings: Settings,
    assume_yes: bool = False,
    connect: bool = True,
    data_sink: Optional[Callable[[DataRequest], Any]] = None,
) -> AsyncIterator[TransactionCoordinator]:
    gateway, contract, exchange = build_clients(settings, assume_yes=assume_yes)
    async with TransactionCoordinator(
        gateway,
        contract,
        exchange,
        notify=echo_notice,
        data_sink=data_sink,
        currency_symbol=settings.native_symbol,
    ) as coordinator:
        await coordinator.restore_session()
        if connect and coordinator.account is None:
            await coordinator.connect()
        yield coordinator


def run_workflow(
    workflow: Callable[[TransactionCoordinator], Awaitable[Any]],
    assume_yes: bool = False,
    connect: bool = True,
    data_sink: Optional[Callable[[DataRequest], Any]] = None,
) -> Any:
    """Run ``workflow`` against a freshly restored session; exits on errors."""
    try:
        settings = load_settings()
        settings.require_contract_address()
    except ValueError as exc:
        raise click.ClickException(str(exc))

    async def _main() -> Any:
        async with open_coordinator(settings, assume_yes=assume_yes, connect=connect, data_sink=data_sink) as coordinator:
            return await workflow(coordinator)

    try:
        return asyncio.run(_main())
    except GoalStakeError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)
