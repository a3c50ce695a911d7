"""
Wallet gateway.

Thin, typed facade over an injected wallet provider. Translates provider
errors into the goalstake taxonomy and hands out signers bound to the
currently active account.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..errors import UserRejected, WalletUnavailable
from ..pneuma.rpc import wait_for_receipt
from .provider import ACCOUNTS_CHANGED, USER_REJECTED, ProviderRpcError, WalletProvider

logger = logging.getLogger(__name__)

AccountsListener = Callable[[list[str]], Any]


class Signer:
    """Capability bound to one wallet account that can authorise writes."""

    def __init__(self, provider: WalletProvider, address: str) -> None:
        self._provider = provider
        self.address = address

    def __repr__(self) -> str:
        return f"Signer({self.address})"

    async def get_balance(self) -> int:
        result = await self._provider.request("eth_getBalance", [self.address, "latest"])
        return int(result, 16)

    async def send_transaction(self, tx: dict) -> str:
        """Submit ``tx`` from this account; returns the transaction hash."""
        return await self._provider.request("eth_sendTransaction", [{**tx, "from": self.address}])

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120, poll_interval: float = 2.0) -> dict:
        return await wait_for_receipt(
            self._provider.request, tx_hash, timeout=timeout, poll_interval=poll_interval
        )


class WalletGateway:
    def __init__(self, provider: Optional[WalletProvider] = None) -> None:
        self._provider = provider

    def is_available(self) -> bool:
        return self._provider is not None

    def _require_provider(self) -> WalletProvider:
        if self._provider is None:
            raise WalletUnavailable()
        return self._provider

    async def get_connected_accounts(self) -> list[str]:
        """Accounts already authorised, without prompting."""
        if self._provider is None:
            return []
        accounts = await self._provider.request("eth_accounts")
        return list(accounts or [])

    async def request_accounts(self) -> list[str]:
        """
        Ask the wallet for account access, prompting when needed.

        Raises:
            WalletUnavailable: If no provider is installed, or the wallet
                               fails the request other than by rejection
            UserRejected: If the prompt is declined
        """
        provider = self._require_provider()
        try:
            accounts = await provider.request("eth_requestAccounts")
        except ProviderRpcError as exc:
            if exc.code == USER_REJECTED:
                raise UserRejected(exc.message) from exc
            logger.warning("eth_requestAccounts failed: %s", exc)
            raise WalletUnavailable(f"Wallet request failed: {exc.message}") from exc
        return list(accounts or [])

    async def get_signer(self) -> Signer:
        """Signer for the active account, looked up fresh on every call."""
        provider = self._require_provider()
        accounts = await self.request_accounts()
        if not accounts:
            raise WalletUnavailable("Wallet returned no accounts")
        return Signer(provider, accounts[0])

    async def get_balance(self, address: str) -> int:
        provider = self._require_provider()
        result = await provider.request("eth_getBalance", [address, "latest"])
        return int(result, 16)

    async def call(self, tx: dict) -> str:
        """Read-only contract call through the wallet's node."""
        provider = self._require_provider()
        return await provider.request("eth_call", [tx, "latest"])

    def on_accounts_changed(self, callback: AccountsListener) -> Callable[[], None]:
        """
        Register ``callback`` for account set changes.

        Returns:
            A function that removes the registration
        """
        if self._provider is None:
            return lambda: None

        provider = self._provider

        def listener(accounts: list[str]) -> None:
            callback(list(accounts))

        provider.on(ACCOUNTS_CHANGED, listener)

        def unsubscribe() -> None:
            provider.remove_listener(ACCOUNTS_CHANGED, listener)

        return unsubscribe
