"""
Local key wallet provider.

Speaks the EIP-1193 request/event surface a browser wallet exposes
(``request(method, params)``, ``on("accountsChanged", ...)``) on top of
keys held in the local key store. Account authorisation, account
switching and transaction signing happen here; every other method is
forwarded to the JSON-RPC node.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from eth_account.signers.local import LocalAccount

from ..pneuma.rpc import RpcClient
from ..pneuma.tx import DEFAULT_GAS_LIMIT, build_transaction, sign_and_send

logger = logging.getLogger(__name__)

# EIP-1193 provider error codes
USER_REJECTED = 4001
UNAUTHORIZED = 4100

ACCOUNTS_CHANGED = "accountsChanged"


class ProviderRpcError(RuntimeError):
    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{message} (code {code})")


class WalletProvider(Protocol):
    async def request(self, method: str, params: Optional[list] = None) -> Any:
        ...

    def on(self, event: str, listener: Callable[..., Any]) -> None:
        ...

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> None:
        ...


class LocalKeyProvider:
    """
    EIP-1193 style provider over local ``LocalAccount`` keys.

    ``approve`` is called with the candidate addresses when a caller asks
    for account access; returning False rejects the request with code 4001.
    Without ``approve`` access is granted. ``authorized=True`` starts the
    provider already connected, as a wallet remembers a site it trusted.
    """

    def __init__(
        self,
        accounts: Sequence[LocalAccount],
        rpc: RpcClient,
        approve: Optional[Callable[[list[str]], bool]] = None,
        authorized: bool = False,
        chain_id: Optional[int] = None,
        gas_limit: int = DEFAULT_GAS_LIMIT,
    ) -> None:
        if not accounts:
            raise ValueError("LocalKeyProvider needs at least one account")
        self._accounts = list(accounts)
        self._rpc = rpc
        self._approve = approve
        self._authorized = authorized
        self._chain_id = chain_id
        self._gas_limit = gas_limit
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    # ============ Events ============

    def on(self, event: str, listener: Callable[..., Any]) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(*args)

    # ============ Accounts ============

    @property
    def addresses(self) -> list[str]:
        return [acct.address for acct in self._accounts]

    def _authorized_addresses(self) -> list[str]:
        return self.addresses if self._authorized else []

    def select_account(self, address: str) -> None:
        """Make ``address`` the active (first) account."""
        for acct in self._accounts:
            if acct.address.lower() == address.lower():
                self._accounts.remove(acct)
                self._accounts.insert(0, acct)
                break
        else:
            raise ValueError(f"Unknown account: {address}")

        logger.info("Active account switched to %s", self._accounts[0].address)
        if self._authorized:
            self._emit(ACCOUNTS_CHANGED, self.addresses)

    def disconnect(self) -> None:
        """Revoke account access."""
        was_authorized = self._authorized
        self._authorized = False
        if was_authorized:
            self._emit(ACCOUNTS_CHANGED, [])

    async def _request_accounts(self) -> list[str]:
        if self._authorized:
            return self.addresses

        if self._approve is not None and not self._approve(self.addresses):
            raise ProviderRpcError(USER_REJECTED, "User rejected the request.")

        self._authorized = True
        self._emit(ACCOUNTS_CHANGED, self.addresses)
        return self.addresses

    # ============ Signing ============

    def _account_for(self, address: Optional[str]) -> LocalAccount:
        if self._authorized:
            if address is None:
                return self._accounts[0]
            for acct in self._accounts:
                if acct.address.lower() == address.lower():
                    return acct
        raise ProviderRpcError(UNAUTHORIZED, f"Account {address} is not authorized.")

    async def _send_transaction(self, tx: dict) -> str:
        account = self._account_for(tx.get("from"))
        unsigned = await build_transaction(
            self._rpc,
            sender=account.address,
            to=tx["to"],
            data=tx.get("data", "0x"),
            value=int(tx.get("value", 0)),
            gas_limit=tx.get("gas") or self._gas_limit,
            chain_id=self._chain_id,
        )
        tx_hash = await sign_and_send(self._rpc, account, unsigned)
        logger.info("Sent transaction %s from %s", tx_hash, account.address)
        return tx_hash

    # ============ EIP-1193 ============

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        params = params or []
        if method == "eth_accounts":
            return self._authorized_addresses()
        if method == "eth_requestAccounts":
            return await self._request_accounts()
        if method == "eth_sendTransaction":
            return await self._send_transaction(params[0])
        if method == "eth_chainId" and self._chain_id is not None:
            return hex(self._chain_id)
        return await self._rpc.request(method, params)
