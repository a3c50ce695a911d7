"""
Shared fakes for goalstake tests.

Nothing here touches the network: JSON-RPC and token-service traffic goes
through httpx.MockTransport, and the coordinator is exercised against
in-memory wallet / contract / exchange doubles.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

import httpx
import pytest
from eth_abi import decode, encode
from eth_account import Account

from goalstake.errors import InsufficientBalance, TransactionReverted, UserRejected, WalletUnavailable
from goalstake.pneuma.abi import GOAL_POOL_ABI, function_selector, keccak256
from goalstake.pneuma.tx import TransactionReceipt
from goalstake.pneuma.units import parse_ether
from goalstake.relay.exchange import AccessToken

ONE_TOKEN = 10**18
GAS_PRICE = 25_000_000_000


# ============ JSON-RPC node ============


class FakeChain:
    """Minimal JSON-RPC node answering the methods goalstake uses."""

    def __init__(self, chain_id: int = 43113) -> None:
        self.chain_id = chain_id
        self.balances: dict[str, int] = {}
        self.registered: set[str] = set()
        self.requests: list[tuple[str, list]] = []
        self.raw_transactions: list[str] = []
        self.receipt_status = 1
        self.pending_polls = 0
        self.errors: dict[str, dict] = {}
        self.http_status = 200

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def methods(self) -> list[str]:
        return [method for method, _ in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.requests.append((method, params))

        if self.http_status != 200:
            return httpx.Response(self.http_status, text="node unavailable")
        if method in self.errors:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": self.dispatch(method, params)})

    def dispatch(self, method: str, params: list) -> Any:
        if method == "eth_getBalance":
            return hex(self.balances.get(params[0].lower(), 0))
        if method == "eth_getTransactionCount":
            return "0x0"
        if method == "eth_gasPrice":
            return hex(GAS_PRICE)
        if method == "eth_chainId":
            return hex(self.chain_id)
        if method == "eth_call":
            data = params[0]["data"]
            selector = bytes.fromhex(data[2:10])
            if selector != function_selector(GOAL_POOL_ABI, "userAddressUsed"):
                return "0x"
            (address,) = decode(["address"], bytes.fromhex(data[10:]))
            return "0x" + encode(["bool"], [address.lower() in self.registered]).hex()
        if method == "eth_sendRawTransaction":
            self.raw_transactions.append(params[0])
            return "0x" + keccak256(bytes.fromhex(params[0][2:])).hex()
        if method == "eth_getTransactionReceipt":
            if self.pending_polls > 0:
                self.pending_polls -= 1
                return None
            return {"transactionHash": params[0], "status": hex(self.receipt_status), "blockNumber": "0x10"}
        raise AssertionError(f"unexpected RPC method {method}")


@pytest.fixture()
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture()
def accounts() -> list:
    return [Account.create(), Account.create()]


# ============ Contract client doubles ============


class FakeSigner:
    def __init__(self, address: str, balance: int = ONE_TOKEN, status: int = 1, send_error: Optional[Exception] = None) -> None:
        self.address = address
        self.balance = balance
        self.status = status
        self.send_error = send_error
        self.sent: list[dict] = []

    async def get_balance(self) -> int:
        return self.balance

    async def send_transaction(self, tx: dict) -> str:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(tx)
        return "0x" + f"{len(self.sent):064x}"

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120, poll_interval: float = 2.0) -> dict:
        return {"transactionHash": tx_hash, "status": hex(self.status), "blockNumber": "0x1"}


class FakeSigningGateway:
    def __init__(self, signer: FakeSigner, call_result: Optional[str] = None, call_error: Optional[Exception] = None) -> None:
        self.signer = signer
        self.call_result = call_result
        self.call_error = call_error
        self.calls: list[dict] = []
        self.signer_requests = 0

    async def call(self, tx: dict) -> Optional[str]:
        self.calls.append(tx)
        if self.call_error is not None:
            raise self.call_error
        return self.call_result

    async def get_signer(self) -> FakeSigner:
        self.signer_requests += 1
        return self.signer


# ============ Coordinator doubles ============


class FakeWallet:
    """WalletGateway double with a scriptable account list."""

    def __init__(self, available: bool = True, accounts: Optional[list[str]] = None, authorized: bool = False) -> None:
        self.available = available
        self.accounts = accounts if accounts is not None else ["0xAA"]
        self.authorized = authorized
        self.reject = False
        self.balance = ONE_TOKEN
        self.listeners: list[Callable[[list[str]], Any]] = []

    def is_available(self) -> bool:
        return self.available

    async def get_connected_accounts(self) -> list[str]:
        return list(self.accounts) if self.available and self.authorized else []

    async def request_accounts(self) -> list[str]:
        if not self.available:
            raise WalletUnavailable()
        if self.reject:
            raise UserRejected("User rejected the request.")
        self.authorized = True
        return list(self.accounts)

    async def get_balance(self, address: str) -> int:
        return self.balance

    def on_accounts_changed(self, callback: Callable[[list[str]], Any]) -> Callable[[], None]:
        self.listeners.append(callback)
        return lambda: self.listeners.remove(callback)

    def emit(self, accounts: list[str]) -> None:
        self.accounts = list(accounts)
        for listener in list(self.listeners):
            listener(list(accounts))


class FakeContract:
    """ContractClient double; records calls, scripted outcomes."""

    def __init__(self) -> None:
        self.registered: set[str] = set()
        self.user_exists_calls: list[str] = []
        self.calls: list[tuple] = []
        self.balance = ONE_TOKEN
        self.min_balance = 10_000_000_000_000_000
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.on_call: Optional[Callable[[], None]] = None

    async def user_exists(self, address: str) -> bool:
        self.user_exists_calls.append(address)
        return address.lower() in self.registered

    async def _write(self, name: str, *args: Any) -> TransactionReceipt:
        if self.on_call is not None:
            self.on_call()
        if self.gate is not None:
            await self.gate.wait()
        self.calls.append((name, *args))
        if self.error is not None:
            raise self.error
        return TransactionReceipt(tx_hash=f"0x{len(self.calls):064x}", status=1, block_number=1)

    async def create_user(self) -> TransactionReceipt:
        if self.balance < self.min_balance:
            raise InsufficientBalance(self.balance, self.min_balance)
        return await self._write("createUser")

    async def join_goal(self, goal_id: Any, amount: str) -> TransactionReceipt:
        return await self._write("joinGoal", goal_id, parse_ether(amount))

    async def claim_rewards(self, goal_id: Any) -> TransactionReceipt:
        return await self._write("claimRewards", goal_id)


class FakeExchange:
    def __init__(self, token: str = "tok-123", error: Optional[Exception] = None) -> None:
        self.token = token
        self.error = error
        self.requests: list[str] = []

    async def exchange(self, wallet_address: str) -> AccessToken:
        self.requests.append(wallet_address)
        if self.error is not None:
            raise self.error
        return AccessToken(token=self.token, wallet_address=wallet_address)


@pytest.fixture()
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture()
def contract() -> FakeContract:
    return FakeContract()


@pytest.fixture()
def exchange() -> FakeExchange:
    return FakeExchange()


@pytest.fixture()
def reverted() -> TransactionReverted:
    return TransactionReverted("execution reverted", tx_hash="0xdead")


SIGNER_ADDRESS = "0x" + "ab" * 20
CONTRACT_ADDRESS = "0x" + "c0" * 20


@pytest.fixture()
def signer() -> FakeSigner:
    return FakeSigner(SIGNER_ADDRESS)


@pytest.fixture()
def signing_gateway(signer: FakeSigner) -> FakeSigningGateway:
    return FakeSigningGateway(signer)
