"""
JSON-RPC Client for the goal pool chain.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, balance queries, raw transaction submission
and transaction receipt polling.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from typing import Any, Awaitable, Callable, Optional

import httpx

from ..config import DEFAULT_RPC_URL

logger = logging.getLogger(__name__)


class RpcError(RuntimeError):
    """JSON-RPC error member returned by the node."""

    def __init__(self, code: Optional[int], message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"RPC error {code}: {message}")


class RpcClient:
    """
    Async JSON-RPC 2.0 client.

    One short-lived ``httpx.AsyncClient`` is opened per call; pass a
    ``transport`` to route traffic somewhere other than the network.
    """

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def request(self, method: str, params: Optional[list] = None) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error member
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": next(self._ids),
        }
        logger.debug("rpc -> %s %s", method, payload["params"])

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.rpc_url, json=payload)
            response.raise_for_status()
            data = response.json()

        if "error" in data:
            error = data["error"] or {}
            raise RpcError(error.get("code"), error.get("message", "unknown error"), error.get("data"))

        return data.get("result")

    async def eth_call(self, tx: dict) -> str:
        """Read-only call against the latest block."""
        return await self.request("eth_call", [tx, "latest"])

    async def get_balance(self, address: str) -> int:
        """Balance in minor units."""
        result = await self.request("eth_getBalance", [address, "latest"])
        return int(result, 16)

    async def get_nonce(self, address: str) -> int:
        result = await self.request("eth_getTransactionCount", [address, "pending"])
        return int(result, 16)

    async def get_gas_price(self) -> int:
        result = await self.request("eth_gasPrice", [])
        return int(result, 16)

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        return await self.request("eth_sendRawTransaction", [raw_tx])


async def wait_for_receipt(
    request: Callable[[str, list], Awaitable[Any]],
    tx_hash: str,
    timeout: float = 120,
    poll_interval: float = 2.0,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        request: Async ``(method, params)`` callable (an RpcClient's or a
                 wallet provider's ``request``)
        tx_hash: Transaction hash
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds

    Returns:
        Transaction receipt dict

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.monotonic()
    while True:
        receipt = await request("eth_getTransactionReceipt", [tx_hash])
        if receipt is not None:
            return receipt
        if time.monotonic() - start >= timeout:
            break
        await asyncio.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
