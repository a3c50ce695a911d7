"""
Transaction Builder - Build, sign, and send transactions.

Uses eth-account for signing and the httpx-based JSON-RPC client for
sending. All gas is paid by the signing account.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from .abi import keccak256
from .rpc import RpcClient


DEFAULT_GAS_LIMIT = 500_000


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def _as_int(value: Any) -> int:
    if isinstance(value, str):
        return int(value, 16) if value.startswith("0x") else int(value)
    return int(value)


@dataclass(frozen=True)
class TransactionReceipt:
    """Confirmation of a mined transaction."""

    tx_hash: str
    status: int
    block_number: Optional[int] = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @classmethod
    def from_rpc(cls, tx_hash: str, receipt: dict) -> "TransactionReceipt":
        block = receipt.get("blockNumber")
        return cls(
            tx_hash=receipt.get("transactionHash") or tx_hash,
            status=_as_int(receipt.get("status", "0x0")),
            block_number=_as_int(block) if block is not None else None,
            raw=receipt,
        )


async def build_transaction(
    rpc: RpcClient,
    sender: str,
    to: str,
    data: str = "0x",
    value: int = 0,
    gas_limit: Optional[int] = None,
    chain_id: Optional[int] = None,
) -> dict:
    """
    Build a legacy contract call transaction (unsigned).

    Args:
        rpc: JSON-RPC client used for nonce and gas price lookup
        sender: Address that will sign
        to: 0x-prefixed target address
        data: 0x-prefixed calldata
        value: Native value in minor units
        gas_limit: Gas limit (default: DEFAULT_GAS_LIMIT)
        chain_id: Chain id (default: asked from the node)

    Returns:
        Unsigned transaction dict
    """
    nonce = await rpc.get_nonce(sender)
    gas_price = await rpc.get_gas_price()
    if chain_id is None:
        chain_id = _as_int(await rpc.request("eth_chainId", []))

    return {
        "to": to_checksum_address(to),
        "data": data,
        "value": value,
        "nonce": nonce,
        "gas": gas_limit or DEFAULT_GAS_LIMIT,
        "gasPrice": gas_price,
        "chainId": chain_id,
    }


async def sign_and_send(rpc: RpcClient, account: LocalAccount, tx: dict) -> str:
    """
    Sign a transaction and send it.

    Returns:
        Transaction hash
    """
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()
    return await rpc.send_raw_transaction(raw_tx)
