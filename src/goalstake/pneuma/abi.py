"""
ABI Loader and call codec for the goal pool contract.

The goal pool ABI ships with the package. A deployment that differs can
point ``GOAL_CONTRACT_ABI`` at a Foundry artifact (``{"abi": [...]}``) or
at a bare ABI JSON list.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode
from eth_hash.auto import keccak


GOAL_POOL_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "userAddressUsed",
        "inputs": [{"name": "", "type": "address"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "createUser",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "joinGoal",
        "inputs": [{"name": "goalId", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "payable",
    },
    {
        "type": "function",
        "name": "claimRewards",
        "inputs": [{"name": "goalId", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]


def keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


@lru_cache(maxsize=16)
def load_abi(path: Path) -> list[dict[str, Any]]:
    """
    Load an ABI from a JSON file.

    Args:
        path: Foundry artifact ({"abi": [...]}) or bare ABI list

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file holds no ABI
    """
    if not path.exists():
        raise FileNotFoundError(f"ABI not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    if isinstance(artifact, dict):
        artifact = artifact.get("abi")
    if not isinstance(artifact, list):
        raise ValueError(f"No ABI in {path}")
    return artifact


def goal_pool_abi(path: Optional[Path] = None) -> list[dict[str, Any]]:
    """Return the goal pool ABI, from ``path`` when given."""
    if path is None:
        return GOAL_POOL_ABI
    return load_abi(path)


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(abi: list, function_name: str) -> bytes:
    """First 4 bytes of keccak256 over the canonical signature."""
    func = _find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    sig = f"{function_name}({','.join(input_types)})"
    return keccak256(sig.encode("utf-8"))[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    selector = function_selector(abi, function_name)

    if args:
        encoded_args = encode(input_types, args)
    else:
        encoded_args = b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value, tuple, or None for no outputs)
    """
    func = _find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
