"""Tests for the goal pool ABI codec."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from eth_abi import decode, encode

from goalstake.pneuma.abi import (
    GOAL_POOL_ABI,
    decode_function_result,
    encode_function_call,
    function_selector,
    goal_pool_abi,
    keccak256,
    load_abi,
)

ERC20_TRANSFER_ABI = [
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
    }
]


def test_selector_matches_known_value() -> None:
    assert function_selector(ERC20_TRANSFER_ABI, "transfer").hex() == "a9059cbb"


def test_keccak_is_not_nist_sha3() -> None:
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_encode_join_goal() -> None:
    calldata = encode_function_call(GOAL_POOL_ABI, "joinGoal", [7])
    selector = keccak256(b"joinGoal(uint256)")[:4].hex()
    assert calldata == "0x" + selector + encode(["uint256"], [7]).hex()


def test_encode_no_args() -> None:
    assert encode_function_call(GOAL_POOL_ABI, "createUser", []) == "0x" + keccak256(b"createUser()")[:4].hex()


def test_decode_bool_result() -> None:
    data = "0x" + encode(["bool"], [True]).hex()
    assert decode_function_result(GOAL_POOL_ABI, "userAddressUsed", data) is True


def test_decode_no_outputs() -> None:
    assert decode_function_result(GOAL_POOL_ABI, "claimRewards", "0x") is None


def test_unknown_function() -> None:
    with pytest.raises(ValueError, match="not found"):
        encode_function_call(GOAL_POOL_ABI, "withdraw", [])


class TestLoadAbi:
    def test_foundry_artifact(self, tmp_path: Path) -> None:
        path = tmp_path / "GoalPool.json"
        path.write_text(json.dumps({"abi": GOAL_POOL_ABI, "bytecode": {"object": "0x"}}), encoding="utf-8")
        assert goal_pool_abi(path) == GOAL_POOL_ABI

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "abi.json"
        path.write_text(json.dumps(ERC20_TRANSFER_ABI), encoding="utf-8")
        assert load_abi(path)[0]["name"] == "transfer"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_abi(tmp_path / "nope.json")

    def test_default_is_built_in(self) -> None:
        assert goal_pool_abi() is GOAL_POOL_ABI

    def test_round_trip_address_argument(self) -> None:
        address = "0x" + "11" * 20
        calldata = encode_function_call(GOAL_POOL_ABI, "userAddressUsed", [address])
        (decoded,) = decode(["address"], bytes.fromhex(calldata[10:]))
        assert decoded.lower() == address
