"""
Goal pool contract client.

Binds one contract address + ABI to the wallet gateway. Reads go through
the wallet's node; every write fetches a fresh signer so a transaction is
always signed by the account the wallet reports at call time.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx

from ..config import MIN_REGISTRATION_BALANCE_WEI
from ..errors import InsufficientBalance, InvalidGoalId, TransactionReverted
from ..sigil.provider import ProviderRpcError
from ..sigil.wallet import Signer, WalletGateway
from .abi import GOAL_POOL_ABI, decode_function_result, encode_function_call
from .rpc import RpcError
from .tx import TransactionReceipt, to_checksum_address
from .units import AmountLike, parse_ether

logger = logging.getLogger(__name__)

GoalId = Union[int, str]

# Failures that mean "the write did not land"
_TRANSPORT_ERRORS = (RpcError, ProviderRpcError, httpx.HTTPError, TimeoutError)


def goal_id_arg(goal_id: GoalId) -> int:
    """Coerce a goal id to its uint256 form."""
    if isinstance(goal_id, bool):
        raise InvalidGoalId(f"Invalid goal id: {goal_id!r}")
    if isinstance(goal_id, int):
        value = goal_id
    else:
        try:
            value = int(str(goal_id).strip(), 0)
        except ValueError:
            raise InvalidGoalId(f"Invalid goal id: {goal_id!r}") from None
    if value < 0 or value >= 2**256:
        raise InvalidGoalId(f"Goal id out of range: {goal_id!r}")
    return value


class ContractClient:
    def __init__(
        self,
        address: str,
        gateway: WalletGateway,
        abi: Optional[list] = None,
        min_balance: int = MIN_REGISTRATION_BALANCE_WEI,
        gas_limit: Optional[int] = None,
        receipt_timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> None:
        self.address = to_checksum_address(address)
        self.abi = abi or GOAL_POOL_ABI
        self.min_balance = min_balance
        self._gateway = gateway
        self._gas_limit = gas_limit
        self._receipt_timeout = receipt_timeout
        self._poll_interval = poll_interval

    # ============ Reads ============

    async def _read(self, function_name: str, args: list) -> Any:
        calldata = encode_function_call(self.abi, function_name, args)
        result = await self._gateway.call({"to": self.address, "data": calldata})
        if result is None or result == "0x":
            return None
        return decode_function_result(self.abi, function_name, result)

    async def user_exists(self, address: str) -> bool:
        """
        Whether ``address`` is registered.

        Never raises: any failure reads as "not registered".
        """
        try:
            used = await self._read("userAddressUsed", [to_checksum_address(address)])
        except Exception as exc:
            logger.warning("userAddressUsed(%s) failed, treating as unregistered: %s", address, exc)
            return False
        logger.debug("userAddressUsed(%s) = %s", address, used)
        return bool(used)

    # ============ Writes ============

    async def _write(self, signer: Signer, function_name: str, args: list, value: int = 0) -> TransactionReceipt:
        calldata = encode_function_call(self.abi, function_name, args)
        tx: dict[str, Any] = {"to": self.address, "data": calldata, "value": value}
        if self._gas_limit:
            tx["gas"] = self._gas_limit

        tx_hash = None
        try:
            tx_hash = await signer.send_transaction(tx)
            logger.info("%s submitted by %s: %s", function_name, signer.address, tx_hash)
            raw = await signer.wait_for_receipt(
                tx_hash, timeout=self._receipt_timeout, poll_interval=self._poll_interval
            )
        except _TRANSPORT_ERRORS as exc:
            raise TransactionReverted(f"{function_name} failed: {exc}", tx_hash=tx_hash) from exc

        receipt = TransactionReceipt.from_rpc(tx_hash, raw)
        if not receipt.succeeded:
            raise TransactionReverted(f"{function_name} reverted", tx_hash=receipt.tx_hash)
        return receipt

    async def create_user(self) -> TransactionReceipt:
        """
        Register the active account.

        Raises:
            InsufficientBalance: If the signer holds less than ``min_balance``
                                 (checked before anything is submitted)
            TransactionReverted: If the balance check or the write fails,
                                 or the write reverts
        """
        signer = await self._gateway.get_signer()
        try:
            balance = await signer.get_balance()
        except _TRANSPORT_ERRORS as exc:
            raise TransactionReverted(f"createUser balance check failed: {exc}") from exc
        if balance < self.min_balance:
            raise InsufficientBalance(balance, self.min_balance)
        return await self._write(signer, "createUser", [])

    async def join_goal(self, goal_id: GoalId, amount: AmountLike) -> TransactionReceipt:
        """
        Stake ``amount`` (major units, decimal string) into a goal.

        Raises:
            InvalidAmount: If amount is not a positive decimal
            InvalidGoalId: If goal_id is not a uint256
            TransactionReverted: If the write fails or reverts
        """
        value = parse_ether(amount)
        goal = goal_id_arg(goal_id)
        signer = await self._gateway.get_signer()
        return await self._write(signer, "joinGoal", [goal], value=value)

    async def claim_rewards(self, goal_id: GoalId) -> TransactionReceipt:
        goal = goal_id_arg(goal_id)
        signer = await self._gateway.get_signer()
        return await self._write(signer, "claimRewards", [goal])
