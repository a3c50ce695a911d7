"""
Transaction coordinator.

Owns the client Session and runs the user-facing workflows (connect,
register, stake, claim, request verification data) against the wallet
gateway, the goal pool contract and the backend token service.

All workflows are asyncio coroutines on a single loop. They may interleave
with the account-change reaction; the reaction always overwrites
``account``/``is_registered`` with what the wallet reports (last write wins).
"""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from ..config import DEFAULT_NATIVE_SYMBOL
from ..errors import (
    GoalStakeError,
    InsufficientBalance,
    InvalidAmount,
    InvalidGoalId,
    NotConnected,
    UserRejected,
    WalletUnavailable,
)
from ..pneuma.units import format_ether, parse_ether
from .models import DataRequest, GoalMembership, Notice, Session, SessionState

logger = logging.getLogger(__name__)

CREATE_USER_FAILED = "Error creating user. Please try again."
JOIN_GOAL_OK = "Successfully joined the goal!"
JOIN_GOAL_FAILED = "Failed to join the goal. Please try again."
CLAIM_OK = "Rewards claimed!"
CLAIM_FAILED = "Failed to claim rewards. Please try again."


def _same_address(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return a is b
    return a.lower() == b.lower()


class TransactionCoordinator:
    """
    Stateful coordinator between the wallet, the contract and the backend.

    Args:
        gateway: WalletGateway (or anything with the same surface)
        contract: ContractClient for the goal pool
        exchange: TokenExchangeClient for the backend
        notify: Called with a Notice for every user-visible message
        data_sink: Receives each DataRequest; may be sync or async
        currency_symbol: Native currency symbol used in messages

    The account-change subscription is taken here and released by
    ``close()`` (or on leaving ``async with``).
    """

    def __init__(
        self,
        gateway: Any,
        contract: Any,
        exchange: Any,
        notify: Optional[Callable[[Notice], Any]] = None,
        data_sink: Optional[Callable[[DataRequest], Any]] = None,
        currency_symbol: str = DEFAULT_NATIVE_SYMBOL,
    ) -> None:
        self._gateway = gateway
        self._contract = contract
        self._exchange = exchange
        self._notify_cb = notify
        self._data_sink = data_sink
        self._symbol = currency_symbol
        self._session = Session()
        # pending registration re-checks, keyed to the account they read
        self._reactions: dict[asyncio.Task, str] = {}
        self._unsubscribe: Optional[Callable[[], None]] = gateway.on_accounts_changed(
            self._handle_accounts_changed
        )

    async def __aenter__(self) -> "TransactionCoordinator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ============ State ============

    @property
    def session(self) -> Session:
        """Snapshot copy of the session."""
        return dataclasses.replace(self._session)

    @property
    def account(self) -> Optional[str]:
        return self._session.account

    @property
    def is_registered(self) -> bool:
        return self._session.is_registered

    @property
    def is_loading(self) -> bool:
        return self._session.is_loading

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def last_error(self) -> Optional[str]:
        return self._session.last_error

    @last_error.setter
    def last_error(self, message: Optional[str]) -> None:
        self._session.last_error = message

    def clear_error(self) -> None:
        self._session.last_error = None

    # ============ Helpers ============

    def _notify(self, level: str, message: str, error: Optional[GoalStakeError] = None) -> None:
        if self._notify_cb is not None:
            self._notify_cb(Notice(level=level, message=message, error=error))

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self._session.is_loading = True
        try:
            yield
        finally:
            self._session.is_loading = False

    def _apply_accounts(self, accounts: list[str]) -> Optional[str]:
        account = accounts[0] if accounts else None
        if account is None or not _same_address(account, self._session.account):
            self._session.is_registered = False
        self._session.account = account
        return account

    async def _refresh_registration(self, account: str) -> bool:
        exists = await self._contract.user_exists(account)
        # the wallet may have moved on while we were waiting
        if _same_address(self._session.account, account):
            self._session.is_registered = exists
        logger.info("User exists for %s: %s", account, exists)
        return exists

    async def _sync_registration(self, account: str) -> None:
        for task, pending in list(self._reactions.items()):
            if _same_address(pending, account):
                # the account-change reaction is already reading it
                await task
                return
        await self._refresh_registration(account)

    def _fail(self, exc: GoalStakeError) -> GoalStakeError:
        self._session.last_error = exc.user_message
        self._notify("error", exc.user_message, exc)
        return exc

    # ============ Connection ============

    async def connect(self) -> str:
        """
        Connect the wallet, prompting for account access.

        Returns:
            The connected account

        Raises:
            WalletUnavailable: No wallet provider (session unchanged)
            UserRejected: The prompt was declined (session unchanged)
        """
        if not self._gateway.is_available():
            raise self._fail(WalletUnavailable())

        try:
            accounts = await self._gateway.request_accounts()
        except (WalletUnavailable, UserRejected) as exc:
            logger.warning("connect: %s", exc)
            self._fail(exc)
            raise

        if not accounts:
            raise self._fail(UserRejected("Wallet returned no accounts"))

        account = self._apply_accounts(accounts)
        await self._sync_registration(account)
        logger.info("Connected %s (%s)", account, self.state.value)
        return account

    async def restore_session(self) -> Optional[str]:
        """Adopt an already-authorised account at startup, without prompting."""
        if not self._gateway.is_available():
            self._fail(WalletUnavailable())
            return None

        accounts = await self._gateway.get_connected_accounts()
        if not accounts:
            logger.info("restore_session: no accounts found")
            return None

        account = self._apply_accounts(accounts)
        await self._sync_registration(account)
        return account

    async def get_balance(self) -> Optional[int]:
        """Balance of the connected account in minor units, or None."""
        account = self._session.account
        if account is None:
            return None
        return await self._gateway.get_balance(account)

    def _handle_accounts_changed(self, accounts: list[str]) -> None:
        account = self._apply_accounts(accounts)
        logger.info("Accounts changed, active account: %s", account)
        if account is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Accounts changed outside the event loop, registration of %s not re-checked", account)
            return
        task = loop.create_task(self._refresh_registration(account))
        self._reactions[task] = account
        task.add_done_callback(self._forget_reaction)

    def _forget_reaction(self, task: asyncio.Task) -> None:
        self._reactions.pop(task, None)

    async def settle(self) -> None:
        """Wait for pending account-change reactions."""
        while self._reactions:
            await asyncio.gather(*list(self._reactions))

    async def close(self) -> None:
        """Drop the account-change subscription and pending reactions."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        pending = list(self._reactions)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # ============ Workflows ============

    async def register(self) -> bool:
        """
        Create the on-chain user for the connected account.

        Returns:
            True once registered, False on failure (see ``last_error``)
        """
        account = self._session.account
        if account is None:
            self._fail(NotConnected())
            return False
        if self._session.is_registered:
            logger.info("register: %s is already registered", account)
            return True

        with self._loading():
            try:
                receipt = await self._contract.create_user()
            except InsufficientBalance as exc:
                logger.warning("register: %s", exc)
                self._session.last_error = (
                    f"Your wallet balance is below the minimum required balance of "
                    f"{format_ether(exc.required)} {self._symbol}."
                )
                self._notify("error", self._session.last_error, exc)
                return False
            except GoalStakeError as exc:
                logger.error("register: error creating user: %s", exc)
                self._session.last_error = CREATE_USER_FAILED
                self._notify("error", CREATE_USER_FAILED, exc)
                return False

        logger.info("createUser confirmed: %s", receipt.tx_hash)
        if _same_address(self._session.account, account):
            self._session.is_registered = True
        else:
            logger.warning("register: account switched from %s while registering", account)
        self._session.last_error = None
        return True

    async def stake(self, goal_id: Any, amount: Any) -> bool:
        """
        Join a goal by staking ``amount`` (major units).

        Does not require registration and does not touch ``is_loading``.
        Failures become notices; the session is never changed.
        """
        intent = GoalMembership(goal_id=goal_id, stake_amount=str(amount).strip())

        if self._session.account is None:
            exc = NotConnected()
            self._notify("error", JOIN_GOAL_FAILED, exc)
            return False

        try:
            parse_ether(intent.stake_amount)
            receipt = await self._contract.join_goal(intent.goal_id, intent.stake_amount)
        except (InvalidAmount, InvalidGoalId) as exc:
            logger.warning("stake: %s", exc)
            self._notify("error", exc.user_message, exc)
            return False
        except GoalStakeError as exc:
            logger.error("Failed to join goal %s: %s", intent.goal_id, exc)
            self._notify("error", JOIN_GOAL_FAILED, exc)
            return False

        logger.info("Joined goal %s with %s: %s", intent.goal_id, intent.stake_amount, receipt.tx_hash)
        self._notify("success", JOIN_GOAL_OK)
        return True

    async def claim(self, goal_id: Any) -> bool:
        """Claim rewards for a goal. ``is_loading`` is set while it runs."""
        with self._loading():
            try:
                receipt = await self._contract.claim_rewards(goal_id)
            except GoalStakeError as exc:
                logger.error("Failed to claim rewards for goal %s: %s", goal_id, exc)
                self._notify("error", CLAIM_FAILED, exc)
                return False

        logger.info("Claim rewards tx hash: %s", receipt.tx_hash)
        self._notify("success", CLAIM_OK)
        return True

    async def request_verification_data(self, activity_type: str, goal_id: Any) -> DataRequest:
        """
        Fetch an access token for the connected account and emit a data request.

        Raises:
            NotConnected: No account is connected
            ExchangeFailed: The token exchange failed; nothing is emitted
        """
        account = self._session.account
        if account is None:
            raise NotConnected()

        token = await self._exchange.exchange(account)
        record = DataRequest(
            activity_type=activity_type,
            goal_id=goal_id,
            access_token=str(token),
            account=account,
        )
        logger.info("Data request for goal %s, activity %s, account %s", goal_id, activity_type, account)

        if self._data_sink is not None:
            result = self._data_sink(record)
            if inspect.isawaitable(result):
                await result
        return record
