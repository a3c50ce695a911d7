"""
Error taxonomy for goal staking workflows.

Every error carries an ``exit_code`` used by the CLI and a
``user_message`` suitable for showing to a person.
"""

from __future__ import annotations

from typing import Optional


class GoalStakeError(RuntimeError):
    exit_code: int = 1
    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)


class WalletUnavailable(GoalStakeError):
    exit_code = 2
    user_message = "No wallet found. Run 'goalstake init' to create one."


class UserRejected(GoalStakeError):
    exit_code = 3
    user_message = "Wallet connection was rejected."


class InsufficientBalance(GoalStakeError):
    exit_code = 4
    user_message = "Your wallet balance is below the minimum required balance."

    def __init__(self, balance: int, required: int, message: Optional[str] = None) -> None:
        self.balance = balance
        self.required = required
        super().__init__(message or f"Balance {balance} is below the required {required}")


class InvalidAmount(GoalStakeError):
    exit_code = 5
    user_message = "Please enter a valid amount to join the goal."


class InvalidGoalId(GoalStakeError):
    exit_code = 5
    user_message = "Unknown goal."


class TransactionReverted(GoalStakeError):
    exit_code = 6
    user_message = "Transaction failed. Please try again."

    def __init__(self, message: Optional[str] = None, tx_hash: Optional[str] = None) -> None:
        self.tx_hash = tx_hash
        super().__init__(message)


class ExchangeFailed(GoalStakeError):
    exit_code = 7
    user_message = "Could not fetch an access token."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class NotConnected(GoalStakeError):
    exit_code = 8
    user_message = "Wallet is not connected."


__all__ = [
    "ExchangeFailed",
    "GoalStakeError",
    "InsufficientBalance",
    "InvalidAmount",
    "InvalidGoalId",
    "NotConnected",
    "TransactionReverted",
    "UserRejected",
    "WalletUnavailable",
]
