__all__ = [
    # Session
    "TransactionCoordinator",
    "Session",
    "SessionState",
    "GoalMembership",
    "DataRequest",
    "Notice",
    # Collaborators
    "WalletGateway",
    "Signer",
    "LocalKeyProvider",
    "ContractClient",
    "TokenExchangeClient",
    "AccessToken",
    "RpcClient",
    "TransactionReceipt",
    # Units
    "parse_ether",
    "format_ether",
    # Config
    "Settings",
    "load_settings",
    # Errors
    "GoalStakeError",
    "WalletUnavailable",
    "UserRejected",
    "InsufficientBalance",
    "InvalidAmount",
    "InvalidGoalId",
    "TransactionReverted",
    "ExchangeFailed",
    "NotConnected",
]

from .config import Settings, load_settings
from .errors import (
    ExchangeFailed,
    GoalStakeError,
    InsufficientBalance,
    InvalidAmount,
    InvalidGoalId,
    NotConnected,
    TransactionReverted,
    UserRejected,
    WalletUnavailable,
)
from .pneuma.contract import ContractClient
from .pneuma.rpc import RpcClient
from .pneuma.tx import TransactionReceipt
from .pneuma.units import format_ether, parse_ether
from .relay.exchange import AccessToken, TokenExchangeClient
from .session import DataRequest, GoalMembership, Notice, Session, SessionState, TransactionCoordinator
from .sigil.provider import LocalKeyProvider
from .sigil.wallet import Signer, WalletGateway
