"""Session state and the transaction coordinator."""

from .coordinator import TransactionCoordinator
from .models import DataRequest, GoalMembership, Notice, Session, SessionState

__all__ = [
    "DataRequest",
    "GoalMembership",
    "Notice",
    "Session",
    "SessionState",
    "TransactionCoordinator",
]
