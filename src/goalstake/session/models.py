from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from ..errors import GoalStakeError


class SessionState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    UNREGISTERED = "connected/unregistered"
    REGISTERED = "connected/registered"


@dataclass
class Session:
    """Live client state. ``account`` is the only source of truth for "connected"."""

    account: Optional[str] = None
    is_registered: bool = False
    is_loading: bool = False
    last_error: Optional[str] = None

    @property
    def state(self) -> SessionState:
        if self.account is None:
            return SessionState.DISCONNECTED
        if self.is_registered:
            return SessionState.REGISTERED
        return SessionState.UNREGISTERED


@dataclass(frozen=True)
class GoalMembership:
    goal_id: Union[int, str]
    stake_amount: str


@dataclass(frozen=True)
class DataRequest:
    """Verification data request handed to the data requesting service."""

    activity_type: str
    goal_id: Union[int, str]
    access_token: str
    account: str

    def to_dict(self) -> dict:
        return {
            "activityType": self.activity_type,
            "goalId": self.goal_id,
            "accessToken": self.access_token,
            "account": self.account,
        }


@dataclass(frozen=True)
class Notice:
    """User-visible message ("info", "success" or "error")."""

    level: str
    message: str
    error: Optional[GoalStakeError] = None
