"""
Runtime configuration.

Values come from the process environment, optionally seeded from the
key store at ``~/.goalstake/.env`` (or ``$GOALSTAKE_HOME/.env``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_RPC_URL = "https://api.avax-test.network/ext/bc/C/rpc"
DEFAULT_CHAIN_ID = 43113  # Avalanche Fuji
DEFAULT_TOKEN_SERVICE_URL = "http://localhost:3000"
DEFAULT_NATIVE_SYMBOL = "AVAX"

# 0.01 of the native currency
MIN_REGISTRATION_BALANCE_WEI = 10_000_000_000_000_000


def goalstake_home() -> Path:
    return Path(os.environ.get("GOALSTAKE_HOME", str(Path.home() / ".goalstake")))


def default_env_path() -> Path:
    return goalstake_home() / ".env"


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    contract_address: Optional[str] = None
    contract_abi_path: Optional[Path] = None
    token_service_url: str = DEFAULT_TOKEN_SERVICE_URL
    native_symbol: str = DEFAULT_NATIVE_SYMBOL
    env_path: Optional[Path] = None

    def require_contract_address(self) -> str:
        if not self.contract_address:
            raise ValueError(
                f"GOAL_CONTRACT_ADDRESS not set. Export it or add it to {self.env_path or default_env_path()}."
            )
        return self.contract_address


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_path: Path to a .env file (default: ~/.goalstake/.env).
                  Values already in the environment win.

    Returns:
        Settings instance
    """
    env_path = env_path or default_env_path()
    if env_path.exists():
        load_dotenv(env_path, override=False)

    abi_path = os.environ.get("GOAL_CONTRACT_ABI")
    return Settings(
        rpc_url=os.environ.get("FUJI_RPC", DEFAULT_RPC_URL),
        chain_id=int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID))),
        contract_address=os.environ.get("GOAL_CONTRACT_ADDRESS") or None,
        contract_abi_path=Path(abi_path).expanduser() if abi_path else None,
        token_service_url=os.environ.get("TOKEN_SERVICE_URL", DEFAULT_TOKEN_SERVICE_URL),
        native_symbol=os.environ.get("NATIVE_SYMBOL", DEFAULT_NATIVE_SYMBOL),
        env_path=env_path,
    )
