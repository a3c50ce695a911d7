"""
ECDSA / secp256k1 key management for goalstake.

Keys back the local wallet provider and sign goal pool transactions
(createUser, joinGoal, claimRewards).

Keys are stored in ~/.goalstake/.env as PRIVATE_KEY (hex format); extra
accounts are listed comma-separated in PRIVATE_KEYS. Accounts the user
has approved for goalstake are remembered in AUTHORIZED_ACCOUNTS, the
way a browser wallet remembers a trusted site.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Iterable, Optional

from dotenv import dotenv_values, load_dotenv, set_key
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import default_env_path

AUTHORIZED_ACCOUNTS = "AUTHORIZED_ACCOUNTS"


def _split(value: Optional[str]) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _normalize_key(private_key: str) -> str:
    private_key = private_key.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def _store_values(env_path: Path, **values: str) -> None:
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch()
    for key, value in values.items():
        set_key(env_path, key, value)
    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)


def save_private_key(private_key: str, env_path: Optional[Path] = None, append: bool = False) -> Path:
    """
    Store a private key in the .env key store, keeping other entries.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.goalstake/.env)
        append: Add the key to PRIVATE_KEYS instead of replacing
                PRIVATE_KEY (ignored while there is no primary key)

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or default_env_path()
    private_key = _normalize_key(private_key)
    stored = dotenv_values(env_path) if env_path.exists() else {}

    if append and stored.get("PRIVATE_KEY"):
        extra = [_normalize_key(key) for key in _split(stored.get("PRIVATE_KEYS"))]
        if private_key not in extra and private_key != _normalize_key(stored["PRIVATE_KEY"]):
            extra.append(private_key)
        _store_values(env_path, PRIVATE_KEYS=",".join(extra))
    else:
        _store_values(env_path, PRIVATE_KEY=private_key)
    return env_path


def create_key(env_path: Optional[Path] = None, append: bool = False) -> LocalAccount:
    """
    Generate a new ECDSA/secp256k1 key (EOA) and store it.

    Returns:
        The new account
    """
    private_key = "0x" + secrets.token_hex(32)
    save_private_key(private_key, env_path, append=append)
    return Account.from_key(private_key)


def load_private_keys(env_path: Optional[Path] = None) -> list[str]:
    """
    Load all configured private keys, PRIVATE_KEY first.

    Args:
        env_path: Path to .env file (default: ~/.goalstake/.env)

    Returns:
        0x-prefixed hex private keys, deduplicated, in order

    Raises:
        ValueError: If no key is configured
    """
    env_path = env_path or default_env_path()

    if env_path.exists():
        load_dotenv(env_path, override=True)

    raw = [os.environ.get("PRIVATE_KEY", "")]
    raw.extend(_split(os.environ.get("PRIVATE_KEYS")))

    keys: list[str] = []
    for value in raw:
        if value.strip():
            key = _normalize_key(value)
            if key not in keys:
                keys.append(key)

    if not keys:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'goalstake init' or set "
            f"PRIVATE_KEY in {env_path}"
        )
    return keys


def load_private_key(env_path: Optional[Path] = None) -> str:
    """Load the primary private key (see load_private_keys)."""
    return load_private_keys(env_path)[0]


def load_authorized_accounts(env_path: Optional[Path] = None) -> set[str]:
    """Lower-cased addresses previously approved for goalstake."""
    env_path = env_path or default_env_path()
    if not env_path.exists():
        return set()
    return {address.lower() for address in _split(dotenv_values(env_path).get(AUTHORIZED_ACCOUNTS))}


def remember_authorized_accounts(addresses: Iterable[str], env_path: Optional[Path] = None) -> None:
    """Add ``addresses`` to the remembered approvals."""
    env_path = env_path or default_env_path()
    known = sorted(load_authorized_accounts(env_path) | {address.lower() for address in addresses})
    _store_values(env_path, **{AUTHORIZED_ACCOUNTS: ",".join(known)})


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key.
                     If None, loads from .env.
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_address(private_key: Optional[str] = None) -> str:
    """0x-prefixed checksummed address for a private key."""
    return get_account(private_key).address
