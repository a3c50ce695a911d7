"""Tests for the .env key store."""

from __future__ import annotations

from pathlib import Path

import pytest
from dotenv import dotenv_values
from eth_account import Account

from goalstake.sigil.eth import (
    create_key,
    load_authorized_accounts,
    load_private_keys,
    remember_authorized_accounts,
    save_private_key,
)


@pytest.fixture()
def env_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("PRIVATE_KEY", "")
    monkeypatch.setenv("PRIVATE_KEYS", "")
    monkeypatch.setenv("AUTHORIZED_ACCOUNTS", "")
    return tmp_path / ".goalstake" / ".env"


def test_create_key(env_path: Path) -> None:
    account = create_key(env_path)

    assert env_path.exists()
    assert Account.from_key(load_private_keys(env_path)[0]).address == account.address


def test_append_goes_to_extra_keys(env_path: Path) -> None:
    primary = create_key(env_path)
    extra = create_key(env_path, append=True)
    create_key(env_path, append=True)

    keys = load_private_keys(env_path)
    assert len(keys) == 3
    assert Account.from_key(keys[0]).address == primary.address
    assert Account.from_key(keys[1]).address == extra.address


def test_append_without_primary_sets_primary(env_path: Path) -> None:
    account = create_key(env_path, append=True)

    stored = dotenv_values(env_path)
    assert "PRIVATE_KEYS" not in stored
    assert Account.from_key(stored["PRIVATE_KEY"]).address == account.address


def test_save_keeps_other_entries(env_path: Path) -> None:
    env_path.parent.mkdir(parents=True)
    env_path.write_text("GOAL_CONTRACT_ADDRESS=0xabc\n", encoding="utf-8")

    save_private_key("11" * 32, env_path)

    stored = dotenv_values(env_path)
    assert stored["GOAL_CONTRACT_ADDRESS"] == "0xabc"
    assert stored["PRIVATE_KEY"] == "0x" + "11" * 32


def test_duplicate_extra_key_is_ignored(env_path: Path) -> None:
    save_private_key("11" * 32, env_path)
    save_private_key("22" * 32, env_path, append=True)
    save_private_key("0x" + "22" * 32, env_path, append=True)
    save_private_key("11" * 32, env_path, append=True)

    assert dotenv_values(env_path)["PRIVATE_KEYS"] == "0x" + "22" * 32


def test_authorized_accounts(env_path: Path) -> None:
    assert load_authorized_accounts(env_path) == set()

    remember_authorized_accounts(["0xAbC"], env_path)
    remember_authorized_accounts(["0xDEF", "0xabc"], env_path)

    assert load_authorized_accounts(env_path) == {"0xabc", "0xdef"}
