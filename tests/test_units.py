"""Tests for exact decimal <-> minor unit conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from goalstake.errors import InvalidAmount
from goalstake.pneuma.units import format_ether, parse_ether


class TestParseEther:
    def test_fractional_amount_is_exact(self) -> None:
        assert parse_ether("1.5") == 1_500_000_000_000_000_000
        assert parse_ether("1.5") == 15 * 10**17

    def test_value_float_would_round(self) -> None:
        # 0.1 + 0.2 style drift must not appear
        assert parse_ether("0.3") == 300_000_000_000_000_000
        assert parse_ether("123456789.123456789123456789") == 123456789123456789123456789

    def test_smallest_unit(self) -> None:
        assert parse_ether("0.000000000000000001") == 1

    def test_accepts_int_and_decimal(self) -> None:
        assert parse_ether(2) == 2 * 10**18
        assert parse_ether(Decimal("0.01")) == 10**16

    def test_surrounding_whitespace(self) -> None:
        assert parse_ether("  0.5 ") == 5 * 10**17

    @pytest.mark.parametrize("amount", ["0", "-1", "", "   ", "0.0", "-0.5"])
    def test_rejects_non_positive_and_empty(self, amount: str) -> None:
        with pytest.raises(InvalidAmount):
            parse_ether(amount)

    @pytest.mark.parametrize("amount", ["abc", "1.2.3", "NaN", "Infinity", "0x10", None, True])
    def test_rejects_non_decimal(self, amount: object) -> None:
        with pytest.raises(InvalidAmount):
            parse_ether(amount)  # type: ignore[arg-type]

    def test_rejects_sub_unit_precision(self) -> None:
        with pytest.raises(InvalidAmount, match="decimal places"):
            parse_ether("0.0000000000000000001")


class TestFormatEther:
    def test_threshold(self) -> None:
        assert format_ether(10_000_000_000_000_000) == "0.01"

    def test_whole_and_zero(self) -> None:
        assert format_ether(3 * 10**18) == "3"
        assert format_ether(0) == "0"

    def test_one_unit(self) -> None:
        assert format_ether(1) == "0.000000000000000001"
