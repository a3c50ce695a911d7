"""
Native currency unit conversion.

Amounts typed by people are decimal strings in major units (e.g. "1.5");
the chain works in integer minor units (wei-equivalent, 18 decimals).
Conversion goes through Decimal so that no float ever carries value.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from ..errors import InvalidAmount

NATIVE_DECIMALS = 18

AmountLike = Union[str, int, Decimal]


def parse_ether(amount: AmountLike, decimals: int = NATIVE_DECIMALS) -> int:
    """
    Convert a positive major-unit amount to minor units, exactly.

    Args:
        amount: Decimal string such as "1.5" (ints and Decimals accepted)
        decimals: Number of fractional digits of the currency

    Returns:
        Amount in minor units

    Raises:
        InvalidAmount: If the amount is empty, not a finite decimal,
                       not positive, or finer than one minor unit
    """
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(f"Not a decimal amount: {amount!r}")

    text = str(amount).strip()
    if not text:
        raise InvalidAmount("Amount is empty")

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise InvalidAmount(f"Not a decimal amount: {text!r}") from None

    if not value.is_finite():
        raise InvalidAmount(f"Not a decimal amount: {text!r}")
    if value <= 0:
        raise InvalidAmount(f"Amount must be positive: {text}")

    with localcontext() as ctx:
        ctx.prec = 120
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise InvalidAmount(f"Amount has more than {decimals} decimal places: {text}")
        return int(scaled)


def format_ether(wei: int, decimals: int = NATIVE_DECIMALS) -> str:
    """Render minor units as a plain major-unit decimal string ("0.01")."""
    with localcontext() as ctx:
        ctx.prec = 120
        value = Decimal(int(wei)).scaleb(-decimals).normalize()
    text = f"{value:f}"
    return text if text != "-0" else "0"
