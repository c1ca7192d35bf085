"""
Unit conversion utilities for NEAR amounts and gas.

Balances on chain are integers in yoctoNEAR (1 NEAR = 10^24 yoctoNEAR);
gas is an integer count where 1 TGas = 10^12 gas.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union


class Units:
    """Denomination constants."""

    NEAR_NOMINATION_EXP = 24
    YOCTO_PER_NEAR = 10 ** NEAR_NOMINATION_EXP

    GAS_PER_TGAS = 10 ** 12

    # Default gas attached by wallets and the NEAR CLI to a function call
    DEFAULT_FUNCTION_CALL_GAS = 30 * GAS_PER_TGAS
    # Protocol upper bound on gas attached to one transaction
    MAX_GAS = 300 * GAS_PER_TGAS


def parse_near_amount(amount: Union[str, int, Decimal]) -> int:
    """
    Convert a human NEAR amount to yoctoNEAR.

    Args:
        amount: Amount such as ``"1.5"`` or ``"1,000"``; floats are rejected
            to avoid binary rounding

    Returns:
        Amount in yoctoNEAR

    Raises:
        ValueError: If the amount is negative, malformed, or has more than
            24 decimal places
    """
    if isinstance(amount, float):
        raise ValueError("Pass NEAR amounts as str or Decimal, not float")
    if isinstance(amount, str):
        amount = amount.strip().replace(",", "")
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"Invalid NEAR amount: {amount!r}")

    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid NEAR amount: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = 80
        yocto = value.scaleb(Units.NEAR_NOMINATION_EXP)
    if yocto != yocto.to_integral_value():
        raise ValueError(f"NEAR amount has more than {Units.NEAR_NOMINATION_EXP} decimal places: {amount!r}")
    return int(yocto)


def format_near_amount(yocto: int, fraction_digits: int = Units.NEAR_NOMINATION_EXP) -> str:
    """
    Convert yoctoNEAR to a human NEAR amount.

    Args:
        yocto: Amount in yoctoNEAR
        fraction_digits: Maximum decimal places to keep (truncates, never rounds up)

    Returns:
        Decimal string without trailing zeros, e.g. ``"1.5"``
    """
    if yocto < 0:
        raise ValueError(f"Negative amount: {yocto}")

    whole, frac = divmod(yocto, Units.YOCTO_PER_NEAR)
    frac_str = str(frac).rjust(Units.NEAR_NOMINATION_EXP, "0")[:fraction_digits].rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)


def tgas(amount: Union[int, str, Decimal]) -> int:
    """Convert TGas to gas units."""
    gas = Decimal(amount) * Units.GAS_PER_TGAS
    if gas < 0 or gas != gas.to_integral_value():
        raise ValueError(f"Invalid TGas amount: {amount!r}")
    return int(gas)


__all__ = ["Units", "parse_near_amount", "format_near_amount", "tgas"]
