"""
Decimal policy for money and ratios.

One precision constant, one rounding rule. Values stay unrounded inside
calculations and are rounded only where they leave a component
(portfolio value, equity return, drawdown, reported ratios).
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

DP = 4

ZERO = Decimal("0")
ONE = Decimal("1")

_QUANTUM = Decimal(1).scaleb(-DP)  # Decimal("0.0001")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert *value* to Decimal without binary float artifacts.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``
    rather than ``Decimal("0.1000000000000000055511151231257827...")``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


def round_dp(value: Decimal) -> Decimal:
    """Round to the policy precision, half away from zero."""
    return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)


def truncate_dp(value: Decimal) -> Decimal:
    """Floor to the policy precision. Used for commission."""
    return value.quantize(_QUANTUM, rounding=ROUND_FLOOR)
