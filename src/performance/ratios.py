"""
Risk-adjusted return ratios over a per-step return series.

Pure functions on Decimal sequences. Standard deviation is the sample
deviation (n - 1). A ratio whose deviation is undefined (fewer than two
values) or zero is reported as 0.
"""

from __future__ import annotations

import statistics
from decimal import Decimal
from typing import Sequence

from sim_core.money import ZERO, to_decimal


def _stdev(values: Sequence[Decimal]) -> Decimal | None:
    if len(values) < 2:
        return None
    sd = statistics.stdev(values)
    if sd == 0:
        return None
    return sd


def sharpe_ratio(returns: Sequence[Decimal], risk_free: Decimal | float | str = ZERO) -> Decimal:
    """(mean(returns) - risk_free) / stdev(returns)."""
    sd = _stdev(returns)
    if sd is None:
        return ZERO
    return (statistics.mean(returns) - to_decimal(risk_free)) / sd


def sortino_ratio(returns: Sequence[Decimal], risk_free: Decimal | float | str = ZERO) -> Decimal:
    """(mean(returns) - risk_free) / stdev(strictly negative returns)."""
    sd = _stdev([r for r in returns if r < 0])
    if sd is None:
        return ZERO
    return (statistics.mean(returns) - to_decimal(risk_free)) / sd
