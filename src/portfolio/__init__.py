"""
Portfolio: cash/position bookkeeping and the order sizing policy.
Single writer per run.
"""

from portfolio.portfolio import DEFAULT_MIN_ORDER_QTY, Portfolio
from portfolio.position import Position
from portfolio.sizing import (
    FixedFractionSizer,
    MaxPositionRiskManager,
    PassThroughRiskManager,
    RiskManager,
    SizeManager,
)

__all__ = [
    "DEFAULT_MIN_ORDER_QTY",
    "FixedFractionSizer",
    "MaxPositionRiskManager",
    "PassThroughRiskManager",
    "Portfolio",
    "Position",
    "RiskManager",
    "SizeManager",
]
