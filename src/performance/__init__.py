"""
Performance statistics: equity curve, drawdown and risk ratios.
"""

from performance.equity import EquityPoint
from performance.ratios import sharpe_ratio, sortino_ratio
from performance.statistic import Statistics

__all__ = ["EquityPoint", "Statistics", "sharpe_ratio", "sortino_ratio"]
