"""
Backtest engine: replay observations, route signals/orders/fills, record statistics.
"""

from backtest.engine import Backtest, run_backtest
from backtest.result import BacktestResult, Rejection

__all__ = ["Backtest", "BacktestResult", "Rejection", "run_backtest"]
