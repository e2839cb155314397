"""
Backtest result: read-only snapshot of a finished run.

Any renderer (terminal, JSON file, chart) consumes this; nothing here
knows how results are displayed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from performance.equity import EquityPoint
from sim_core.contracts import FillEvent, FillSide
from sim_core.money import ZERO


@dataclass(frozen=True)
class Rejection:
    """A signal that produced no order, or an order that produced no fill."""

    timestamp: datetime
    symbol: str
    stage: str  # "signal" | "execution"
    error: str  # exception class name
    message: str


@dataclass(frozen=True)
class BacktestResult:
    symbols: tuple[str, ...]
    start_time: datetime | None
    end_time: datetime | None
    initial_cash: Decimal
    final_cash: Decimal
    final_value: Decimal
    equity_curve: tuple[EquityPoint, ...] = ()
    transactions: tuple[FillEvent, ...] = ()
    event_count: int = 0
    rejections: tuple[Rejection, ...] = ()
    failures: tuple[Rejection, ...] = ()
    summary: dict[str, Any] = field(default_factory=dict)

    @property
    def total_return_pct(self) -> Decimal:
        if self.initial_cash <= 0:
            return ZERO
        return (self.final_value - self.initial_cash) / self.initial_cash * 100

    @property
    def buy_count(self) -> int:
        return sum(1 for f in self.transactions if f.direction == FillSide.BOUGHT)

    @property
    def sell_count(self) -> int:
        return sum(1 for f in self.transactions if f.direction == FillSide.SOLD)

    def rejection_counts(self) -> dict[str, int]:
        return dict(Counter(r.error for r in self.rejections))

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe structure: Decimals as strings, datetimes ISO-8601."""
        return {
            "symbols": list(self.symbols),
            "start_time": _jsonable(self.start_time),
            "end_time": _jsonable(self.end_time),
            "initial_cash": str(self.initial_cash),
            "final_cash": str(self.final_cash),
            "final_value": str(self.final_value),
            "event_count": self.event_count,
            "summary": {k: _jsonable(v) for k, v in self.summary.items()},
            "equity_curve": [p.to_dict() for p in self.equity_curve],
            "transactions": [_fill_dict(f) for f in self.transactions],
            "rejections": self.rejection_counts(),
            "failures": [_rejection_dict(r) for r in self.failures],
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


def _fill_dict(fill: FillEvent) -> dict[str, Any]:
    return {
        "timestamp": fill.timestamp.isoformat(),
        "symbol": fill.symbol,
        "exchange": fill.exchange,
        "direction": fill.direction.value,
        "qty": str(fill.qty),
        "price": str(fill.price),
        "commission": str(fill.commission),
        "exchange_fee": str(fill.exchange_fee),
        "cost": str(fill.cost),
    }


def _rejection_dict(r: Rejection) -> dict[str, Any]:
    return {
        "timestamp": r.timestamp.isoformat(),
        "symbol": r.symbol,
        "stage": r.stage,
        "error": r.error,
        "message": r.message,
    }
