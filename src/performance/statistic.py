"""
Statistics engine: equity curve, drawdown, high/low watermarks, risk ratios.

update() is called once per processed observation with the portfolio's
reported value. Points are append-only, so call order is chronological
order. The running peak index and the max-drawdown index are maintained
during update(); queries never rescan history.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from performance.equity import EquityPoint
from performance.ratios import sharpe_ratio, sortino_ratio
from sim_core.contracts import DataEvent, Event, FillEvent
from sim_core.errors import NoEquityData
from sim_core.money import ONE, ZERO, round_dp, to_decimal


class Statistics:
    """Single-writer statistics for one replay run."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        """Clear events, transactions, equity curve and watermarks."""
        self._events: list[Event] = []
        self._transactions: list[FillEvent] = []
        self._equity: list[EquityPoint] = []
        self._peak_index: list[int] = []
        self._high: EquityPoint | None = None
        self._high_index = 0
        self._low: EquityPoint | None = None
        self._max_dd_index = 0

    # --- tracking ---

    def track_event(self, event: Event) -> None:
        self._events.append(event)

    def track_transaction(self, fill: FillEvent) -> None:
        self._transactions.append(fill)

    @property
    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

    @property
    def transactions(self) -> tuple[FillEvent, ...]:
        return tuple(self._transactions)

    @property
    def equity(self) -> tuple[EquityPoint, ...]:
        return tuple(self._equity)

    @property
    def high(self) -> EquityPoint | None:
        """High-water point: latest point with the highest equity so far."""
        return self._high

    @property
    def low(self) -> EquityPoint | None:
        return self._low

    def returns(self) -> list[Decimal]:
        return [p.equity_return for p in self._equity]

    # --- update ---

    def update(self, event: DataEvent, portfolio_value: Decimal | float | str) -> EquityPoint:
        """Record the equity point for *event* and return it."""
        equity = to_decimal(portfolio_value)
        point = EquityPoint(
            timestamp=event.timestamp,
            equity=equity,
            equity_return=self._calc_equity_return(equity),
            drawdown=self._calc_drawdown(equity),
        )
        index = len(self._equity)

        if self._high is None or equity >= self._high.equity:
            self._high = point
            self._high_index = index
        if self._low is None or equity <= self._low.equity:
            self._low = point

        self._equity.append(point)
        self._peak_index.append(self._high_index)
        if point.drawdown < self._equity[self._max_dd_index].drawdown:
            self._max_dd_index = index
        return point

    def _calc_equity_return(self, equity: Decimal) -> Decimal:
        if not self._equity:
            return ZERO
        last = self._equity[-1].equity
        if last == 0:
            return ONE
        return round_dp((equity - last) / last)

    def _calc_drawdown(self, equity: Decimal) -> Decimal:
        # A non-positive high has no meaningful fractional drawdown.
        if self._high is None or self._high.equity <= 0:
            return ZERO
        high = self._high.equity
        if equity >= high:
            return ZERO
        return round_dp((equity - high) / high)

    # --- results ---

    def total_equity_return(self) -> Decimal:
        """(last - first) / first. Raises NoEquityData on an empty curve."""
        if not self._equity:
            raise NoEquityData("Could not calculate total equity return, no equity points found")
        first = self._equity[0].equity
        last = self._equity[-1].equity
        if first == 0:
            return ONE
        return round_dp((last - first) / first)

    def _max_drawdown_point(self) -> EquityPoint:
        if not self._equity:
            return EquityPoint()
        return self._equity[self._max_dd_index]

    def max_drawdown(self) -> Decimal:
        return self._max_drawdown_point().drawdown

    def max_drawdown_time(self) -> datetime | None:
        return self._max_drawdown_point().timestamp

    def max_drawdown_duration(self) -> timedelta:
        """Time from the peak preceding the max drawdown to the max drawdown."""
        if not self._equity:
            return timedelta(0)
        trough = self._equity[self._max_dd_index]
        peak = self._equity[self._peak_index[self._max_dd_index]]
        return trough.timestamp - peak.timestamp

    def sharpe_ratio(self, risk_free: Decimal | float | str = ZERO) -> Decimal:
        return round_dp(sharpe_ratio(self.returns(), risk_free))

    def sortino_ratio(self, risk_free: Decimal | float | str = ZERO) -> Decimal:
        return round_dp(sortino_ratio(self.returns(), risk_free))

    def summary(self, risk_free: Decimal | float | str = ZERO) -> dict:
        """Summary ratios for reporting. Empty curve -> total_return None."""
        dd_time = self.max_drawdown_time()
        return {
            "equity_points": len(self._equity),
            "events": len(self._events),
            "transactions": len(self._transactions),
            "total_return": self.total_equity_return() if self._equity else None,
            "max_drawdown": self.max_drawdown(),
            "max_drawdown_time": dd_time,
            "max_drawdown_duration": self.max_drawdown_duration(),
            "sharpe_ratio": self.sharpe_ratio(risk_free),
            "sortino_ratio": self.sortino_ratio(risk_free),
            "high": self._high.equity if self._high else None,
            "low": self._low.equity if self._low else None,
        }
