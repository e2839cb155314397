"""
Capability protocols between pipeline components.

One protocol per component rather than one per method. Concrete classes
live in data/, portfolio/, performance/ and execution/; sim_core depends on
none of them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Protocol, Sequence

from sim_core.contracts import DataEvent, Event, FillEvent, OrderEvent, SignalEvent

if TYPE_CHECKING:
    from portfolio.position import Position


class DataFeed(Protocol):
    """Ordered, finite replay of observations with latest-price lookup."""

    def __iter__(self) -> Iterator[DataEvent]:
        ...

    def latest(self, symbol: str) -> DataEvent | None:
        ...

    def latest_price(self, symbol: str, as_of: datetime | None = None) -> Decimal:
        """Latest known price; raises NoPriceData when none."""
        ...

    def reset(self) -> None:
        ...


class PortfolioView(Protocol):
    """Read-only portfolio surface handed to strategies."""

    @property
    def cash(self) -> Decimal:
        ...

    def is_invested(self, symbol: str) -> tuple[Position | None, bool]:
        ...

    def value(self) -> Decimal:
        ...


class PortfolioAPI(PortfolioView, Protocol):
    def on_signal(self, signal: SignalEvent, feed: DataFeed) -> OrderEvent:
        ...

    def on_fill(self, fill: FillEvent) -> FillEvent:
        ...

    def update(self, event: DataEvent) -> None:
        ...

    def clear_holdings(self) -> None:
        ...

    def reset(self) -> None:
        ...

    @property
    def initial_cash(self) -> Decimal:
        ...

    @property
    def transactions(self) -> Sequence[FillEvent]:
        ...

    @property
    def holdings(self) -> Mapping[str, Position]:
        ...


class ExecutionHandler(Protocol):
    def execute_order(self, order: OrderEvent, feed: DataFeed) -> FillEvent:
        ...


class StatisticsAPI(Protocol):
    """Equity recording plus the queries a run result is built from."""

    def update(self, event: DataEvent, portfolio_value: Decimal) -> object:
        ...

    @property
    def events(self) -> Sequence[Event]:
        ...

    @property
    def transactions(self) -> Sequence[FillEvent]:
        ...

    @property
    def equity(self) -> Sequence[Any]:
        ...

    def summary(self, risk_free: Decimal) -> dict:
        ...

    def track_event(self, event: Event) -> None:
        ...

    def track_transaction(self, fill: FillEvent) -> None:
        ...

    def reset(self) -> None:
        ...
