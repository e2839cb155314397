"""
Event contracts for the replay pipeline: DataEvent, SignalEvent, OrderEvent, FillEvent.

Causal order per observation: DataEvent -> SignalEvent -> OrderEvent -> FillEvent.
No I/O; these are plain frozen dataclasses. All prices, quantities and
costs are Decimal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class Direction(str, Enum):
    """Trading intention carried by signals and orders."""

    BUY = "buy"
    SELL = "sell"
    NONE = "none"


class FillSide(str, Enum):
    """Side of an executed fill. Kept apart from Direction on purpose."""

    BOUGHT = "BOT"
    SOLD = "SLD"


class OrderType(str, Enum):
    MARKET = "MKT"
    LIMIT = "LMT"


@dataclass(frozen=True)
class Event:
    """Base event: when and for which symbol."""

    timestamp: datetime
    symbol: str


@dataclass(frozen=True)
class DataEvent(Event):
    """One price observation. Only ``close`` is required."""

    close: Decimal
    open: Decimal | None = None
    high: Decimal | None = None
    low: Decimal | None = None
    volume: Decimal | None = None

    def latest_price(self) -> Decimal:
        return self.close


@dataclass(frozen=True)
class SignalEvent(Event):
    direction: Direction = Direction.NONE


@dataclass(frozen=True)
class OrderEvent(Event):
    direction: Direction
    qty: Decimal
    order_type: OrderType = OrderType.MARKET
    limit_price: Decimal | None = None


@dataclass(frozen=True)
class FillEvent(Event):
    """Simulated execution of an order. Immutable once produced."""

    exchange: str
    direction: FillSide
    qty: Decimal
    price: Decimal
    commission: Decimal
    exchange_fee: Decimal
    cost: Decimal

    def value(self) -> Decimal:
        """Gross traded value: price x qty."""
        return self.price * self.qty

    def net_value(self) -> Decimal:
        """Net cash impact magnitude.

        Bought: gross value plus costs (cash paid).
        Sold:   gross value minus costs (cash received).
        """
        if self.direction == FillSide.BOUGHT:
            return self.value() + self.cost
        return self.value() - self.cost
