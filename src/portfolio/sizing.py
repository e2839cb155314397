"""
Order sizing and risk hooks.

Portfolio builds an unsized market order from a signal, hands it to a
SizeManager, then to a RiskManager. Either can be swapped for a richer
policy without touching Portfolio.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Mapping, Protocol

from sim_core.contracts import DataEvent, Direction, OrderEvent
from sim_core.errors import RiskRejected
from sim_core.money import to_decimal

if TYPE_CHECKING:
    from portfolio.position import Position
    from sim_core.interfaces import PortfolioView


class SizeManager(Protocol):
    def size_order(
        self,
        order: OrderEvent,
        latest: DataEvent,
        portfolio: PortfolioView,
    ) -> OrderEvent:
        ...


class RiskManager(Protocol):
    def evaluate_order(
        self,
        order: OrderEvent,
        latest: DataEvent,
        holdings: Mapping[str, Position],
    ) -> OrderEvent:
        """Return the (possibly adjusted) order or raise RiskRejected."""
        ...


class FixedFractionSizer:
    """qty = fraction x unit_qty, regardless of price or equity."""

    def __init__(
        self,
        fraction: Decimal | float | str = Decimal("0.2"),
        unit_qty: Decimal | float | str = Decimal("1"),
    ) -> None:
        self.fraction = to_decimal(fraction)
        self.unit_qty = to_decimal(unit_qty)
        if self.fraction <= 0 or self.unit_qty <= 0:
            raise ValueError("fraction and unit_qty must be positive")

    def size_order(
        self,
        order: OrderEvent,
        latest: DataEvent,
        portfolio: PortfolioView,
    ) -> OrderEvent:
        return replace(order, qty=self.fraction * self.unit_qty)


class PassThroughRiskManager:
    """Accepts every order unchanged."""

    def evaluate_order(
        self,
        order: OrderEvent,
        latest: DataEvent,
        holdings: Mapping[str, Position],
    ) -> OrderEvent:
        return order


class MaxPositionRiskManager:
    """Reject buys that would take a long position above ``max_qty``."""

    def __init__(self, max_qty: Decimal | float | str) -> None:
        self.max_qty = to_decimal(max_qty)

    def evaluate_order(
        self,
        order: OrderEvent,
        latest: DataEvent,
        holdings: Mapping[str, Position],
    ) -> OrderEvent:
        if order.direction != Direction.BUY:
            return order
        pos = holdings.get(order.symbol)
        held = pos.qty if pos is not None else Decimal("0")
        if held + order.qty > self.max_qty:
            raise RiskRejected(
                f"Buying {order.qty} {order.symbol} would exceed max position {self.max_qty} (held {held})"
            )
        return order
