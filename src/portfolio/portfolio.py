"""
Portfolio: cash and position bookkeeping, signal -> order, fill -> state.

Validation happens in on_signal; on_fill always succeeds. Holdings are
mutable Position records keyed by symbol and never deleted. The
transaction log is append-only and in fill order.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from portfolio.position import Position
from portfolio.sizing import FixedFractionSizer, PassThroughRiskManager, RiskManager, SizeManager
from sim_core.contracts import DataEvent, Direction, FillEvent, FillSide, OrderEvent, OrderType, SignalEvent
from sim_core.errors import (
    InsufficientCash,
    InsufficientHoldings,
    InvalidSignal,
    NoPriceData,
    SignalRejected,
)
from sim_core.interfaces import DataFeed
from sim_core.money import ZERO, round_dp, to_decimal

logger = logging.getLogger("replay.portfolio")

DEFAULT_MIN_ORDER_QTY = Decimal("0.2")


class Portfolio:
    """Single-writer portfolio for one replay run."""

    def __init__(
        self,
        initial_cash: Decimal | float | str = ZERO,
        *,
        min_order_qty: Decimal | float | str = DEFAULT_MIN_ORDER_QTY,
        sizer: SizeManager | None = None,
        risk_manager: RiskManager | None = None,
        clear_holdings_on_reset: bool = False,
    ) -> None:
        self._initial_cash = to_decimal(initial_cash)
        self._cash = self._initial_cash
        self._holdings: dict[str, Position] = {}
        self._transactions: list[FillEvent] = []
        self.min_order_qty = to_decimal(min_order_qty)
        self.sizer: SizeManager = sizer or FixedFractionSizer()
        self.risk_manager: RiskManager = risk_manager or PassThroughRiskManager()
        self.clear_holdings_on_reset = clear_holdings_on_reset

    # --- cash ---

    @property
    def initial_cash(self) -> Decimal:
        return self._initial_cash

    @initial_cash.setter
    def initial_cash(self, value: Decimal | float | str) -> None:
        self._initial_cash = to_decimal(value)

    @property
    def cash(self) -> Decimal:
        return self._cash

    @cash.setter
    def cash(self, value: Decimal | float | str) -> None:
        self._cash = to_decimal(value)

    # --- read-only views ---

    @property
    def holdings(self) -> Mapping[str, Position]:
        return MappingProxyType(self._holdings)

    @property
    def transactions(self) -> tuple[FillEvent, ...]:
        return tuple(self._transactions)

    # --- events ---

    def on_signal(self, signal: SignalEvent, feed: DataFeed) -> OrderEvent:
        """Turn a signal into a sized market order.

        Raises InvalidSignal, InsufficientHoldings, InsufficientCash,
        NoPriceData, or whatever the risk manager raises.
        """
        if signal.direction not in (Direction.BUY, Direction.SELL):
            raise InvalidSignal(f"Signal for {signal.symbol} at {signal.timestamp.isoformat()} has no direction")

        pos = self._holdings.get(signal.symbol)
        held = pos.qty if pos is not None else ZERO
        if signal.direction == Direction.SELL and held <= self.min_order_qty:
            raise InsufficientHoldings(
                f"No holdings to sell: {signal.symbol} held {held} <= minimum {self.min_order_qty}"
            )

        latest = feed.latest(signal.symbol)
        if latest is None:
            raise NoPriceData(signal.symbol)

        if signal.direction == Direction.BUY and self._cash <= self.min_order_qty * latest.latest_price():
            raise InsufficientCash(
                f"Not enough cash to buy {signal.symbol}: cash {self._cash} <= "
                f"{self.min_order_qty} x {latest.latest_price()}"
            )

        order = OrderEvent(
            timestamp=signal.timestamp,
            symbol=signal.symbol,
            direction=signal.direction,
            qty=ZERO,
            order_type=OrderType.MARKET,
        )
        order = self.sizer.size_order(order, latest, self)
        order = self.risk_manager.evaluate_order(order, latest, self.holdings)
        if order.qty <= 0:
            raise SignalRejected(f"Sized order for {signal.symbol} has no quantity")
        return order

    def on_fill(self, fill: FillEvent) -> FillEvent:
        """Apply a fill: position in place, cash, transaction log."""
        pos = self._holdings.get(fill.symbol)
        if pos is None:
            self._holdings[fill.symbol] = Position.create(fill)
        else:
            pos.update(fill)

        if fill.direction == FillSide.BOUGHT:
            self._cash -= fill.net_value()
        else:
            self._cash += fill.net_value()

        self._transactions.append(fill)
        logger.debug(
            "Applied fill %s %s %s @ %s; cash now %s",
            fill.direction.value, fill.qty, fill.symbol, fill.price, self._cash,
        )
        return fill

    def update(self, event: DataEvent) -> None:
        """Mark the symbol's position to market, if invested."""
        pos, invested = self.is_invested(event.symbol)
        if invested and pos is not None:
            pos.update_value(event)

    # --- queries ---

    def is_invested(self, symbol: str) -> tuple[Position | None, bool]:
        """(position, True) when a non-flat position exists for *symbol*."""
        pos = self._holdings.get(symbol)
        if pos is not None and pos.qty != 0:
            return pos, True
        return pos, False

    def value(self) -> Decimal:
        """cash + sum of position market values, rounded to policy precision."""
        holdings_value = sum((p.market_value for p in self._holdings.values()), ZERO)
        return round_dp(self._cash + holdings_value)

    def view_holdings(self) -> str:
        if not self._holdings:
            return "No holdings."
        lines = []
        for symbol in sorted(self._holdings):
            p = self._holdings[symbol]
            lines.append(
                f"{symbol}: qty {p.qty} @ avg {round_dp(p.avg_price)} | "
                f"mkt {round_dp(p.market_value)} | PnL {round_dp(p.total_pnl)}"
            )
        return "\n".join(lines)

    def reset(self) -> None:
        """Zero the cash and clear the transaction log.

        Holdings survive unless the portfolio was built with
        ``clear_holdings_on_reset=True``. Initial cash is left untouched.
        """
        self._cash = ZERO
        self._transactions = []
        if self.clear_holdings_on_reset:
            self._holdings = {}

    def clear_holdings(self) -> None:
        """Drop every position. Used before replaying a run from scratch."""
        self._holdings = {}
