"""
Position: net holdings and valuation for one symbol.

Average-cost accounting. Adding to a position moves the average price;
reducing it realises PnL against the average price; crossing through zero
re-opens the remainder at the fill price. Transaction costs are charged to
realised PnL as they occur.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sim_core.contracts import DataEvent, FillEvent, FillSide
from sim_core.money import ZERO


@dataclass
class Position:
    """Mutable record owned by exactly one Portfolio. Updated in place."""

    symbol: str
    qty: Decimal = ZERO
    qty_bought: Decimal = ZERO
    qty_sold: Decimal = ZERO
    avg_price: Decimal = ZERO
    value_bought: Decimal = ZERO
    value_sold: Decimal = ZERO
    market_price: Decimal = ZERO
    market_value: Decimal = ZERO
    commission: Decimal = ZERO
    exchange_fee: Decimal = ZERO
    cost: Decimal = ZERO
    realised_pnl: Decimal = ZERO
    unrealised_pnl: Decimal = ZERO
    updated_at: datetime | None = None

    @classmethod
    def create(cls, fill: FillEvent) -> Position:
        """Open a new position from its first fill."""
        pos = cls(symbol=fill.symbol)
        pos.update(fill)
        return pos

    @property
    def total_pnl(self) -> Decimal:
        return self.realised_pnl + self.unrealised_pnl

    @property
    def is_flat(self) -> bool:
        return self.qty == 0

    def update(self, fill: FillEvent) -> None:
        """Apply a fill for this symbol."""
        if fill.symbol != self.symbol:
            raise ValueError(f"Fill for {fill.symbol} applied to position {self.symbol}")

        if fill.direction == FillSide.BOUGHT:
            signed = fill.qty
            self.qty_bought += fill.qty
            self.value_bought += fill.value()
        else:
            signed = -fill.qty
            self.qty_sold += fill.qty
            self.value_sold += fill.value()

        self.commission += fill.commission
        self.exchange_fee += fill.exchange_fee
        self.cost += fill.cost
        self.realised_pnl -= fill.cost

        new_qty = self.qty + signed
        if self.qty == 0 or (self.qty > 0) == (signed > 0):
            self.avg_price = (abs(self.qty) * self.avg_price + fill.qty * fill.price) / abs(new_qty)
        else:
            closed = min(fill.qty, abs(self.qty))
            sign = 1 if self.qty > 0 else -1
            self.realised_pnl += (fill.price - self.avg_price) * closed * sign
            if new_qty == 0:
                self.avg_price = ZERO
            elif (new_qty > 0) != (self.qty > 0):
                self.avg_price = fill.price

        self.qty = new_qty
        self._mark(fill.price, fill.timestamp)

    def update_value(self, event: DataEvent) -> None:
        """Mark to market at the observation's price."""
        self._mark(event.latest_price(), event.timestamp)

    def _mark(self, price: Decimal, ts: datetime) -> None:
        self.market_price = price
        self.market_value = self.qty * price
        self.unrealised_pnl = (price - self.avg_price) * self.qty
        self.updated_at = ts
