"""
Simulated exchange: every order is a price taker and fills in full at the latest price.

No slippage, no partial fills, limit prices are not honoured. Stateless
across calls; the only inputs are the order and the feed.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from sim_core.contracts import Direction, FillEvent, FillSide, OrderEvent
from sim_core.errors import NoPriceData
from sim_core.interfaces import DataFeed
from sim_core.money import ZERO, to_decimal, truncate_dp

logger = logging.getLogger("replay.execution")

_FILL_SIDE = {
    Direction.BUY: FillSide.BOUGHT,
    Direction.SELL: FillSide.SOLD,
}


def calculate_commission(qty: Decimal, price: Decimal, rate: Decimal) -> Decimal:
    """Commission truncated (not rounded) to the policy precision.

    commission = floor(qty * price * rate * 10^4) / 10^4
    """
    return truncate_dp(qty * price * rate)


def calculate_exchange_fee(fee: Decimal) -> Decimal:
    """Fixed per-venue fee."""
    return fee


def calculate_cost(commission: Decimal, fee: Decimal) -> Decimal:
    return commission + fee


class Exchange:
    """Basic execution handler for a single venue."""

    def __init__(
        self,
        name: str = "simulated",
        *,
        commission_rate: Decimal | float | str = ZERO,
        exchange_fee: Decimal | float | str = ZERO,
    ) -> None:
        self.name = name
        self.commission_rate = to_decimal(commission_rate)
        self.exchange_fee = to_decimal(exchange_fee)

    def execute_order(self, order: OrderEvent, feed: DataFeed) -> FillEvent:
        """Fill *order* at the feed's latest price for its symbol.

        Raises NoPriceData if the feed has not seen the symbol, ValueError
        for an order without a buy/sell direction.
        """
        latest = feed.latest(order.symbol)
        if latest is None:
            raise NoPriceData(order.symbol)

        side = _FILL_SIDE.get(order.direction)
        if side is None:
            raise ValueError(f"Cannot execute order with direction {order.direction.value!r}")

        price = latest.latest_price()
        commission = calculate_commission(order.qty, price, self.commission_rate)
        fee = calculate_exchange_fee(self.exchange_fee)

        fill = FillEvent(
            timestamp=order.timestamp,
            symbol=order.symbol,
            exchange=self.name,
            direction=side,
            qty=order.qty,
            price=price,
            commission=commission,
            exchange_fee=fee,
            cost=calculate_cost(commission, fee),
        )
        logger.debug(
            "Filled %s %s %s @ %s (cost %s)",
            fill.direction.value, fill.qty, fill.symbol, fill.price, fill.cost,
        )
        return fill
