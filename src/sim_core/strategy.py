"""
Strategy interface and the placeholder random strategy.

A strategy sees the current observation, the feed and a read-only view of
the portfolio, and returns at most one signal. RandomStrategy is a test
fixture, not a trading rule: it exists to push orders through the pipeline.
"""

from __future__ import annotations

import random
from typing import Protocol

from sim_core.contracts import DataEvent, Direction, SignalEvent
from sim_core.interfaces import DataFeed, PortfolioView


class Strategy(Protocol):
    def calculate_signal(
        self,
        event: DataEvent,
        feed: DataFeed,
        portfolio: PortfolioView,
    ) -> SignalEvent | None:
        ...


class RandomStrategy:
    """Buy with probability ``buy_probability``, sell with ``sell_probability``.

    Pass either an ``rng`` (any object with ``random()``) or a ``seed``.
    With neither, the RNG is seeded from system entropy and runs are not
    reproducible.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        buy_probability: float = 0.2,
        sell_probability: float = 0.2,
    ) -> None:
        if buy_probability < 0 or sell_probability < 0 or buy_probability + sell_probability > 1:
            raise ValueError("Probabilities must be non-negative and sum to at most 1")
        self._rng = rng if rng is not None else random.Random(seed)
        self._buy = buy_probability
        self._sell = sell_probability

    def calculate_signal(
        self,
        event: DataEvent,
        feed: DataFeed,
        portfolio: PortfolioView,
    ) -> SignalEvent:
        draw = self._rng.random()
        if draw < self._buy:
            direction = Direction.BUY
        elif draw < self._buy + self._sell:
            direction = Direction.SELL
        else:
            direction = Direction.NONE
        return SignalEvent(timestamp=event.timestamp, symbol=event.symbol, direction=direction)
