"""
Historic feed: replay observations in timestamp order, remember the latest per symbol.

The feed only knows what it has already replayed. latest() before the first
observation of a symbol returns None, so nothing downstream can look ahead.
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Iterator

from sim_core.contracts import DataEvent
from sim_core.errors import NoPriceData


class HistoricFeed:
    """In-memory, finite feed over pre-loaded observations.

    Observations are sorted by timestamp on construction (stable, so equal
    timestamps keep source order).
    """

    def __init__(self, observations: Iterable[DataEvent]) -> None:
        self._observations: list[DataEvent] = sorted(observations, key=lambda e: e.timestamp)
        self._seen: dict[str, list[DataEvent]] = {}
        self._cursor = 0

    def __iter__(self) -> Iterator[DataEvent]:
        while self._cursor < len(self._observations):
            event = self._observations[self._cursor]
            self._cursor += 1
            self._seen.setdefault(event.symbol, []).append(event)
            yield event

    def __len__(self) -> int:
        return len(self._observations)

    @property
    def symbols(self) -> list[str]:
        return sorted({e.symbol for e in self._observations})

    @property
    def observations(self) -> tuple[DataEvent, ...]:
        return tuple(self._observations)

    def latest(self, symbol: str) -> DataEvent | None:
        """Most recent replayed observation for *symbol*, or None."""
        seen = self._seen.get(symbol)
        if not seen:
            return None
        return seen[-1]

    def latest_price(self, symbol: str, as_of: datetime | None = None) -> Decimal:
        """Latest known price for *symbol*, optionally at or before *as_of*.

        Raises NoPriceData when nothing qualifying has been replayed.
        """
        seen = self._seen.get(symbol)
        if not seen:
            raise NoPriceData(symbol)
        if as_of is None:
            return seen[-1].latest_price()
        idx = bisect_right(seen, as_of, key=lambda e: e.timestamp)
        if idx == 0:
            raise NoPriceData(symbol)
        return seen[idx - 1].latest_price()

    def reset(self) -> None:
        """Rewind to the first observation and forget latest prices."""
        self._cursor = 0
        self._seen = {}
