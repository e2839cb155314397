"""Pytest fixtures: observation sequences and scripted strategies for deterministic tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from sim_core.contracts import DataEvent, Direction, SignalEvent

BASE_TS = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)


def _ts(i: int) -> datetime:
    return BASE_TS + timedelta(days=i)


def obs(i: int, close: str | float, symbol: str = "USDT-ETH") -> DataEvent:
    return DataEvent(timestamp=_ts(i), symbol=symbol, close=Decimal(str(close)))


class ScriptedStrategy:
    """Emits the scripted direction per observation index; None past the end."""

    def __init__(self, script: list[Direction | None]) -> None:
        self._script = list(script)
        self._i = 0

    def calculate_signal(self, event, feed, portfolio):
        i = self._i
        self._i += 1
        if i >= len(self._script) or self._script[i] is None:
            return None
        return SignalEvent(timestamp=event.timestamp, symbol=event.symbol, direction=self._script[i])


@pytest.fixture
def symbol() -> str:
    return "USDT-ETH"


@pytest.fixture
def flat_observations(symbol: str) -> list[DataEvent]:
    """Five observations at a constant close of 100."""
    return [obs(i, 100, symbol) for i in range(5)]


@pytest.fixture
def rising_then_falling(symbol: str) -> list[DataEvent]:
    """Up to 120, down to 90, back to 110."""
    closes = [100, 110, 120, 105, 90, 110]
    return [obs(i, c, symbol) for i, c in enumerate(closes)]
