"""Tests for RandomStrategy: thresholds, reproducibility, validation."""

import random

import pytest

from conftest import obs
from sim_core.contracts import Direction
from sim_core.strategy import RandomStrategy


class FixedRNG:
    def __init__(self, draws: list[float]) -> None:
        self._draws = iter(draws)

    def random(self) -> float:
        return next(self._draws)


def test_thresholds() -> None:
    strat = RandomStrategy(rng=FixedRNG([0.0, 0.19, 0.2, 0.39, 0.4, 0.99]))
    e = obs(0, 100)
    got = [strat.calculate_signal(e, None, None).direction for _ in range(6)]
    assert got == [Direction.BUY, Direction.BUY, Direction.SELL, Direction.SELL, Direction.NONE, Direction.NONE]


def test_signal_carries_observation_identity() -> None:
    e = obs(3, 100, "BTC-ETH")
    signal = RandomStrategy(seed=1).calculate_signal(e, None, None)
    assert signal.timestamp == e.timestamp
    assert signal.symbol == "BTC-ETH"


def test_same_seed_same_signals() -> None:
    e = obs(0, 100)
    a = RandomStrategy(seed=5)
    b = RandomStrategy(rng=random.Random(5))
    assert [a.calculate_signal(e, None, None) for _ in range(20)] == [
        b.calculate_signal(e, None, None) for _ in range(20)
    ]


@pytest.mark.parametrize("buy,sell", [(-0.1, 0.2), (0.2, -0.1), (0.7, 0.5)])
def test_invalid_probabilities(buy: float, sell: float) -> None:
    with pytest.raises(ValueError):
        RandomStrategy(buy_probability=buy, sell_probability=sell)
