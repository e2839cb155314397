"""Tests for Sharpe/Sortino ratios, including randomized shift invariance."""

import random
from decimal import Decimal

from conftest import obs
from performance import Statistics, sharpe_ratio, sortino_ratio

TOL = Decimal("1e-12")


def _series(rng: random.Random, n: int) -> list[Decimal]:
    return [Decimal(str(round(rng.uniform(-0.05, 0.05), 6))) for _ in range(n)]


def test_zero_when_undefined() -> None:
    assert sharpe_ratio([]) == 0
    assert sharpe_ratio([Decimal("0.01")]) == 0
    assert sharpe_ratio([Decimal("0.01")] * 5) == 0
    assert sortino_ratio([Decimal("0.01"), Decimal("0.02")]) == 0
    assert sortino_ratio([Decimal("-0.01"), Decimal("0.02")]) == 0


def test_known_sharpe() -> None:
    # mean 0.02, sample stdev 0.01
    returns = [Decimal("0.01"), Decimal("0.02"), Decimal("0.03")]
    assert abs(sharpe_ratio(returns) - Decimal("2")) < TOL
    assert abs(sharpe_ratio(returns, "0.01") - Decimal("1")) < TOL


def test_known_sortino() -> None:
    # downside [-0.01, -0.03]: sample stdev sqrt(0.0002); mean 0
    returns = [Decimal("-0.01"), Decimal("-0.03"), Decimal("0.04")]
    assert sortino_ratio(returns) == 0
    assert sortino_ratio(returns, "-0.01") > 0


def test_sharpe_invariant_under_uniform_shift() -> None:
    rng = random.Random(1234)
    for _ in range(50):
        returns = _series(rng, rng.randint(3, 40))
        rf = Decimal(str(round(rng.uniform(-0.01, 0.01), 6)))
        shift = Decimal(str(round(rng.uniform(-1, 1), 6)))
        base = sharpe_ratio(returns, rf)
        shifted = sharpe_ratio([r + shift for r in returns], rf + shift)
        assert abs(base - shifted) < Decimal("1e-9")


def test_sortino_invariant_under_small_shift() -> None:
    # Shift stays below the smallest |r|, so the downside set is unchanged.
    rng = random.Random(99)
    for _ in range(50):
        returns = []
        while len(returns) < 10:
            r = Decimal(str(round(rng.uniform(-0.05, 0.05), 6)))
            if abs(r) >= Decimal("0.001"):
                returns.append(r)
        if sum(1 for r in returns if r < 0) < 2:
            continue
        rf = Decimal(str(round(rng.uniform(-0.01, 0.01), 6)))
        shift = Decimal(str(round(rng.uniform(-0.0009, 0.0009), 6)))
        base = sortino_ratio(returns, rf)
        shifted = sortino_ratio([r + shift for r in returns], rf + shift)
        assert abs(base - shifted) < Decimal("1e-9")


def test_statistics_ratios_rounded() -> None:
    stats = Statistics()
    for i, v in enumerate(["100", "101", "99", "103", "102"]):
        stats.update(obs(i, v), v)
    sharpe = stats.sharpe_ratio()
    assert sharpe == sharpe.quantize(Decimal("0.0001"))
    assert abs(sharpe - sharpe_ratio(stats.returns())) <= Decimal("0.00005")
