"""Tests for terminal summary formatting."""

from decimal import Decimal

from backtest import run_backtest
from cli.output import format_backtest_summary
from conftest import ScriptedStrategy
from sim_core.contracts import Direction


def test_summary_lists_core_figures(rising_then_falling) -> None:
    result = run_backtest(rising_then_falling, ScriptedStrategy([Direction.BUY, Direction.SELL]), initial_cash=1000)
    text = format_backtest_summary(result)
    assert "=== Backtest: USDT-ETH ===" in text
    assert "Initial cash : 1,000.0000" in text
    assert "Fills        : 1 (BOT:1 / SLD:0)" in text
    assert "InsufficientHoldings=1" in text
    assert "1. " in text and "BOT 0.2 USDT-ETH @ 100" in text


def test_summary_truncates_transaction_list(rising_then_falling) -> None:
    script = [Direction.BUY] * 6
    result = run_backtest(rising_then_falling, ScriptedStrategy(script), initial_cash=Decimal("10000"))
    text = format_backtest_summary(result, show_transactions=2)
    assert "... 4 more" in text


def test_summary_without_observations() -> None:
    result = run_backtest([], ScriptedStrategy([]), initial_cash=1000)
    text = format_backtest_summary(result)
    assert "n/a (no observations)" in text
    assert "Return       : n/a" in text
