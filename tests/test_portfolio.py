"""Tests for portfolio bookkeeping: signal validation, fills, valuation, reset."""

from decimal import Decimal

import pytest

from conftest import obs
from data.feed import HistoricFeed
from portfolio import FixedFractionSizer, MaxPositionRiskManager, Portfolio
from sim_core.contracts import Direction, FillEvent, FillSide, OrderType, SignalEvent
from sim_core.errors import (
    EmptyDirection,
    InsufficientCash,
    InsufficientHoldings,
    InvalidSignal,
    NoPriceData,
    RiskRejected,
    SignalRejected,
)


def _feed(*closes: str, symbol: str = "USDT-ETH") -> HistoricFeed:
    feed = HistoricFeed([obs(i, c, symbol) for i, c in enumerate(closes)])
    for _ in feed:
        pass
    return feed


def _signal(direction: Direction, symbol: str = "USDT-ETH") -> SignalEvent:
    return SignalEvent(timestamp=obs(0, 1).timestamp, symbol=symbol, direction=direction)


def _fill(side: FillSide, qty: str, price: str, commission: str = "0") -> FillEvent:
    return FillEvent(
        timestamp=obs(0, price).timestamp,
        symbol="USDT-ETH",
        exchange="test",
        direction=side,
        qty=Decimal(qty),
        price=Decimal(price),
        commission=Decimal(commission),
        exchange_fee=Decimal("0"),
        cost=Decimal(commission),
    )


class TestOnFill:
    def test_buy_scenario_cash_and_value(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "0.2", "100", commission="0.05"))
        assert p.cash == Decimal("979.95")
        assert p.value() == Decimal("999.95")
        assert len(p.transactions) == 1

    def test_sell_adds_value_minus_cost(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        p.on_fill(_fill(FillSide.SOLD, "0.5", "120", commission="0.15"))
        assert p.cash == Decimal("959.85")
        pos = p.holdings["USDT-ETH"]
        assert pos.qty == Decimal("0.5")
        assert p.value() == Decimal("1019.85")

    def test_holdings_view_is_read_only(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        with pytest.raises(TypeError):
            p.holdings["X"] = None  # type: ignore[index]

    def test_transactions_in_fill_order(self) -> None:
        p = Portfolio(1000)
        f1 = _fill(FillSide.BOUGHT, "1", "100")
        f2 = _fill(FillSide.SOLD, "0.5", "101")
        p.on_fill(f1)
        p.on_fill(f2)
        assert p.transactions == (f1, f2)


class TestOnSignal:
    def test_buy_produces_sized_market_order(self) -> None:
        p = Portfolio(1000)
        order = p.on_signal(_signal(Direction.BUY), _feed("100"))
        assert order.direction == Direction.BUY
        assert order.order_type == OrderType.MARKET
        assert order.qty == Decimal("0.2")
        assert order.symbol == "USDT-ETH"

    def test_sell_with_zero_holdings(self) -> None:
        p = Portfolio(1000)
        with pytest.raises(InsufficientHoldings):
            p.on_signal(_signal(Direction.SELL), _feed("100"))

    def test_sell_with_holdings_at_minimum(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "0.2", "100"))
        with pytest.raises(InsufficientHoldings):
            p.on_signal(_signal(Direction.SELL), _feed("100"))

    def test_sell_with_holdings_above_minimum(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "0.4", "100"))
        order = p.on_signal(_signal(Direction.SELL), _feed("100"))
        assert order.direction == Direction.SELL
        assert order.qty == Decimal("0.2")

    def test_buy_without_cash(self) -> None:
        p = Portfolio(20)
        with pytest.raises(InsufficientCash):
            p.on_signal(_signal(Direction.BUY), _feed("100"))

    def test_no_direction(self) -> None:
        p = Portfolio(1000)
        with pytest.raises(InvalidSignal):
            p.on_signal(_signal(Direction.NONE), _feed("100"))
        assert EmptyDirection is InvalidSignal

    def test_all_rejections_are_signal_rejected(self) -> None:
        for exc in (InvalidSignal, InsufficientHoldings, InsufficientCash, RiskRejected):
            assert issubclass(exc, SignalRejected)

    def test_buy_without_price(self) -> None:
        p = Portfolio(1000)
        with pytest.raises(NoPriceData):
            p.on_signal(_signal(Direction.BUY, symbol="BTC-ETH"), _feed("100"))

    def test_custom_sizer(self) -> None:
        p = Portfolio(1000, sizer=FixedFractionSizer("0.5", "2"))
        order = p.on_signal(_signal(Direction.BUY), _feed("100"))
        assert order.qty == Decimal("1.0")

    def test_risk_manager_veto(self) -> None:
        p = Portfolio(1000, risk_manager=MaxPositionRiskManager("0.3"))
        p.on_fill(_fill(FillSide.BOUGHT, "0.2", "100"))
        with pytest.raises(RiskRejected):
            p.on_signal(_signal(Direction.BUY), _feed("100"))

    def test_risk_manager_allows_sells(self) -> None:
        p = Portfolio(1000, risk_manager=MaxPositionRiskManager("0.3"))
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        order = p.on_signal(_signal(Direction.SELL), _feed("100"))
        assert order.direction == Direction.SELL


class TestValuation:
    def test_update_marks_invested_symbol(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        p.update(obs(1, "110"))
        assert p.value() == p.cash + p.holdings["USDT-ETH"].market_value
        assert p.value() == Decimal("1010")

    def test_update_ignores_other_symbols(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        p.update(obs(1, "500", "BTC-ETH"))
        assert p.value() == Decimal("1000")

    def test_is_invested(self) -> None:
        p = Portfolio(1000)
        assert p.is_invested("USDT-ETH") == (None, False)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        pos, invested = p.is_invested("USDT-ETH")
        assert invested and pos is p.holdings["USDT-ETH"]
        p.on_fill(_fill(FillSide.SOLD, "1", "100"))
        assert p.is_invested("USDT-ETH")[1] is False

    def test_value_rounded_to_policy(self) -> None:
        p = Portfolio("1000.00004")
        assert p.value() == Decimal("1000.0000")

    def test_view_holdings(self) -> None:
        p = Portfolio(1000)
        assert p.view_holdings() == "No holdings."
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        assert "USDT-ETH: qty 1" in p.view_holdings()


class TestReset:
    def test_reset_keeps_holdings_by_default(self) -> None:
        p = Portfolio(1000)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        p.reset()
        assert p.cash == Decimal("0")
        assert p.transactions == ()
        assert "USDT-ETH" in p.holdings
        assert p.initial_cash == Decimal("1000")

    def test_reset_can_clear_holdings(self) -> None:
        p = Portfolio(1000, clear_holdings_on_reset=True)
        p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
        p.reset()
        assert dict(p.holdings) == {}

    def test_cash_setters_convert(self) -> None:
        p = Portfolio()
        p.initial_cash = 500.5
        p.cash = "250"
        assert p.initial_cash == Decimal("500.5")
        assert p.cash == Decimal("250")


def test_sizer_rejects_non_positive_settings() -> None:
    with pytest.raises(ValueError):
        FixedFractionSizer("0")
    with pytest.raises(ValueError):
        FixedFractionSizer("0.2", "-1")


def test_clear_holdings_keeps_cash_and_log() -> None:
    p = Portfolio(1000)
    p.on_fill(_fill(FillSide.BOUGHT, "1", "100"))
    p.clear_holdings()
    assert dict(p.holdings) == {}
    assert p.cash == Decimal("900")
    assert len(p.transactions) == 1
