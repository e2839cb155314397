"""
Event-driven replay: one observation at a time, strictly in feed order.

Per observation: strategy -> [signal -> portfolio sizes order -> exchange
fills -> portfolio applies fill] -> mark-to-market -> statistics update.
At most one signal, order and fill per observation; exactly one
mark-to-market and one statistics update.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Iterable

from backtest.result import BacktestResult, Rejection
from data.feed import HistoricFeed
from execution.exchange import Exchange
from performance.statistic import Statistics
from portfolio.portfolio import Portfolio
from sim_core.contracts import DataEvent, Direction, Event, SignalEvent
from sim_core.errors import NoPriceData, SignalRejected
from sim_core.interfaces import DataFeed, ExecutionHandler, PortfolioAPI, StatisticsAPI
from sim_core.money import ZERO, to_decimal
from sim_core.strategy import Strategy

logger = logging.getLogger("replay.engine")

JournalCallback = Callable[[str, dict], None]


class Backtest:
    """Wires feed, strategy, portfolio, exchange and statistics for one run."""

    def __init__(
        self,
        feed: DataFeed,
        strategy: Strategy,
        portfolio: PortfolioAPI,
        exchange: ExecutionHandler,
        statistics: StatisticsAPI,
        *,
        risk_free_rate: Decimal | float | str = ZERO,
        journal_callback: JournalCallback | None = None,
    ) -> None:
        self.feed = feed
        self.strategy = strategy
        self.portfolio = portfolio
        self.exchange = exchange
        self.statistics = statistics
        self.risk_free_rate = to_decimal(risk_free_rate)
        self._journal = journal_callback
        self._rejections: list[Rejection] = []
        self._failures: list[Rejection] = []
        self._ready = False

    def reset(self) -> None:
        """Rewind the feed and reset portfolio and statistics for a fresh run.

        Positions from the previous run are dropped as well, whatever the
        portfolio's own reset policy, so the rerun starts from initial cash only.
        """
        self.feed.reset()
        self.portfolio.reset()
        self.portfolio.clear_holdings()
        self.statistics.reset()
        self._ready = False

    def _setup(self) -> None:
        self.portfolio.cash = self.portfolio.initial_cash
        self._rejections = []
        self._failures = []
        self._ready = True

    def run(self) -> BacktestResult:
        """Replay the feed to exhaustion and return the result snapshot."""
        if not self._ready:
            self._setup()
        logger.info("Backtest started: initial cash %s", self.portfolio.initial_cash)
        for event in self.feed:
            self._process(event)
        result = self.result()
        logger.info(
            "Backtest finished: %d observations, %d fills, final value %s",
            len(result.equity_curve), len(result.transactions), result.final_value,
        )
        return result

    def _process(self, event: DataEvent) -> None:
        self.statistics.track_event(event)

        signal = self.strategy.calculate_signal(event, self.feed, self.portfolio)
        if signal is not None:
            self.statistics.track_event(signal)
            self._handle_signal(signal)

        self.portfolio.update(event)
        self.statistics.update(event, self.portfolio.value())

    def _handle_signal(self, signal: SignalEvent) -> None:
        if signal.direction != Direction.NONE:
            self._notify("signal", {"signal": signal})

        try:
            order = self.portfolio.on_signal(signal, self.feed)
        except SignalRejected as exc:
            self._record(self._rejections, signal, "signal", exc)
            logger.debug("Signal rejected: %s", exc)
            self._notify("rejected", {"signal": signal, "reason": str(exc), "error": type(exc).__name__})
            return
        except NoPriceData as exc:
            self._order_failed(signal, "signal", exc)
            return

        self.statistics.track_event(order)
        self._notify("order", {"order": order})

        try:
            fill = self.exchange.execute_order(order, self.feed)
        except NoPriceData as exc:
            self._order_failed(order, "execution", exc)
            return

        fill = self.portfolio.on_fill(fill)
        self.statistics.track_event(fill)
        self.statistics.track_transaction(fill)
        self._notify("fill", {"fill": fill})

    def _order_failed(self, event: Event, stage: str, exc: Exception) -> None:
        self._record(self._failures, event, stage, exc)
        logger.warning("Order aborted at %s (%s): %s", event.timestamp.isoformat(), stage, exc)
        self._notify("order_failed", {"event": event, "stage": stage, "reason": str(exc), "error": type(exc).__name__})

    @staticmethod
    def _record(target: list[Rejection], event: Event, stage: str, exc: Exception) -> None:
        target.append(
            Rejection(
                timestamp=event.timestamp,
                symbol=event.symbol,
                stage=stage,
                error=type(exc).__name__,
                message=str(exc),
            )
        )

    def _notify(self, event_type: str, payload: dict) -> None:
        if self._journal:
            self._journal(event_type, payload)

    def result(self) -> BacktestResult:
        """Snapshot of the run so far."""
        curve = self.statistics.equity
        symbols = sorted({e.symbol for e in self.statistics.events})
        return BacktestResult(
            symbols=tuple(symbols),
            start_time=curve[0].timestamp if curve else None,
            end_time=curve[-1].timestamp if curve else None,
            initial_cash=self.portfolio.initial_cash,
            final_cash=self.portfolio.cash,
            final_value=self.portfolio.value(),
            equity_curve=curve,
            transactions=self.statistics.transactions,
            event_count=len(self.statistics.events),
            rejections=tuple(self._rejections),
            failures=tuple(self._failures),
            summary=self.statistics.summary(self.risk_free_rate),
        )


def run_backtest(
    observations: Iterable[DataEvent],
    strategy: Strategy,
    *,
    initial_cash: Decimal | float | str = Decimal("1000"),
    portfolio: Portfolio | None = None,
    exchange: Exchange | None = None,
    risk_free_rate: Decimal | float | str = ZERO,
    journal_callback: JournalCallback | None = None,
) -> BacktestResult:
    """Replay *observations* through a fresh pipeline.

    Parameters
    ----------
    observations:
        Price observations; sorted by timestamp before replay.
    strategy:
        Signal source.
    initial_cash:
        Starting cash when no *portfolio* is given.
    portfolio:
        Pre-configured portfolio (sizing, risk, reset policy). Its own
        initial cash wins over *initial_cash*.
    exchange:
        Execution venue. Defaults to a zero-cost simulated exchange.
    risk_free_rate:
        Benchmark per-step return for Sharpe/Sortino.
    journal_callback:
        Optional callback for event journaling.
    """
    engine = Backtest(
        feed=HistoricFeed(observations),
        strategy=strategy,
        portfolio=portfolio if portfolio is not None else Portfolio(initial_cash),
        exchange=exchange if exchange is not None else Exchange(),
        statistics=Statistics(),
        risk_free_rate=risk_free_rate,
        journal_callback=journal_callback,
    )
    return engine.run()
