"""
Human-readable run output for the terminal.

Read-only consumers of BacktestResult; the journal receives the same data.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from backtest.result import BacktestResult
from sim_core.money import round_dp


def _fmt_money(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    return f"{round_dp(value):,.4f}"


def _fmt_pct(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    return f"{value * 100:+.2f}%"


def _fmt_duration(value: timedelta) -> str:
    total = int(value.total_seconds())
    days, rem = divmod(total, 86_400)
    hours, rem = divmod(rem, 3_600)
    minutes = rem // 60
    return f"{days}d {hours:02d}h {minutes:02d}m"


def format_backtest_summary(result: BacktestResult, *, show_transactions: int = 10) -> str:
    """Format backtest result summary."""
    s = result.summary
    period = (
        f"{result.start_time.isoformat()} -> {result.end_time.isoformat()}"
        if result.start_time and result.end_time
        else "n/a (no observations)"
    )
    dd_time = s.get("max_drawdown_time")
    lines = [
        f"=== Backtest: {', '.join(result.symbols) or '-'} ===",
        f"Period       : {period}",
        f"Observations : {len(result.equity_curve)}  (events tracked: {result.event_count})",
        f"Initial cash : {_fmt_money(result.initial_cash)}",
        f"Final cash   : {_fmt_money(result.final_cash)}",
        f"Final value  : {_fmt_money(result.final_value)}",
        f"Return       : {_fmt_pct(s.get('total_return'))}",
        f"Max drawdown : {_fmt_pct(s.get('max_drawdown'))}"
        + (f" @ {dd_time.isoformat()}" if dd_time else ""),
        f"DD duration  : {_fmt_duration(s.get('max_drawdown_duration', timedelta(0)))}",
        f"Sharpe       : {s.get('sharpe_ratio', 'n/a')}",
        f"Sortino      : {s.get('sortino_ratio', 'n/a')}",
        f"Fills        : {len(result.transactions)} (BOT:{result.buy_count} / SLD:{result.sell_count})",
    ]

    counts = result.rejection_counts()
    if counts:
        detail = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
        lines.append(f"Rejected     : {sum(counts.values())} ({detail})")
    if result.failures:
        lines.append(f"Failed orders: {len(result.failures)}")
        for f in result.failures:
            lines.append(f"  {f.timestamp.isoformat()} {f.symbol} [{f.stage}] {f.message}")

    if result.transactions and show_transactions > 0:
        lines.append("")
        shown = result.transactions[:show_transactions]
        for i, t in enumerate(shown, 1):
            lines.append(
                f"  {i}. {t.timestamp.isoformat()} {t.direction.value} {t.qty} {t.symbol} "
                f"@ {t.price}  cost {t.cost}"
            )
        if len(result.transactions) > len(shown):
            lines.append(f"  ... {len(result.transactions) - len(shown)} more")
    lines.append("===")
    return "\n".join(lines)
