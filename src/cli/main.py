"""
CLI entry point: replay ingest | run | health.

Every command loads config from --config (default config.yaml),
prints a human-readable summary, and logs to journal.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import click
from dotenv import load_dotenv

from config import load_config

load_dotenv()

logger = logging.getLogger("replay")


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s  %(message)s",
        stream=sys.stderr,
    )


def _parse_date(raw: str | None) -> datetime | None:
    if not raw:
        return None
    ts = datetime.fromisoformat(raw)
    return ts.replace(tzinfo=timezone.utc) if ts.tzinfo is None else ts


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config file.")
@click.pass_context
def cli(ctx: click.Context, config_path: str) -> None:
    """replay: deterministic event-driven backtest replay."""
    _setup_logging()
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# ---------- replay ingest ----------


@cli.command()
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--symbol", required=True, help="Symbol the CSV rows belong to (e.g. USDT-ETH).")
@click.pass_context
def ingest(ctx: click.Context, csv_path: str, symbol: str) -> None:
    """Load observations from CSV_PATH into the local store.

    Columns: timestamp, close (required); open, high, low, volume (optional).
    Rows already stored for the same symbol and timestamp are replaced.
    """
    cfg = load_config(ctx.obj["config_path"])
    from data import CSVFormatError, ObservationStore, read_observations

    try:
        observations = read_observations(csv_path, symbol)
    except CSVFormatError as e:
        raise click.ClickException(str(e)) from e

    if not observations:
        click.echo(f"No rows found in {csv_path}.")
        return

    store = ObservationStore(cfg.data.store_path)
    store.write_observations(observations)
    click.echo(f"Stored {len(observations)} observations in {cfg.data.store_path}")
    click.echo(f"  Range: {observations[0].timestamp.isoformat()} -> {observations[-1].timestamp.isoformat()}")
    click.echo(f"  Total {symbol} observations in store: {store.count_observations(symbol)}")


# ---------- replay run ----------


@cli.command()
@click.option("--start", "start_str", default=None, help="Start date filter (ISO).")
@click.option("--end", "end_str", default=None, help="End date filter (ISO).")
@click.option("--seed", default=None, type=int, help="Strategy RNG seed. Overrides strategy.seed in config.")
@click.option("--output", "output_path", default=None, type=click.Path(dir_okay=False), help="Write the result snapshot as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    start_str: str | None,
    end_str: str | None,
    seed: int | None,
    output_path: str | None,
) -> None:
    """Replay stored observations through the strategy, portfolio and exchange."""
    cfg = load_config(ctx.obj["config_path"])
    from backtest import Backtest
    from cli.output import format_backtest_summary
    from cli.structured_log import StructuredEventLogger
    from data import HistoricFeed, ObservationStore
    from execution import Exchange
    from journal import JournalWriter
    from performance import Statistics
    from portfolio import FixedFractionSizer, MaxPositionRiskManager, PassThroughRiskManager, Portfolio
    from sim_core import RandomStrategy

    store = ObservationStore(cfg.data.store_path)
    since = _parse_date(start_str)
    until = _parse_date(end_str)
    observations = []
    for symbol in cfg.symbols:
        observations.extend(store.get_observations(symbol, since=since, until=until))
    if not observations:
        click.echo("No observations in store. Run 'replay ingest' first.")
        return

    pf = cfg.portfolio
    risk = MaxPositionRiskManager(pf.max_position_qty) if pf.max_position_qty is not None else PassThroughRiskManager()
    portfolio = Portfolio(
        pf.initial_cash,
        min_order_qty=pf.min_order_qty,
        sizer=FixedFractionSizer(pf.order_fraction, pf.order_unit),
        risk_manager=risk,
        clear_holdings_on_reset=pf.clear_holdings_on_reset,
    )
    exchange = Exchange(
        cfg.exchange.name,
        commission_rate=cfg.exchange.commission_rate,
        exchange_fee=cfg.exchange.exchange_fee,
    )
    strategy = RandomStrategy(
        seed=seed if seed is not None else cfg.strategy.seed,
        buy_probability=cfg.strategy.buy_probability,
        sell_probability=cfg.strategy.sell_probability,
    )

    journal = JournalWriter(cfg.journal.path, echo_stdout=cfg.journal.echo_stdout)
    events = StructuredEventLogger(
        list(cfg.symbols),
        enabled=cfg.alerting.structured_logs,
        webhook_url=cfg.alerting.webhook_url,
    )

    def on_event(event_type: str, payload: dict) -> None:
        if event_type == "order":
            o = payload["order"]
            journal.order(o.symbol, o.direction.value, o.qty, o.order_type.value, o.timestamp)
        elif event_type == "fill":
            f = payload["fill"]
            journal.fill(f.symbol, f.direction.value, f.qty, f.price, f.cost, f.timestamp, exchange=f.exchange)
            events.fill(f.symbol, f.direction.value, str(f.qty), str(f.price), str(f.cost))
        elif event_type == "rejected":
            s = payload["signal"]
            journal.rejection(s.symbol, payload["reason"], payload["error"], s.timestamp, direction=s.direction.value)
            if s.direction.value != "none":
                events.signal_rejected(s.symbol, payload["error"], payload["reason"])
        elif event_type == "order_failed":
            e = payload["event"]
            journal.rejection(e.symbol, payload["reason"], payload["error"], e.timestamp, stage=payload["stage"])
            events.order_failed(e.symbol, payload["stage"], payload["reason"])

    engine = Backtest(
        feed=HistoricFeed(observations),
        strategy=strategy,
        portfolio=portfolio,
        exchange=exchange,
        statistics=Statistics(),
        risk_free_rate=cfg.statistics.risk_free_rate,
        journal_callback=on_event,
    )

    click.echo(f"Running backtest: {', '.join(cfg.symbols)}, {len(observations)} observations ...")
    events.run_start(len(observations), str(pf.initial_cash))
    try:
        result = engine.run()
    except Exception as e:
        logger.error("Backtest failed: %s", e)
        events.error("backtest failed", str(e))
        raise

    total_return = result.summary.get("total_return")
    events.run_complete(
        len(result.transactions),
        str(result.final_value),
        str(total_return) if total_return is not None else None,
    )
    journal.run_summary(list(result.symbols), result.final_value, result.summary, run_id=events.run_id)
    click.echo(format_backtest_summary(result))

    if output_path:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(result.to_dict(), indent=2))
        click.echo(f"Result written to {out}")


# ---------- replay health ----------


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check system health: config, DB access, observation data.

    Exit code 0 = healthy, 1 = unhealthy.
    """
    checks: list[tuple[str, bool, str]] = []

    try:
        cfg = load_config(ctx.obj["config_path"])
        checks.append(("config", True, f"loaded ({', '.join(cfg.symbols)})"))
    except Exception as e:
        checks.append(("config", False, str(e)))
        _print_health(checks)
        raise SystemExit(1)

    try:
        from data import ObservationStore
        store = ObservationStore(cfg.data.store_path)
        for symbol in cfg.symbols:
            count = store.count_observations(symbol)
            if count > 0:
                checks.append((f"observations:{symbol}", True, f"{count} observations"))
            else:
                checks.append((f"observations:{symbol}", False, f"no observations for {symbol}"))
    except Exception as e:
        checks.append(("store", False, str(e)))

    _print_health(checks)
    healthy = all(ok for _, ok, _ in checks)
    raise SystemExit(0 if healthy else 1)


def _print_health(checks: list[tuple[str, bool, str]]) -> None:
    for name, ok, detail in checks:
        status = "OK" if ok else "FAIL"
        click.echo(f"  [{status}] {name}: {detail}")
    healthy = all(ok for _, ok, _ in checks)
    click.echo(f"\nHealth: {'HEALTHY' if healthy else 'UNHEALTHY'}")


if __name__ == "__main__":
    cli()
