"""
Config loader: YAML file -> frozen dataclass tree, validated against JSON Schema.

Schema: docs/config/replay_config.schema.json

Secrets resolved from environment variables (REPLAY_WEBHOOK_URL).
Config file holds only non-secret values. Money and rate values may be
given as numbers or strings; both end up as Decimal.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from sim_core.money import to_decimal

logger = logging.getLogger("replay.config")


def _find_project_root() -> Path:
    """Walk up from this file looking for pyproject.toml.

    When running from source, finds the repo root. When installed as a
    package, pyproject.toml won't exist; fall back to CWD.
    """
    candidate = Path(__file__).resolve().parent
    for _ in range(10):
        if (candidate / "pyproject.toml").exists():
            return candidate
        parent = candidate.parent
        if parent == candidate:
            break
        candidate = parent
    return Path.cwd()


_PROJECT_ROOT = _find_project_root()

DEFAULT_SCHEMA_PATH = _PROJECT_ROOT / "docs" / "config" / "replay_config.schema.json"


class ConfigError(Exception):
    """Raised when config loading or validation fails."""


@dataclass(frozen=True)
class DataConfig:
    store_path: str = "data/observations.db"


@dataclass(frozen=True)
class PortfolioConfig:
    initial_cash: Decimal = Decimal("1000")
    min_order_qty: Decimal = Decimal("0.2")
    order_fraction: Decimal = Decimal("0.2")
    order_unit: Decimal = Decimal("1")
    max_position_qty: Decimal | None = None
    clear_holdings_on_reset: bool = False


@dataclass(frozen=True)
class ExchangeConfig:
    name: str = "simulated"
    commission_rate: Decimal = Decimal("0.0025")
    exchange_fee: Decimal = Decimal("0")


@dataclass(frozen=True)
class StatisticsConfig:
    risk_free_rate: Decimal = Decimal("0")


@dataclass(frozen=True)
class StrategyConfig:
    seed: int | None = None
    buy_probability: float = 0.2
    sell_probability: float = 0.2


@dataclass(frozen=True)
class JournalConfig:
    path: str = "data/journal.jsonl"
    echo_stdout: bool = False


@dataclass(frozen=True)
class AlertingConfig:
    structured_logs: bool = True
    webhook_url: str = ""


@dataclass(frozen=True)
class AppConfig:
    symbols: tuple[str, ...]
    data: DataConfig = field(default_factory=DataConfig)
    portfolio: PortfolioConfig = field(default_factory=PortfolioConfig)
    exchange: ExchangeConfig = field(default_factory=ExchangeConfig)
    statistics: StatisticsConfig = field(default_factory=StatisticsConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    journal: JournalConfig = field(default_factory=JournalConfig)
    alerting: AlertingConfig = field(default_factory=AlertingConfig)


def _validate_schema(data: dict[str, Any], schema_path: Path) -> None:
    """Validate *data* against the JSON Schema at *schema_path*."""
    if not schema_path.exists():
        raise ConfigError(f"Schema file not found: {schema_path}")
    with open(schema_path) as f:
        schema = json.load(f)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise ConfigError(f"Config validation failed at {location}: {exc.message}") from exc


def _dec(section: dict[str, Any], key: str, default: Decimal | None) -> Decimal | None:
    raw = section.get(key)
    if raw is None:
        return default
    try:
        return to_decimal(raw)
    except (InvalidOperation, TypeError) as exc:
        raise ConfigError(f"{key}: not a decimal value: {raw!r}") from exc


def load_config(path: str | Path = "config.yaml", schema_path: str | Path | None = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    The webhook URL is resolved from the environment when set:
      - REPLAY_WEBHOOK_URL
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    _validate_schema(raw, Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH)

    data_raw = raw.get("data", {})
    data_cfg = DataConfig(store_path=data_raw.get("store_path", "data/observations.db"))

    pf_raw = raw.get("portfolio", {})
    pf_cfg = PortfolioConfig(
        initial_cash=_dec(pf_raw, "initial_cash", Decimal("1000")),
        min_order_qty=_dec(pf_raw, "min_order_qty", Decimal("0.2")),
        order_fraction=_dec(pf_raw, "order_fraction", Decimal("0.2")),
        order_unit=_dec(pf_raw, "order_unit", Decimal("1")),
        max_position_qty=_dec(pf_raw, "max_position_qty", None),
        clear_holdings_on_reset=bool(pf_raw.get("clear_holdings_on_reset", False)),
    )

    ex_raw = raw.get("exchange", {})
    ex_cfg = ExchangeConfig(
        name=ex_raw.get("name", "simulated"),
        commission_rate=_dec(ex_raw, "commission_rate", Decimal("0.0025")),
        exchange_fee=_dec(ex_raw, "exchange_fee", Decimal("0")),
    )

    st_raw = raw.get("statistics", {})
    st_cfg = StatisticsConfig(risk_free_rate=_dec(st_raw, "risk_free_rate", Decimal("0")))

    sg_raw = raw.get("strategy", {})
    sg_cfg = StrategyConfig(
        seed=sg_raw.get("seed"),
        buy_probability=float(sg_raw.get("buy_probability", 0.2)),
        sell_probability=float(sg_raw.get("sell_probability", 0.2)),
    )
    if sg_cfg.buy_probability + sg_cfg.sell_probability > 1:
        raise ConfigError("strategy: buy_probability + sell_probability must not exceed 1")

    j_raw = raw.get("journal", {})
    j_cfg = JournalConfig(
        path=j_raw.get("path", "data/journal.jsonl"),
        echo_stdout=bool(j_raw.get("echo_stdout", False)),
    )

    a_raw = raw.get("alerting", {})
    a_cfg = AlertingConfig(
        structured_logs=bool(a_raw.get("structured_logs", True)),
        webhook_url=os.environ.get("REPLAY_WEBHOOK_URL", str(a_raw.get("webhook_url", ""))),
    )

    symbols = tuple(raw.get("symbols", ["USDT-ETH"]))
    logger.debug("Loaded config %s: symbols=%s", config_path, ",".join(symbols))

    return AppConfig(
        symbols=symbols,
        data=data_cfg,
        portfolio=pf_cfg,
        exchange=ex_cfg,
        statistics=st_cfg,
        strategy=sg_cfg,
        journal=j_cfg,
        alerting=a_cfg,
    )
