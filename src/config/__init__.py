"""
Configuration loader.

Reads config.yaml, validates it against docs/config/replay_config.schema.json,
resolves secrets from environment variables.
"""

from config.loader import (
    AlertingConfig,
    AppConfig,
    ConfigError,
    DataConfig,
    ExchangeConfig,
    JournalConfig,
    PortfolioConfig,
    StatisticsConfig,
    StrategyConfig,
    load_config,
)

__all__ = [
    "AlertingConfig",
    "AppConfig",
    "ConfigError",
    "DataConfig",
    "ExchangeConfig",
    "JournalConfig",
    "PortfolioConfig",
    "StatisticsConfig",
    "StrategyConfig",
    "load_config",
]
