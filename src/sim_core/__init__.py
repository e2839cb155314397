"""
sim-core: event contracts, money policy, errors and the strategy interface.

No I/O, no state. Everything else in the replay pipeline builds on these.
"""

from sim_core.contracts import (
    DataEvent,
    Direction,
    Event,
    FillEvent,
    FillSide,
    OrderEvent,
    OrderType,
    SignalEvent,
)
from sim_core.errors import (
    BacktestError,
    EmptyDirection,
    InsufficientCash,
    InsufficientHoldings,
    InvalidSignal,
    NoEquityData,
    NoPriceData,
    RiskRejected,
    SignalRejected,
)
from sim_core.money import DP, round_dp, to_decimal, truncate_dp
from sim_core.strategy import RandomStrategy, Strategy

__all__ = [
    "BacktestError",
    "DP",
    "DataEvent",
    "Direction",
    "EmptyDirection",
    "Event",
    "FillEvent",
    "FillSide",
    "InsufficientCash",
    "InsufficientHoldings",
    "InvalidSignal",
    "NoEquityData",
    "NoPriceData",
    "OrderEvent",
    "OrderType",
    "RandomStrategy",
    "RiskRejected",
    "SignalEvent",
    "SignalRejected",
    "Strategy",
    "round_dp",
    "to_decimal",
    "truncate_dp",
]
