"""
Error taxonomy for the replay pipeline.

Every error here is recoverable per event: the engine records it and moves
on to the next observation. NoEquityData is the exception, raised only by
result queries on a run that processed nothing.
"""


class BacktestError(Exception):
    """Base class for replay pipeline errors."""


class SignalRejected(BacktestError):
    """A signal could not be turned into an order. No order this tick."""


class InvalidSignal(SignalRejected):
    """Signal carries no direction."""


EmptyDirection = InvalidSignal


class InsufficientHoldings(SignalRejected):
    """Sell signal but held quantity is at or below the minimum order size."""


class InsufficientCash(SignalRejected):
    """Buy signal but cash cannot cover the minimum order size."""


class RiskRejected(SignalRejected):
    """A risk manager vetoed the sized order."""


class NoPriceData(BacktestError):
    """No observation has been seen yet for the symbol."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"No price data for {symbol}")
        self.symbol = symbol


class NoEquityData(BacktestError):
    """Result query on an empty equity curve."""
