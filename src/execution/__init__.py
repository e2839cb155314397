"""
Execution: OrderEvent -> FillEvent at the latest observed price.
Price taker, full fills, no state.
"""

from execution.exchange import (
    Exchange,
    calculate_commission,
    calculate_cost,
    calculate_exchange_fee,
)

__all__ = ["Exchange", "calculate_commission", "calculate_cost", "calculate_exchange_fee"]
