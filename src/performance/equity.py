"""EquityPoint: one sample of the equity curve."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sim_core.money import ZERO


@dataclass(frozen=True)
class EquityPoint:
    timestamp: datetime | None = None
    equity: Decimal = ZERO
    equity_return: Decimal = ZERO  # vs. previous point, 0 for the first
    drawdown: Decimal = ZERO  # <= 0, vs. running high-water mark

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "equity": str(self.equity),
            "equity_return": str(self.equity_return),
            "drawdown": str(self.drawdown),
        }
