"""
Run journal: append-only JSON lines, one record per order, fill, rejection and run summary.

Decimals are written as strings so amounts read back exactly.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    return value


class JournalWriter:
    """Appends to one JSONL file; never rewrites earlier lines."""

    def __init__(self, path: str | Path, *, echo_stdout: bool = False) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.echo_stdout = echo_stdout

    def append(self, event_type: str, **fields: Any) -> dict:
        record = _jsonable(
            {"event": event_type, "logged_at": datetime.now(timezone.utc), **fields}
        )
        line = json.dumps(record, sort_keys=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        if self.echo_stdout:
            print(line)
        return record

    def order(self, symbol: str, direction: str, qty: Decimal, order_type: str, at: datetime, **extra: Any) -> dict:
        return self.append("order", symbol=symbol, direction=direction, qty=qty, order_type=order_type, at=at, **extra)

    def fill(
        self,
        symbol: str,
        side: str,
        qty: Decimal,
        price: Decimal,
        cost: Decimal,
        at: datetime,
        **extra: Any,
    ) -> dict:
        return self.append("fill", symbol=symbol, side=side, qty=qty, price=price, cost=cost, at=at, **extra)

    def rejection(self, symbol: str, reason: str, error: str, at: datetime, **extra: Any) -> dict:
        return self.append("rejection", symbol=symbol, reason=reason, error=error, at=at, **extra)

    def run_summary(self, symbols: list[str], final_value: Decimal, summary: Mapping[str, Any], **extra: Any) -> dict:
        return self.append("run_summary", symbols=symbols, final_value=final_value, summary=summary, **extra)

    def records(self) -> Iterator[dict]:
        """Yield every record in file order."""
        if not self.path.exists():
            return
        with self.path.open(encoding="utf-8") as fh:
            for line in fh:
                if line.strip():
                    yield json.loads(line)
