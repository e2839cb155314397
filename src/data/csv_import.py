"""
Read price observations from CSV.

Required columns: ``timestamp`` (ISO-8601) and ``close``. Optional:
``open``, ``high``, ``low``, ``volume``. Naive timestamps are taken as UTC.
"""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path

from sim_core.contracts import DataEvent

_OPTIONAL = ("open", "high", "low", "volume")


class CSVFormatError(ValueError):
    """Raised when a CSV row cannot be parsed into an observation."""


def _parse_ts(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def read_observations(path: str | Path, symbol: str) -> list[DataEvent]:
    """Parse *path* into DataEvents for *symbol*, in file order."""
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    out: list[DataEvent] = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        fields = set(reader.fieldnames or [])
        missing = {"timestamp", "close"} - fields
        if missing:
            raise CSVFormatError(f"{csv_path.name}: missing column(s) {', '.join(sorted(missing))}")
        for line_no, row in enumerate(reader, start=2):
            try:
                extra = {
                    name: Decimal(row[name])
                    for name in _OPTIONAL
                    if name in fields and row[name] not in (None, "")
                }
                out.append(
                    DataEvent(
                        timestamp=_parse_ts(row["timestamp"]),
                        symbol=symbol,
                        close=Decimal(row["close"]),
                        **extra,
                    )
                )
            except (InvalidOperation, TypeError, ValueError) as exc:
                raise CSVFormatError(f"{csv_path.name}:{line_no}: {exc}") from exc
    return out
