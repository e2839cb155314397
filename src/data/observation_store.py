"""
Persist and load price observations (SQLite). Timestamps in UTC.

Prices are stored as TEXT so Decimal values survive the round trip exactly.
"""

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from sim_core.contracts import DataEvent


def _utc_ts(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _dec(raw: str | None) -> Decimal | None:
    return Decimal(raw) if raw is not None else None


def _txt(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


class ObservationStore:
    """SQLite-backed observation storage. One file per path."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._path))

    def _init_schema(self) -> None:
        with self._conn() as c:
            c.execute(
                """
                CREATE TABLE IF NOT EXISTS observations (
                    symbol TEXT NOT NULL,
                    ts_utc TEXT NOT NULL,
                    close TEXT NOT NULL,
                    open TEXT,
                    high TEXT,
                    low TEXT,
                    volume TEXT,
                    PRIMARY KEY (symbol, ts_utc)
                )
                """
            )

    def write_observations(self, observations: Sequence[DataEvent]) -> None:
        """Upsert observations (by symbol, ts_utc)."""
        with self._conn() as c:
            for o in observations:
                ts = _utc_ts(o.timestamp).isoformat()
                c.execute(
                    """
                    INSERT OR REPLACE INTO observations (symbol, ts_utc, close, open, high, low, volume)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (o.symbol, ts, str(o.close), _txt(o.open), _txt(o.high), _txt(o.low), _txt(o.volume)),
                )

    def get_observations(
        self,
        symbol: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
        limit: int | None = None,
    ) -> list[DataEvent]:
        """Return observations in ascending time order. All timestamps in UTC."""
        with self._conn() as c:
            q = "SELECT ts_utc, close, open, high, low, volume FROM observations WHERE symbol = ?"
            params: list = [symbol]
            if since is not None:
                q += " AND ts_utc >= ?"
                params.append(_utc_ts(since).isoformat())
            if until is not None:
                q += " AND ts_utc <= ?"
                params.append(_utc_ts(until).isoformat())
            q += " ORDER BY ts_utc ASC"
            if limit is not None:
                q += " LIMIT ?"
                params.append(limit)
            rows = c.execute(q, params).fetchall()
        return self._rows_to_observations(rows, symbol)

    def count_observations(self, symbol: str) -> int:
        """Return the total number of observations stored for a symbol."""
        with self._conn() as c:
            row = c.execute(
                "SELECT COUNT(*) FROM observations WHERE symbol = ?",
                (symbol,),
            ).fetchone()
        return row[0] if row else 0

    def _rows_to_observations(self, rows: list, symbol: str) -> list[DataEvent]:
        out: list[DataEvent] = []
        for ts_utc, close, o, h, l, vol in rows:
            # SQLite has no native datetime; we store ISO strings
            ts = datetime.fromisoformat(ts_utc.replace("Z", "+00:00"))
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)
            out.append(
                DataEvent(
                    timestamp=ts,
                    symbol=symbol,
                    close=Decimal(close),
                    open=_dec(o),
                    high=_dec(h),
                    low=_dec(l),
                    volume=_dec(vol),
                )
            )
        return out
