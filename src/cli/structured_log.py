"""
Structured JSON event logger for replay runs.

One JSON object per line, tagged with the run id and a per-run sequence
number so interleaved runs can be told apart by a log aggregator.

Optional webhook: order_failed, run_complete and error records are also
POSTed to the configured URL.
"""

from __future__ import annotations

import json
import logging
import sys
import urllib.request
import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, TextIO

logger = logging.getLogger("replay.events")

ALERT_EVENTS = frozenset({"order_failed", "run_complete", "error"})


class StructuredEventLogger:
    """JSON-lines sink for run lifecycle events."""

    def __init__(
        self,
        symbols: list[str],
        *,
        enabled: bool = True,
        webhook_url: str = "",
        stream: TextIO | None = None,
        run_id: str | None = None,
    ) -> None:
        self.run_id = run_id or uuid.uuid4().hex[:12]
        self.counts: Counter[str] = Counter()
        self._symbols = list(symbols)
        self._enabled = enabled
        self._webhook = webhook_url.strip()
        self._out = stream if stream is not None else sys.stderr
        self._seq = 0

    def _emit(self, event_type: str, **fields: Any) -> dict:
        self._seq += 1
        self.counts[event_type] += 1
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "seq": self._seq,
            "event": event_type,
            "symbols": self._symbols,
            **fields,
        }
        line = json.dumps(record, default=str)
        if self._enabled:
            self._out.write(line + "\n")
            self._out.flush()
        if self._webhook and event_type in ALERT_EVENTS:
            self._alert(line)
        return record

    def _alert(self, body: str) -> None:
        req = urllib.request.Request(
            self._webhook,
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            urllib.request.urlopen(req, timeout=5)
        except OSError as exc:
            logger.warning("Webhook POST to %s failed: %s", self._webhook, exc)

    def run_start(self, observations: int, initial_cash: str) -> dict:
        return self._emit("run_start", observations=observations, initial_cash=initial_cash)

    def fill(self, symbol: str, side: str, qty: str, price: str, cost: str) -> dict:
        return self._emit("fill", symbol=symbol, side=side, qty=qty, price=price, cost=cost)

    def signal_rejected(self, symbol: str, error: str, reason: str) -> dict:
        return self._emit("signal_rejected", symbol=symbol, error=error, reason=reason)

    def order_failed(self, symbol: str, stage: str, reason: str) -> dict:
        return self._emit("order_failed", symbol=symbol, stage=stage, reason=reason)

    def run_complete(self, fills: int, final_value: str, total_return: str | None) -> dict:
        return self._emit(
            "run_complete",
            fills=fills,
            final_value=final_value,
            total_return=total_return,
            rejected=self.counts["signal_rejected"],
            failed=self.counts["order_failed"],
        )

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)
