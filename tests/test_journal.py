"""Tests for journal writer. Append-only JSON lines; Decimals as strings."""

import json
import tempfile
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from journal.writer import JournalWriter

AT = datetime(2024, 1, 2, 9, 30, tzinfo=timezone.utc)


def test_journal_writer_append_only() -> None:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".jsonl", delete=False) as f:
        path = Path(f.name)
    try:
        j = JournalWriter(path)
        j.order("USDT-ETH", "buy", Decimal("0.2"), "MKT", AT)
        j.fill("USDT-ETH", "BOT", Decimal("0.2"), Decimal("100"), Decimal("0.05"), AT, exchange="poloniex")
        with open(path) as f:
            lines = f.readlines()
        assert len(lines) == 2
        r0 = json.loads(lines[0])
        assert r0["event"] == "order"
        assert r0["qty"] == "0.2"
        assert r0["at"] == AT.isoformat()
        r1 = json.loads(lines[1])
        assert r1["event"] == "fill"
        assert r1["cost"] == "0.05"
        assert r1["exchange"] == "poloniex"
        assert "logged_at" in r1

        JournalWriter(path).rejection("USDT-ETH", "No holdings to sell", "InsufficientHoldings", AT)
        with open(path) as f:
            assert len(f.readlines()) == 3
    finally:
        path.unlink(missing_ok=True)


def test_journal_run_summary_serialises_nested(tmp_path: Path) -> None:
    from datetime import timedelta

    path = tmp_path / "sub" / "journal.jsonl"
    j = JournalWriter(path)
    j.run_summary(
        ["USDT-ETH"],
        Decimal("999.95"),
        {"max_drawdown": Decimal("-0.1"), "max_drawdown_duration": timedelta(hours=2), "max_drawdown_time": AT},
    )
    record = json.loads(path.read_text())
    assert record["final_value"] == "999.95"
    assert record["summary"]["max_drawdown"] == "-0.1"
    assert record["summary"]["max_drawdown_duration"] == 7200.0
    assert record["summary"]["max_drawdown_time"] == AT.isoformat()


def test_journal_echo_stdout(tmp_path: Path, capsys) -> None:
    j = JournalWriter(tmp_path / "j.jsonl", echo_stdout=True)
    j.order("USDT-ETH", "sell", Decimal("0.2"), "MKT", AT)
    out = capsys.readouterr().out
    assert '"event": "order"' in out


def test_records_reads_back_in_order(tmp_path: Path) -> None:
    j = JournalWriter(tmp_path / "j.jsonl")
    assert list(j.records()) == []
    j.order("USDT-ETH", "buy", Decimal("0.2"), "MKT", AT)
    j.rejection("USDT-ETH", "cash 1 <= 20", "InsufficientCash", AT, direction="buy")
    events = [r["event"] for r in j.records()]
    assert events == ["order", "rejection"]
    assert list(j.records())[1]["direction"] == "buy"
