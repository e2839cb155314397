"""Append-only JSONL journal of orders, fills and rejections."""

from journal.writer import JournalWriter

__all__ = ["JournalWriter"]
