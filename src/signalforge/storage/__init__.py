"""Run persistence."""

from signalforge.storage.base import RunStore, StoredItem, StoredRun
from signalforge.storage.sqlite import SQLiteRunStore, format_timestamp

__all__ = [
    "RunStore",
    "SQLiteRunStore",
    "StoredItem",
    "StoredRun",
    "format_timestamp",
]
