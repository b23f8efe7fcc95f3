"""Utils module for the dashboard"""
from .date_time_utils import (
    get_now,
    ensure_aware,
    start_of_day,
    days_until,
    format_duration,
    format_time_ago,
    format_currency,
)
from .snapshot_store import SnapshotStore

__all__ = [
    "get_now",
    "ensure_aware",
    "start_of_day",
    "days_until",
    "format_duration",
    "format_time_ago",
    "format_currency",
    "SnapshotStore",
]
