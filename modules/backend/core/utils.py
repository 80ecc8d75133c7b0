"""
Core Utilities.

Shared utility functions used across the backend and its clients.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC, which keeps SQLite and PostgreSQL storage consistent.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_local_time_label(value: datetime) -> str:
    """Render a naive-UTC timestamp as local wall-clock HH:MM:SS."""
    return value.replace(tzinfo=timezone.utc).astimezone().strftime("%H:%M:%S")
