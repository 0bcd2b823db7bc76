"""Shared utility functions."""
import re
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as dateparser


def parse_duration_seconds(value: Union[str, int, float]) -> int:
    """Parse a duration like '30s', '60m', '1h', '2d' (or a bare number of seconds).

    Raises ValueError on invalid input.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    stripped = value.strip()
    if stripped.isdigit():
        return int(stripped)
    match = re.match(r"^(\d+)\s*([smhdw])$", stripped)
    if not match:
        raise ValueError(f"Invalid duration '{value}'. Use e.g. 30s, 60m, 1h, 1d, 1w")
    amount, unit = int(match.group(1)), match.group(2)
    multipliers = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
    return amount * multipliers[unit]


def to_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-ish timestamp into an aware UTC datetime (naive input is taken as UTC)."""
    if not value:
        return None
    return to_utc(dateparser.parse(value))


def wait_text(seconds: float) -> str:
    """Short English wait time like '45s', '12m', '2h'."""
    seconds = max(0, int(seconds))
    if seconds < 60:
        return f"{seconds}s"
    minutes = -(-seconds // 60)
    if minutes < 60:
        return f"{minutes}m"
    return f"{-(-minutes // 60)}h"
