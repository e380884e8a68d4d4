"""
utils/time_utils.py

Purpose: Time and timestamp helpers

- Parses every timestamp shape found in the collections
- UTC normalization
- ISO formatting for stored audit fields
"""

from datetime import datetime, date, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parses a stored timestamp into an aware UTC datetime.

    Accepts datetime/date objects, ISO-8601 strings (with or without a
    trailing ``Z``, date-only allowed) and store timestamps carrying a
    ``seconds`` component, either as a mapping (``{"seconds": ...}`` or
    ``{"_seconds": ...}``) or as an object attribute.

    Returns:
        Aware datetime in UTC, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        seconds = _seconds_component(value)
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        return None


def _seconds_component(value: Any) -> Optional[float]:
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
    else:
        seconds = getattr(value, "seconds", None)
        nanos = getattr(value, "nanoseconds", 0)

    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    if isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
        nanos = 0
    return seconds + nanos / 1e9


def to_iso(dt: datetime) -> str:
    """Formats an aware datetime as an ISO-8601 string in UTC with a Z suffix."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

