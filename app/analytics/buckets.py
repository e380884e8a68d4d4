"""
app/analytics/buckets.py

Purpose: Time bucketing for charts

- Groups event records into daily / weekly / monthly buckets
- Counts per bucket (scans) and revenue + count per bucket (transactions)
- Human-readable labels and chart series in chronological order

Records may be dicts or objects; the time field is read by key or attribute.
Records whose timestamp cannot be parsed are skipped, never bucketed.
All bucketing is done in UTC.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from numbers import Number
from typing import Any, Dict, Iterable, List, Optional

from utils.constants import TRANSACTION_STATUS_PAID
from utils.time_utils import parse_timestamp, utc_now


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass
class RevenueBucket:
    revenue: float = 0
    count: int = 0


def read_field(record: Any, field: str) -> Any:
    """Reads a field from a mapping or an object; missing fields read as None."""
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)


def week_start(day: date) -> date:
    """The Sunday that starts the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def bucket_key(moment: datetime, period: Period) -> str:
    """
    Bucket key for a parsed timestamp.

    daily: YYYY-MM-DD, weekly: YYYY-MM-DD of the starting Sunday,
    monthly: YYYY-MM.
    """
    period = Period(period)
    day = moment.date()
    if period is Period.DAILY:
        return day.isoformat()
    if period is Period.WEEKLY:
        return week_start(day).isoformat()
    return f"{day.year:04d}-{day.month:02d}"


def record_bucket_key(record: Any, time_field: str, period: Period) -> Optional[str]:
    """Bucket key for a record, or None when its timestamp does not parse."""
    moment = parse_timestamp(read_field(record, time_field))
    if moment is None:
        return None
    try:
        return bucket_key(moment, period)
    except OverflowError:
        return None


def bucket_label(key: str, period: Period) -> str:
    """
    Humanized label for a bucket key.

    Examples: "Jan 5", "Jan 5 – Jan 11", "January 2024".
    """
    period = Period(period)
    if period is Period.MONTHLY:
        year, month = key.split("-")
        return date(int(year), int(month), 1).strftime("%B %Y")

    start = date.fromisoformat(key)
    if period is Period.DAILY:
        return _short_day(start)
    end = start + timedelta(days=6) if start <= date.max - timedelta(days=6) else date.max
    return f"{_short_day(start)} – {_short_day(end)}"


def _short_day(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def bucket_by_period(records: Iterable[Any], time_field: str, period: Period) -> Dict[str, int]:
    """
    Counts records per time bucket.

    Args:
        records: Event records
        time_field: Name of the field holding the timestamp
        period: daily, weekly or monthly

    Returns:
        Ordered mapping of bucket key to count, ascending by key
    """
    counts: Dict[str, int] = {}
    for record in records:
        key = record_bucket_key(record, time_field, period)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
    return OrderedDict(sorted(counts.items()))


def to_amount(value: Any) -> float:
    """Numeric amount of a stored value; anything non-numeric or non-finite counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, Number):
        amount = value
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return 0
    else:
        return 0

    try:
        return amount if math.isfinite(amount) else 0
    except (TypeError, ValueError):
        return 0


def aggregate_revenue(
    records: Iterable[Any],
    time_field: str,
    period: Period,
    amount_field: str = "amount",
    status_field: str = "status",
    paid_status: str = TRANSACTION_STATUS_PAID,
) -> Dict[str, RevenueBucket]:
    """
    Revenue and transaction count per time bucket.

    Revenue sums the amounts of records whose status is ``paid_status``;
    count covers every record in the bucket regardless of status.
    """
    buckets: Dict[str, RevenueBucket] = {}
    for record in records:
        key = record_bucket_key(record, time_field, period)
        if key is None:
            continue
        bucket = buckets.setdefault(key, RevenueBucket())
        bucket.count += 1
        if read_field(record, status_field) == paid_status:
            bucket.revenue += to_amount(read_field(record, amount_field))
    return OrderedDict(sorted(buckets.items()))


def to_chart_series(buckets: Dict[str, int], period: Period) -> Dict[str, List]:
    """Chronological keys, labels and counts ready for a line chart."""
    keys = sorted(buckets)
    return {
        "keys": keys,
        "labels": [bucket_label(key, period) for key in keys],
        "data": [buckets[key] for key in keys],
    }


def to_revenue_series(buckets: Dict[str, RevenueBucket], period: Period) -> Dict[str, List]:
    keys = sorted(buckets)
    return {
        "keys": keys,
        "labels": [bucket_label(key, period) for key in keys],
        "revenue": [buckets[key].revenue for key in keys],
        "count": [buckets[key].count for key in keys],
    }


def group_records_by_period(
    records: Iterable[Any],
    time_field: str,
    period: Period,
) -> List[Dict[str, Any]]:
    """
    Groups records per bucket for tabular display, newest bucket first.

    Returns:
        [{"period": key, "label": label, "records": [...]}, ...]
    """
    groups: Dict[str, List[Any]] = {}
    for record in records:
        key = record_bucket_key(record, time_field, period)
        if key is None:
            continue
        groups.setdefault(key, []).append(record)

    return [
        {"period": key, "label": bucket_label(key, period), "records": groups[key]}
        for key in sorted(groups, reverse=True)
    ]


def count_last_days(
    records: Iterable[Any],
    time_field: str,
    days: int = 7,
    today: Optional[date] = None,
) -> Dict[str, List]:
    """
    Daily counts for the last ``days`` days ending today, zero-filled.

    Labels look like "Fri, Jan 5".
    """
    today = today or utc_now().date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    counts = bucket_by_period(records, time_field, Period.DAILY)

    return {
        "keys": [day.isoformat() for day in window],
        "labels": [f"{day.strftime('%a')}, {_short_day(day)}" for day in window],
        "data": [counts.get(day.isoformat(), 0) for day in window],
    }
