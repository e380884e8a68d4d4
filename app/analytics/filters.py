"""
app/analytics/filters.py

Purpose: Record filtering and summaries

- Multi-field AND filter with inclusive date bounds
- Scan and transaction summary figures
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from app.analytics.buckets import to_amount, read_field
from utils.constants import TRANSACTION_STATUS_PAID
from utils.time_utils import parse_timestamp


@dataclass(frozen=True)
class FieldMatch:
    """
    Equality filter on one or more alternative fields.

    Matches when any of ``fields`` equals ``value``. An empty value matches
    every record.
    """

    fields: Tuple[str, ...]
    value: Any = None

    @classmethod
    def on(cls, *fields: str, value: Any = None) -> "FieldMatch":
        return cls(fields=tuple(fields), value=value)

    @property
    def active(self) -> bool:
        return self.value not in (None, "")

    def matches(self, record: Any) -> bool:
        if not self.active:
            return True
        return any(read_field(record, field) == self.value for field in self.fields)


def filter_records(
    records: Iterable[Any],
    matches: Sequence[FieldMatch] = (),
    time_field: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Any]:
    """
    Narrows records by every active filter (logical AND).

    Args:
        records: Records to filter
        matches: Field equality filters
        time_field: Field holding the timestamp compared to the bounds
        start: Inclusive lower bound
        end: Inclusive upper bound

    A record whose timestamp does not parse never passes an active bound.
    """
    lower = parse_timestamp(start) if start is not None else None
    upper = parse_timestamp(end) if end is not None else None
    bounded = time_field is not None and (lower is not None or upper is not None)

    result = []
    for record in records:
        if not all(match.matches(record) for match in matches):
            continue

        if bounded:
            moment = parse_timestamp(read_field(record, time_field))
            if moment is None:
                continue
            if lower is not None and moment < lower:
                continue
            if upper is not None and moment > upper:
                continue

        result.append(record)
    return result


def summarize_scans(scans: Iterable[Any]) -> dict:
    scans = list(scans)
    gyms = {read_field(scan, "gym_name") or read_field(scan, "gym_id") for scan in scans}
    gyms.discard(None)
    gyms.discard("")
    return {
        "totalScans": len(scans),
        "uniqueGyms": len(gyms),
        "uniqueUsers": len({read_field(scan, "user_id") for scan in scans}),
    }


def summarize_transactions(transactions: Iterable[Any]) -> dict:
    transactions = list(transactions)
    revenue = sum(
        to_amount(read_field(txn, "amount"))
        for txn in transactions
        if read_field(txn, "status") == TRANSACTION_STATUS_PAID
    )
    return {
        "totalRevenue": revenue,
        "totalTransactions": len(transactions),
        "uniqueUsers": len({read_field(txn, "user_id") for txn in transactions}),
    }


def distinct_values(records: Iterable[Any], field: str) -> List[str]:
    """Sorted distinct non-empty values of a field (for filter pickers)."""
    return sorted({value for value in (read_field(r, field) for r in records) if value})
