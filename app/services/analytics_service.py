"""
app/services/analytics_service.py

Purpose: Read models for the dashboard views

- Dashboard overview (counts, revenue, recent scans, last 7 days)
- Scan report with filters, summary, chart and per-period groups
- Transaction report with filters, revenue series and per-period groups
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from app.analytics.buckets import (
    Period,
    aggregate_revenue,
    bucket_by_period,
    count_last_days,
    group_records_by_period,
    to_chart_series,
    to_revenue_series,
)
from app.analytics.filters import (
    FieldMatch,
    distinct_values,
    filter_records,
    summarize_scans,
    summarize_transactions,
)
from app.core.logging import get_logger
from app.models.base import parse_documents
from app.models.scan import QRScan
from app.models.transaction import Transaction
from utils.time_utils import parse_timestamp, utc_now

logger = get_logger(__name__)

RECENT_SCANS = 10

# Sorts records with unparseable timestamps last
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def newest_first(records: List[Any], time_field: str) -> List[Any]:
    return sorted(
        records,
        key=lambda record: parse_timestamp(getattr(record, time_field)) or _OLDEST,
        reverse=True,
    )


def _on_day(value: Any, day: date) -> bool:
    moment = parse_timestamp(value)
    return moment is not None and moment.date() == day


def _groups(records: List[Any], time_field: str, period: Period) -> List[Dict[str, Any]]:
    return [
        {
            "period": group["period"],
            "label": group["label"],
            "count": len(group["records"]),
            "records": [record.to_api() for record in newest_first(group["records"], time_field)],
        }
        for group in group_records_by_period(records, time_field, period)
    ]


class AnalyticsService:

    def __init__(self, database):
        self.database = database

    async def load_scans(self) -> List[QRScan]:
        documents = await self.database.scans.find({}).to_list(length=None)
        return parse_documents(QRScan, documents)

    async def load_transactions(self) -> List[Transaction]:
        documents = await self.database.transactions.find({}).to_list(length=None)
        return parse_documents(Transaction, documents)

    async def dashboard(self) -> Dict[str, Any]:
        """Overview figures for the landing page."""
        scans = await self.load_scans()
        transactions = await self.load_transactions()
        today = utc_now().date()

        todays_scans = sum(1 for scan in scans if _on_day(scan.time, today))

        return {
            "totalGyms": await self.database.gyms.count_documents({}),
            "totalUsers": await self.database.users.count_documents({}),
            "todayScans": todays_scans,
            "totalRevenue": summarize_transactions(transactions)["totalRevenue"],
            "recentScans": [scan.to_api() for scan in newest_first(scans, "time")[:RECENT_SCANS]],
            "scansChart": count_last_days(scans, "time", days=7, today=today),
        }

    async def scans_report(
        self,
        gym: Optional[str] = None,
        user: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        period: Period = Period.DAILY,
    ) -> Dict[str, Any]:
        """
        Filtered scans with summary figures.

        Args:
            gym: Gym name or id
            user: User id
            start: Inclusive lower bound on scan time
            end: Inclusive upper bound on scan time
            period: Bucket size for the chart and groups
        """
        scans = filter_records(
            await self.load_scans(),
            matches=[
                FieldMatch.on("gym_name", "gym_id", value=gym),
                FieldMatch.on("user_id", value=user),
            ],
            time_field="time",
            start=start,
            end=end,
        )
        logger.debug(f"Scan report: {len(scans)} scans, period={Period(period).value}")

        return {
            "scans": [scan.to_api() for scan in newest_first(scans, "time")],
            "summary": summarize_scans(scans),
            "chart": to_chart_series(bucket_by_period(scans, "time", period), period),
            "groups": _groups(scans, "time", period),
        }

    async def scan_gym_names(self) -> List[str]:
        return distinct_values(await self.load_scans(), "gym_name")

    async def transactions_report(
        self,
        user: Optional[str] = None,
        subscription: Optional[str] = None,
        status: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        period: Period = Period.DAILY,
    ) -> Dict[str, Any]:
        """Filtered transactions with revenue figures."""
        everything = await self.load_transactions()
        transactions = filter_records(
            everything,
            matches=[
                FieldMatch.on("user_id", value=user),
                FieldMatch.on("subscription", value=subscription),
                FieldMatch.on("status", value=status),
            ],
            time_field="occurred_at",
            start=start,
            end=end,
        )

        return {
            "transactions": [txn.to_api() for txn in newest_first(transactions, "occurred_at")],
            "summary": summarize_transactions(transactions),
            "chart": to_revenue_series(aggregate_revenue(transactions, "occurred_at", period), period),
            "groups": _groups(transactions, "occurred_at", period),
            "filters": {
                "subscriptions": distinct_values(everything, "subscription"),
                "statuses": distinct_values(everything, "status"),
            },
        }
