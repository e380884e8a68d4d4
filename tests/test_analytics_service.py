import asyncio
from datetime import datetime, timedelta, timezone

from conftest import FakeDatabase
from app.analytics.buckets import Period
from app.services.analytics_service import AnalyticsService
from utils.time_utils import to_iso, utc_now


def seeded_database():
    database = FakeDatabase()
    now = utc_now()
    database.gyms.documents.extend([{"_id": "g1", "name": "Iron Temple"}, {"_id": "g2", "name": "Pulse"}])
    database.users.documents.extend([{"_id": "u1"}, {"_id": "u2"}, {"_id": "u3"}])
    database.scans.documents.extend([
        {"_id": "s1", "UserID": "u1", "gymName": "Iron Temple", "gymID": "g1", "Time": to_iso(now)},
        {"_id": "s2", "UserID": "u2", "gymName": "Pulse", "gymID": "g2", "Time": to_iso(now - timedelta(days=2))},
        {"_id": "s3", "UserID": "u1", "gymName": "Iron Temple", "gymID": "g1", "Time": "2024-01-15T09:00:00Z"},
        {"_id": "s4", "UserID": "u3", "gymName": "Pulse", "gymID": "g2", "Time": "garbage"},
    ])
    database.transactions.documents.extend([
        {"_id": "t1", "UserId": "u1", "Amount": "1500", "Status": "Paid",
         "Subscription": "Premium", "UpdatedAt": "2024-01-15T09:00:00Z"},
        {"_id": "t2", "UserId": "u2", "Amount": 900, "Status": "Pending",
         "Subscription": "Standard", "UpdatedAt": "2024-01-16T09:00:00Z"},
        {"_id": "t3", "UserId": "u2", "Amount": 700, "Status": "Paid",
         "Subscription": "Standard", "UpdatedAt": "2024-02-01T09:00:00Z"},
    ])
    return database


def test_dashboard_overview():
    overview = asyncio.run(AnalyticsService(seeded_database()).dashboard())

    assert overview["totalGyms"] == 2
    assert overview["totalUsers"] == 3
    assert overview["todayScans"] == 1
    assert overview["totalRevenue"] == 2200
    assert [scan["id"] for scan in overview["recentScans"]][:3] == ["s1", "s2", "s3"]
    assert len(overview["scansChart"]["data"]) == 7
    assert overview["scansChart"]["data"][-1] == 1
    assert overview["scansChart"]["data"][-3] == 1
    assert sum(overview["scansChart"]["data"]) == 2


def test_scans_report_filters_and_summarizes():
    service = AnalyticsService(seeded_database())

    by_gym = asyncio.run(service.scans_report(gym="Iron Temple"))
    by_id = asyncio.run(service.scans_report(gym="g1"))
    bounded = asyncio.run(service.scans_report(
        start=datetime(2024, 1, 1, tzinfo=timezone.utc),
        end=datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc),
    ))

    assert [scan["id"] for scan in by_gym["scans"]] == ["s1", "s3"]
    assert by_id["summary"] == by_gym["summary"] == {"totalScans": 2, "uniqueGyms": 1, "uniqueUsers": 1}
    assert [scan["id"] for scan in bounded["scans"]] == ["s3"]


def test_scans_report_monthly_groups():
    report = asyncio.run(AnalyticsService(seeded_database()).scans_report(user="u1", period=Period.MONTHLY))

    assert report["chart"]["data"] == [1, 1]
    assert report["groups"][-1]["period"] == "2024-01"
    assert report["groups"][-1]["count"] == 1


def test_scan_gym_names():
    assert asyncio.run(AnalyticsService(seeded_database()).scan_gym_names()) == ["Iron Temple", "Pulse"]


def test_transactions_report():
    service = AnalyticsService(seeded_database())

    report = asyncio.run(service.transactions_report(period=Period.MONTHLY))
    standard = asyncio.run(service.transactions_report(subscription="Standard"))

    assert [txn["id"] for txn in report["transactions"]] == ["t3", "t2", "t1"]
    assert report["summary"]["totalRevenue"] == 2200
    assert report["chart"]["keys"] == ["2024-01", "2024-02"]
    assert report["chart"]["revenue"] == [1500, 700]
    assert report["chart"]["count"] == [2, 1]
    assert report["filters"] == {"subscriptions": ["Premium", "Standard"], "statuses": ["Paid", "Pending"]}

    assert standard["summary"] == {"totalRevenue": 700, "totalTransactions": 2, "uniqueUsers": 1}
    assert standard["filters"] == report["filters"]
