from datetime import date, datetime, timedelta, timezone

from app.analytics.buckets import (
    Period,
    aggregate_revenue,
    bucket_by_period,
    bucket_label,
    count_last_days,
    group_records_by_period,
    to_chart_series,
    to_revenue_series,
    week_start,
)


def scan(when):
    return {"Time": when}


def test_daily_buckets_in_chronological_order():
    records = [scan("2024-01-06T09:00:00Z")] * 5 + [scan("2024-01-05T18:30:00Z")] * 10

    buckets = bucket_by_period(records, "Time", Period.DAILY)

    assert list(buckets.items()) == [("2024-01-05", 10), ("2024-01-06", 5)]


def test_unparseable_timestamps_are_skipped():
    records = [
        scan("2024-01-05T10:00:00Z"),
        scan("not a date"),
        scan(None),
        scan(""),
        {"gymName": "no time at all"},
    ]

    buckets = bucket_by_period(records, "Time", Period.DAILY)

    assert dict(buckets) == {"2024-01-05": 1}
    assert sum(buckets.values()) == 1


def test_every_timestamp_shape_is_bucketed():
    records = [
        scan(datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)),
        scan("2024-03-01T23:59:59+00:00"),
        scan({"seconds": int(datetime(2024, 3, 1, 6, tzinfo=timezone.utc).timestamp()), "nanoseconds": 0}),
        scan({"_seconds": int(datetime(2024, 3, 2, 6, tzinfo=timezone.utc).timestamp())}),
    ]

    assert dict(bucket_by_period(records, "Time", Period.DAILY)) == {"2024-03-01": 3, "2024-03-02": 1}


def test_bucket_totals_match_parseable_records():
    records = [scan(f"2024-02-{day:02d}T08:00:00Z") for day in range(1, 29)] + [scan("garbage")] * 4

    for period in Period:
        assert sum(bucket_by_period(records, "Time", period).values()) == 28


def test_monthly_keys_are_zero_padded_and_sorted():
    records = [scan("2024-11-03"), scan("2024-02-10"), scan("2024-10-01"), scan("2023-12-31")]

    keys = list(bucket_by_period(records, "Time", Period.MONTHLY))

    assert keys == ["2023-12", "2024-02", "2024-10", "2024-11"]
    assert keys == sorted(keys)
    assert len(keys) == len(set(keys))


def test_weekly_buckets_start_on_sunday():
    # 2024-01-07 is a Sunday; Saturday the 13th closes the same week
    records = [scan("2024-01-07T00:00:00Z"), scan("2024-01-10T12:00:00Z"), scan("2024-01-13T23:00:00Z"),
               scan("2024-01-14T01:00:00Z")]

    buckets = bucket_by_period(records, "Time", Period.WEEKLY)

    assert dict(buckets) == {"2024-01-07": 3, "2024-01-14": 1}
    assert week_start(date(2024, 1, 6)) == date(2023, 12, 31)


def test_bucketing_ignores_input_order_and_is_repeatable():
    records = [scan(f"2024-01-{day:02d}T10:00:00Z") for day in (3, 1, 2, 1, 3, 3)]

    first = bucket_by_period(records, "Time", Period.DAILY)
    again = bucket_by_period(records, "Time", Period.DAILY)
    reversed_input = bucket_by_period(list(reversed(records)), "Time", Period.DAILY)

    assert first == again == reversed_input
    assert list(first.items()) == [("2024-01-01", 2), ("2024-01-02", 1), ("2024-01-03", 3)]


def test_bucket_labels():
    assert bucket_label("2024-01-05", Period.DAILY) == "Jan 5"
    assert bucket_label("2024-01-28", Period.WEEKLY) == "Jan 28 – Feb 3"
    assert bucket_label("2024-01", Period.MONTHLY) == "January 2024"


def test_chart_series_lines_up_labels_and_counts():
    series = to_chart_series({"2024-01-06": 5, "2024-01-05": 10}, Period.DAILY)

    assert series == {
        "keys": ["2024-01-05", "2024-01-06"],
        "labels": ["Jan 5", "Jan 6"],
        "data": [10, 5],
    }


def test_revenue_counts_only_paid_amounts():
    transactions = [
        {"UpdatedAt": "2024-01-05T10:00:00Z", "amount": 100, "status": "Paid"},
        {"UpdatedAt": "2024-01-05T11:00:00Z", "amount": 50, "status": "Pending"},
    ]

    buckets = aggregate_revenue(transactions, "UpdatedAt", Period.DAILY)

    assert buckets["2024-01-05"].revenue == 100
    assert buckets["2024-01-05"].count == 2


def test_revenue_treats_non_numeric_amounts_as_zero():
    transactions = [
        {"UpdatedAt": "2024-01-05", "amount": "250.5", "status": "Paid"},
        {"UpdatedAt": "2024-01-05", "amount": "n/a", "status": "Paid"},
        {"UpdatedAt": "2024-01-05", "amount": None, "status": "Paid"},
    ]

    bucket = aggregate_revenue(transactions, "UpdatedAt", Period.MONTHLY)["2024-01"]

    assert bucket.revenue == 250.5
    assert bucket.count == 3


def test_revenue_treats_non_finite_amounts_as_zero():
    transactions = [
        {"UpdatedAt": "2024-01-05", "amount": 100, "status": "Paid"},
        {"UpdatedAt": "2024-01-05", "amount": "NaN", "status": "Paid"},
        {"UpdatedAt": "2024-01-05", "amount": "-inf", "status": "Paid"},
        {"UpdatedAt": "2024-01-06", "amount": float("nan"), "status": "Paid"},
    ]

    series = to_revenue_series(aggregate_revenue(transactions, "UpdatedAt", Period.DAILY), Period.DAILY)

    assert series["revenue"] == [100, 0]
    assert series["count"] == [3, 1]


def test_out_of_range_timestamps_are_skipped():
    records = [
        scan("2024-01-05T10:00:00Z"),
        scan("0001-01-01T00:00:00"),
        scan("0001-01-01T00:00:00+05:00"),
    ]

    assert bucket_by_period(records, "Time", Period.WEEKLY) == {"2023-12-31": 1}
    assert bucket_by_period(records, "Time", Period.DAILY) == {"0001-01-01": 1, "2024-01-05": 1}


def test_last_week_of_the_calendar_has_a_label():
    assert bucket_label("9999-12-26", Period.WEEKLY) == "Dec 26 – Dec 31"


def test_groups_are_newest_first():
    records = [scan("2024-01-05T10:00:00Z"), scan("2024-02-01T10:00:00Z"), scan("2024-01-20T10:00:00Z")]

    groups = group_records_by_period(records, "Time", Period.MONTHLY)

    assert [group["period"] for group in groups] == ["2024-02", "2024-01"]
    assert [group["label"] for group in groups] == ["February 2024", "January 2024"]
    assert len(groups[1]["records"]) == 2


def test_last_days_are_zero_filled():
    today = date(2024, 1, 5)
    records = [scan("2024-01-05T08:00:00Z"), scan("2024-01-05T09:00:00Z"), scan("2024-01-01T09:00:00Z"),
               scan("2023-12-01T09:00:00Z")]

    chart = count_last_days(records, "Time", days=7, today=today)

    assert chart["keys"][0] == (today - timedelta(days=6)).isoformat()
    assert chart["keys"][-1] == "2024-01-05"
    assert chart["labels"][-1] == "Fri, Jan 5"
    assert chart["data"] == [0, 0, 1, 0, 0, 0, 2]
