"""
app/api/analytics.py

Purpose: Dashboard read endpoints

- Overview, scan report, transaction report
- Date bounds arrive as ISO strings in the query
"""

from typing import Optional

from fastapi import APIRouter, Depends

from app.analytics.buckets import Period
from app.api.deps import get_analytics_service, parse_date_param
from app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/dashboard")
async def dashboard(analytics: AnalyticsService = Depends(get_analytics_service)):
    return await analytics.dashboard()


@router.get("/scans")
async def scans_report(
    gym: Optional[str] = None,
    user: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    period: Period = Period.DAILY,
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """
    Scans matching every given filter.

    Query:
    - gym: gym name or id
    - user: user id
    - start / end: inclusive bounds (a date-only end covers that whole day)
    - period: daily, weekly or monthly
    """
    return await analytics.scans_report(
        gym=gym,
        user=user,
        start=parse_date_param(start, "start"),
        end=parse_date_param(end, "end", end_of_day=True),
        period=period,
    )


@router.get("/scans/gyms")
async def scan_gym_names(analytics: AnalyticsService = Depends(get_analytics_service)):
    return {"gyms": await analytics.scan_gym_names()}


@router.get("/transactions")
async def transactions_report(
    user: Optional[str] = None,
    subscription: Optional[str] = None,
    status: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    period: Period = Period.DAILY,
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    return await analytics.transactions_report(
        user=user,
        subscription=subscription,
        status=status,
        start=parse_date_param(start, "start"),
        end=parse_date_param(end, "end", end_of_day=True),
        period=period,
    )
