"""
app/api/deps.py

Purpose: FastAPI dependencies

- Hands the process-wide Database to request handlers
- Builds services on top of it
- Query parameter parsing shared by the report endpoints
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request

from app.core.exceptions import ValidationError
from app.db.mongo import Database
from app.services.analytics_service import AnalyticsService
from app.services.auth_service import AuthService
from app.services.email_service import EmailService, email_service
from app.services.gym_service import GymService
from app.services.organization_service import OrganizationService
from app.services.payout_service import PayoutService
from app.services.push_service import PushService, push_service
from app.services.subscription_service import SubscriptionService
from app.services.user_service import UserService
from utils.time_utils import parse_timestamp

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_email_service() -> EmailService:
    return email_service


def get_push_service() -> PushService:
    return push_service


def get_auth_service(database: Database = Depends(get_database)) -> AuthService:
    return AuthService(database.auth_accounts)


def get_user_service(
    database: Database = Depends(get_database),
    auth: AuthService = Depends(get_auth_service),
) -> UserService:
    return UserService(database.users, auth)


def get_organization_service(
    users: UserService = Depends(get_user_service),
    email: EmailService = Depends(get_email_service),
) -> OrganizationService:
    return OrganizationService(users, email)


def get_gym_service(database: Database = Depends(get_database)) -> GymService:
    return GymService(database.gyms, database.images_bucket())


def get_analytics_service(database: Database = Depends(get_database)) -> AnalyticsService:
    return AnalyticsService(database)


def get_subscription_service(database: Database = Depends(get_database)) -> SubscriptionService:
    return SubscriptionService(database.subscriptions)


def get_payout_service(database: Database = Depends(get_database)) -> PayoutService:
    return PayoutService(database.payout_requests)


def parse_date_param(value: Optional[str], name: str, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parses a date bound from a query string.

    A date without a time is the start of that day, or its last instant
    when ``end_of_day`` is set (inclusive upper bounds).

    Raises:
        ValidationError: Value present but not a date
    """
    if value is None or not value.strip():
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValidationError(f"Invalid {name} date: {value}")
    if end_of_day and DATE_ONLY.match(value.strip()):
        return parsed + timedelta(days=1) - timedelta(microseconds=1)
    return parsed
