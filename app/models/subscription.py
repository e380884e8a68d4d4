"""
app/models/subscription.py

Purpose: Subscription plan document (price and duration stored as strings)
"""

from typing import Any

from pydantic import Field, field_validator

from app.models.base import StoredDocument


class SubscriptionPlan(StoredDocument):
    subscription_id: str = Field(default="", alias="SubscriptionID")
    name: str = ""
    price: str = ""
    subscription_days: str = Field(default="", alias="SubscriptionDays")

    @field_validator("price", "subscription_days", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
