"""
app/schemas/subscriptions.py

Purpose: Subscription plan update body
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubscriptionUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price: Optional[str] = None
    subscription_days: Optional[str] = Field(default=None, alias="SubscriptionDays")

    @field_validator("price", "subscription_days", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        # Plans store both values as strings
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v
