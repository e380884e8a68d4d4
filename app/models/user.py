"""
app/models/user.py

Purpose: User profile document

- Linked one-to-one with an auth account (same id)
- Subscription tier and dates
- Push token, frozen flag, organization label
"""

from typing import Any, Optional

from pydantic import Field

from app.models.base import StoredDocument
from utils.constants import SUBSCRIPTION_NONE


class User(StoredDocument):
    user_id: str = Field(default="", alias="UserID")
    name: str = Field(default="", alias="Name")
    email: str = Field(default="", alias="Email")
    phone_no: str = Field(default="", alias="PhoneNo")
    gender: str = Field(default="", alias="Gender")
    subscription: str = Field(default=SUBSCRIPTION_NONE, alias="Subscription")
    subscription_start_date: Any = Field(default=None, alias="SubscriptionStartDate")
    subscription_end_date: Any = Field(default=None, alias="SubscriptionEndDate")
    fcm_token: str = Field(default="", alias="FCMToken")
    is_frozen: bool = Field(default=False, alias="isUserFreezed")
    organization: str = Field(default="", alias="Organization")
    verified: bool = Field(default=False, alias="Verified")
    password_reset_required: bool = Field(default=False, alias="PasswordResetRequired")
    credits: Optional[float] = None
    created_at: Any = Field(default=None, alias="CreatedAt")
    updated_at: Any = Field(default=None, alias="UpdatedAt")

    @property
    def has_push_token(self) -> bool:
        return bool(self.fcm_token and self.fcm_token.strip())
