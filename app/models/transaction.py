"""
app/models/transaction.py

Purpose: Payment transaction event
"""

from typing import Any

from pydantic import Field

from app.models.base import StoredDocument

# Older documents carry their time under one of these names instead of UpdatedAt
FALLBACK_TIME_FIELDS = ("createdAt", "CreatedAt", "date", "Date", "timestamp", "Timestamp")


class Transaction(StoredDocument):
    transaction_id: str = Field(default="", alias="transactionId")
    user_id: str = Field(default="", alias="UserId")
    amount: Any = Field(default=0, alias="Amount")
    order_id: str = Field(default="", alias="OrderId")
    status: str = Field(default="", alias="Status")
    subscription: str = Field(default="", alias="Subscription")
    updated_at: Any = Field(default=None, alias="UpdatedAt")

    @property
    def occurred_at(self) -> Any:
        """The transaction's time, whichever field it was stored under."""
        if self.updated_at:
            return self.updated_at
        extra = self.model_extra or {}
        for field in FALLBACK_TIME_FIELDS:
            if extra.get(field):
                return extra[field]
        return None
