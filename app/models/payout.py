"""
app/models/payout.py

Purpose: Gym payout (withdrawal) request

- Created by the gym app, actioned by the admin
- pending -> approved | rejected, both terminal
"""

from typing import Any, Optional

from pydantic import Field

from app.models.base import StoredDocument
from utils.constants import PAYOUT_APPROVED, PAYOUT_PENDING, PAYOUT_REJECTED

ALLOWED_TRANSITIONS = {
    PAYOUT_PENDING: (PAYOUT_APPROVED, PAYOUT_REJECTED),
    PAYOUT_APPROVED: (),
    PAYOUT_REJECTED: (),
}


def is_valid_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, ())


class GymPayoutRequest(StoredDocument):
    gym_id: str = Field(default="", alias="gymID")
    gym_name: str = Field(default="", alias="gymName")
    gym_email: str = Field(default="", alias="gymEmail")
    withdrawal_amount: float = Field(default=0, alias="withdrawalAmount")
    status: str = PAYOUT_PENDING
    created_at: Any = Field(default=None, alias="createdAt")
    request_date: Optional[str] = Field(default=None, alias="requestDate")
    approved_at: Optional[str] = Field(default=None, alias="approvedAt")
    approved_by: Optional[str] = Field(default=None, alias="approvedBy")
    rejected_at: Optional[str] = Field(default=None, alias="rejectedAt")
    rejected_by: Optional[str] = Field(default=None, alias="rejectedBy")
