"""
app/models/scan.py

Purpose: QR check-in event

- Written by the mobile app when a member scans a gym's access code
- Gym details are a snapshot taken at scan time
"""

from typing import Any, Optional

from pydantic import Field

from app.models.base import StoredDocument


class QRScan(StoredDocument):
    qr_id: str = Field(default="", alias="QRID")
    user_id: str = Field(default="", alias="UserID")
    gym_id: Optional[str] = Field(default=None, alias="gymID")
    gym_name: str = Field(default="", alias="gymName")
    gym_address: str = Field(default="", alias="gymAddress")
    gym_subscription: str = Field(default="", alias="gymSubscription")
    time: Any = Field(default=None, alias="Time")
