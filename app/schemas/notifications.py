"""
app/schemas/notifications.py

Purpose: Push notification request body
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NotificationContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    data: Optional[Dict[str, Any]] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class SendNotificationRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tokens": ["fcm-device-token"],
                "notification": {
                    "title": "New gyms added",
                    "body": "Three new gyms joined GymVisa this week",
                    "data": {"screen": "gyms"},
                },
            }
        }
    )

    tokens: List[str] = Field(..., min_length=1)
    notification: NotificationContent
