"""
app/api/notifications.py

Purpose: Push notification endpoint
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_push_service
from app.schemas.notifications import SendNotificationRequest
from app.services.push_service import PushService

router = APIRouter()


@router.post("/send-notification")
async def send_notification(
    payload: SendNotificationRequest,
    push: PushService = Depends(get_push_service),
):
    """
    Sends one notification to every token.

    Per-token failures are reported in ``results.details.errors`` and do not
    fail the request.
    """
    content = payload.notification
    results = await push.send_notification(
        tokens=payload.tokens,
        title=content.title,
        body=content.body,
        data=content.data,
        image_url=content.image_url,
    )
    return {
        "success": True,
        "message": f"Notification sent to {results['successful']} users",
        "results": results,
    }
