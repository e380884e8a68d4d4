"""
app/services/push_service.py

Purpose: Push notifications via the FCM HTTP v1 API

- One message per device token
- Per-token outcome; a failing token never stops the others
- Failures carry the token position and whether the token is no longer
  valid, so the caller can prune it (tokens in errors are masked)
"""

from typing import Any, Dict, List, Optional

import httpx

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger, mask_token
from utils.constants import PUSH_ANDROID_CHANNEL, PUSH_CLICK_ACTION, PUSH_INVALID_TOKEN_CODES

logger = get_logger(__name__)


def build_message(
    token: str,
    title: str,
    body: str,
    data: Optional[Dict[str, Any]] = None,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Builds one FCM v1 message for a device token.

    Data values are sent as strings; the click action and default sound are
    always added so the mobile app opens on tap.
    """
    payload = {key: str(value) for key, value in (data or {}).items()}
    payload.update({"click_action": PUSH_CLICK_ACTION, "sound": "default"})

    notification = {"title": title, "body": body}
    if image_url:
        notification["image"] = image_url

    return {
        "token": token,
        "notification": notification,
        "data": payload,
        "android": {
            "priority": "high",
            "notification": {"sound": "default", "channel_id": PUSH_ANDROID_CHANNEL},
        },
        "apns": {"payload": {"aps": {"sound": "default", "badge": 1}}},
    }


def response_body(response: httpx.Response) -> Dict[str, Any]:
    """JSON object body of a gateway response; {} when it is anything else."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_code(response: httpx.Response) -> str:
    """FCM error code from an error response (falls back to the HTTP status)."""
    error = response_body(response).get("error")
    if isinstance(error, str) and error:
        return error
    if not isinstance(error, dict):
        return f"HTTP_{response.status_code}"

    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("errorCode"):
            return detail["errorCode"]
    return error.get("status") or f"HTTP_{response.status_code}"


def error_message(response: httpx.Response) -> str:
    error = response_body(response).get("error")
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return response.text


class PushService:
    """Service for sending push notifications"""

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or default_settings
        self.transport = transport

    @property
    def send_url(self) -> str:
        return f"{self.config.FCM_BASE_URL}/v1/projects/{self.config.FCM_PROJECT_ID}/messages:send"

    def is_configured(self) -> bool:
        return self.config.push_configured

    async def send_notification(
        self,
        tokens: List[str],
        title: str,
        body: str,
        data: Optional[Dict[str, Any]] = None,
        image_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Sends a notification to every token.

        Returns:
            {
                "successful": int,
                "failed": int,
                "details": {
                    "successful": [{"token", "messageId", "success"}],
                    "errors": [{"index", "token", "error", "code", "invalidToken"}]
                }
            }

        Raises:
            ExternalServiceError: If the push gateway is not configured
        """
        if not self.is_configured():
            raise ExternalServiceError("Push messaging is not configured")

        successful: List[Dict[str, Any]] = []
        errors: List[Dict[str, Any]] = []
        headers = {"Authorization": f"Bearer {self.config.FCM_ACCESS_TOKEN}"}

        logger.info(f"📤 Sending push notification to {len(tokens)} devices")

        async with httpx.AsyncClient(
            timeout=self.config.PUSH_TIMEOUT,
            transport=self.transport,
        ) as client:
            for index, token in enumerate(tokens):
                message = build_message(token, title, body, data, image_url)
                try:
                    response = await client.post(self.send_url, json={"message": message}, headers=headers)
                except httpx.TimeoutException:
                    logger.error(f"Push gateway timeout for {mask_token(token)}")
                    errors.append(self._failure(index, token, "Push gateway timeout", "TIMEOUT"))
                    continue
                except httpx.RequestError as e:
                    logger.error(f"Push gateway unreachable for {mask_token(token)}: {e}")
                    errors.append(self._failure(index, token, str(e), "NETWORK_ERROR"))
                    continue

                if response.status_code == 200:
                    successful.append({
                        "token": token,
                        "messageId": response_body(response).get("name"),
                        "success": True,
                    })
                else:
                    code = error_code(response)
                    logger.warning(f"❌ Push failed for {mask_token(token)}: {code}")
                    errors.append(self._failure(index, token, error_message(response), code))

        logger.info(f"✅ Push sent: {len(successful)} delivered, {len(errors)} failed")
        return {
            "successful": len(successful),
            "failed": len(errors),
            "details": {"successful": successful, "errors": errors},
        }

    @staticmethod
    def _failure(index: int, token: str, error: str, code: str) -> Dict[str, Any]:
        return {
            "index": index,
            "token": mask_token(token),
            "error": error,
            "code": code,
            "invalidToken": code in PUSH_INVALID_TOKEN_CODES,
        }


# Singleton instance
push_service = PushService()
