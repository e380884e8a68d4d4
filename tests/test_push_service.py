import asyncio
import json

import httpx
import pytest

from conftest import FakePushGateway, make_push_service
from app.core.config import Settings
from app.core.exceptions import ExternalServiceError
from app.services.push_service import PushService, build_message

GOOD_TOKEN = "good-token-0123456789abcdefghijklmnop"
STALE_TOKEN = "stale-token-0123456789abcdefghijklmnop"


def test_message_payload():
    message = build_message("tok", "Hello", "World", data={"screen": "gyms", "count": 3}, image_url="https://img")

    assert message["token"] == "tok"
    assert message["notification"] == {"title": "Hello", "body": "World", "image": "https://img"}
    assert message["data"] == {
        "screen": "gyms",
        "count": "3",
        "click_action": "FLUTTER_NOTIFICATION_CLICK",
        "sound": "default",
    }
    assert message["android"]["priority"] == "high"
    assert message["android"]["notification"]["channel_id"] == "gymvisa_notifications"
    assert message["apns"]["payload"]["aps"] == {"sound": "default", "badge": 1}


def test_invalid_token_does_not_affect_others():
    gateway = FakePushGateway(unregistered=[STALE_TOKEN])
    service = make_push_service(gateway)

    results = asyncio.run(service.send_notification([GOOD_TOKEN, STALE_TOKEN, GOOD_TOKEN], "Hi", "There"))

    assert results["successful"] == 2
    assert results["failed"] == 1
    assert len(gateway.requests) == 3

    delivered = results["details"]["successful"][0]
    assert delivered["success"] is True
    assert delivered["messageId"] == "projects/gymvisa-test/messages/1"

    error = results["details"]["errors"][0]
    assert error["index"] == 1
    assert error["token"] == STALE_TOKEN[:20] + "..."
    assert error["code"] == "UNREGISTERED"
    assert error["invalidToken"] is True
    assert error["error"] == "Requested entity was not found."


def test_network_failure_is_reported_per_token():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = make_push_service(unreachable)

    results = asyncio.run(service.send_notification([GOOD_TOKEN], "Hi", "There"))

    assert results["successful"] == 0
    assert results["details"]["errors"][0]["code"] == "NETWORK_ERROR"
    assert results["details"]["errors"][0]["invalidToken"] is False


def test_requests_carry_bearer_token():
    seen = []

    def gateway(request):
        seen.append((str(request.url), request.headers["Authorization"]))
        return httpx.Response(200, json={"name": "projects/gymvisa-test/messages/9"})

    asyncio.run(make_push_service(gateway).send_notification([GOOD_TOKEN], "Hi", "There"))

    assert seen == [(
        "https://fcm.googleapis.com/v1/projects/gymvisa-test/messages:send",
        "Bearer test-token",
    )]


def test_unconfigured_gateway():
    service = PushService(config=Settings(FCM_PROJECT_ID=None, FCM_ACCESS_TOKEN=None))

    with pytest.raises(ExternalServiceError):
        asyncio.run(service.send_notification([GOOD_TOKEN], "Hi", "There"))


def test_plain_string_error_body_is_reported_per_token():
    def gateway(request):
        return httpx.Response(400, json={"error": "InvalidRegistration"})

    results = asyncio.run(make_push_service(gateway).send_notification([GOOD_TOKEN, STALE_TOKEN], "Hi", "There"))

    assert results["successful"] == 0
    assert results["failed"] == 2
    assert [error["index"] for error in results["details"]["errors"]] == [0, 1]
    assert results["details"]["errors"][0]["code"] == "InvalidRegistration"
    assert results["details"]["errors"][0]["invalidToken"] is False


def test_non_object_error_body_falls_back_to_http_status():
    def gateway(request):
        return httpx.Response(503, json=["unavailable"])

    results = asyncio.run(make_push_service(gateway).send_notification([GOOD_TOKEN], "Hi", "There"))

    assert results["details"]["errors"][0]["code"] == "HTTP_503"
    assert results["details"]["errors"][0]["error"] == '["unavailable"]'


def test_delivery_without_json_body_still_counts():
    def gateway(request):
        token = json.loads(request.content)["message"]["token"]
        if token == GOOD_TOKEN:
            return httpx.Response(200, text="OK")
        return httpx.Response(200, json={"name": "projects/gymvisa-test/messages/2"})

    results = asyncio.run(make_push_service(gateway).send_notification([GOOD_TOKEN, STALE_TOKEN], "Hi", "There"))

    assert results["successful"] == 2
    assert results["failed"] == 0
    assert results["details"]["successful"][0] == {"token": GOOD_TOKEN, "messageId": None, "success": True}
    assert results["details"]["successful"][1]["messageId"] == "projects/gymvisa-test/messages/2"
