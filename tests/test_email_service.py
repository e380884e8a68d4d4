import asyncio

from conftest import RecordingEmailService
from app.core.config import Settings
from app.services.email_service import EmailService


def test_unconfigured_sender_reports_failure():
    service = EmailService(Settings(SMTP_HOST=None, SMTP_USERNAME=None, SMTP_PASSWORD=None))

    delivered = asyncio.run(service.send_credentials_email("a@acme.com", "pw", "A", "Acme"))

    assert delivered is False


def test_credentials_message_content():
    service = RecordingEmailService()

    delivered = asyncio.run(service.send_credentials_email("a@acme.com", "Xy7pQ2rT9kLm", "Alice", "Acme"))

    assert delivered is True
    message = service.messages[0]
    assert message["To"] == "a@acme.com"
    assert "noreply@gymvisa.com" in message["From"]
    text, html = (part.get_payload(decode=True).decode() for part in message.get_payload())
    assert "Xy7pQ2rT9kLm" in text
    assert "Alice" in html


def test_bulk_send_counts_each_recipient():
    service = RecordingEmailService(failing=["b@acme.com"])

    outcome = asyncio.run(service.send_bulk_credentials([
        {"email": "a@acme.com", "password": "pw1", "name": "A"},
        {"email": "b@acme.com", "password": "pw2", "name": "B"},
        {"email": "c@acme.com", "password": "pw3"},
    ], "Acme"))

    assert outcome == {"sent": 2, "failed": 1, "errors": ["Failed to send email to b@acme.com"]}
    assert [message["To"] for message in service.messages] == ["a@acme.com", "c@acme.com"]
