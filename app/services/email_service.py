"""
app/services/email_service.py

Purpose: Credential emails over SMTP

- Sends each new organization member their login credentials
- Bulk sending with per-recipient outcome
- SMTP calls run in a worker thread so the event loop never blocks
"""

import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Any, Dict, Iterable, Optional

from app.core.config import Settings, settings as default_settings
from app.core.logging import get_logger
from utils.validation_utils import sanitize_input
from utils.constants import (
    CREDENTIALS_EMAIL_HTML,
    CREDENTIALS_EMAIL_SUBJECT,
    CREDENTIALS_EMAIL_TEXT,
)

logger = get_logger(__name__)


class EmailService:
    """Service for sending credential emails"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    def is_configured(self) -> bool:
        return self.config.email_configured

    def _build_message(self, to_email: str, subject: str, text: str, html: str) -> MIMEMultipart:
        sender = self.config.SMTP_SENDER or self.config.SMTP_USERNAME
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr(("GymVisa", sender))
        message["To"] = to_email
        message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))
        return message

    def _deliver(self, message: MIMEMultipart):
        with smtplib.SMTP(self.config.SMTP_HOST, self.config.SMTP_PORT, timeout=30) as server:
            if self.config.SMTP_USE_TLS:
                server.starttls()
            server.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD)
            server.send_message(message)

    async def send_credentials_email(
        self,
        email: str,
        password: str,
        name: str,
        organization: str,
    ) -> bool:
        """
        Emails login credentials to a newly created member.

        Returns:
            True if the message was handed to the SMTP server
        """
        if not self.is_configured():
            logger.warning("SMTP is not configured; credentials email not sent")
            return False

        values = {
            "name": sanitize_input(name) or email,
            "organization": sanitize_input(organization),
            "email": email,
            "password": password,
        }
        message = self._build_message(
            email,
            CREDENTIALS_EMAIL_SUBJECT.format(**values),
            CREDENTIALS_EMAIL_TEXT.format(**values),
            CREDENTIALS_EMAIL_HTML.format(**values),
        )

        try:
            await asyncio.to_thread(self._deliver, message)
            logger.info(f"Credentials email sent for {organization}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send credentials email for {organization}: {e}")
            return False

    async def send_bulk_credentials(
        self,
        users: Iterable[Dict[str, Any]],
        organization: str,
    ) -> Dict[str, Any]:
        """
        Sends credentials to every user, one at a time.

        Args:
            users: Dicts with email, password and name
            organization: Organization the users belong to

        Returns:
            {"sent": int, "failed": int, "errors": [str]}
        """
        sent, failed, errors = 0, 0, []
        for user in users:
            delivered = await self.send_credentials_email(
                user["email"],
                user["password"],
                user.get("name", ""),
                organization,
            )
            if delivered:
                sent += 1
            else:
                failed += 1
                errors.append(f"Failed to send email to {user['email']}")

        logger.info(f"Credential emails for {organization}: {sent} sent, {failed} failed")
        return {"sent": sent, "failed": failed, "errors": errors}


# Singleton instance
email_service = EmailService()
