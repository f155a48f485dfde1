"""
Notification service for outbound email through an HTTP mail provider.
"""

from typing import Optional
import logging

import httpx

from property_manager.config import Settings, get_settings
from property_manager.utils.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset"


class NotificationService:
    """
    Sends transactional emails.

    Provider URL, API key and sender come from configuration; a custom httpx
    transport can be supplied to route requests elsewhere (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config or get_settings()
        self.transport = transport

    async def send_email(self, to: str, subject: str, body: str) -> None:
        """
        Send a plain-text email.

        Raises:
            MailDeliveryError: If the provider is not configured, unreachable,
                or answers with a non-2xx status. Nothing is retried.
        """
        if not self.config.mail_configured:
            raise MailDeliveryError("Email provider not configured")

        payload = {
            "from": {"email": self.config.mail_from},
            "personalizations": [{"to": [{"email": to}], "subject": subject}],
            "content": [{"type": "text/plain", "value": body}],
        }
        headers = {
            "Authorization": f"Bearer {self.config.mail_api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.config.mail_timeout,
                transport=self.transport
            ) as client:
                resp = await client.post(self.config.mail_api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Email transport error sending to {to}: {e}")
            raise MailDeliveryError(f"Transport error: {e}")

        if not 200 <= resp.status_code < 300:
            logger.error(f"Email send to {to} failed {resp.status_code}: {resp.text[:200]}")
            raise MailDeliveryError(f"Provider returned {resp.status_code}")

        logger.info(f"Email '{subject}' sent to {to}")

    async def send_reset_email(self, to_address: str, reset_link: str) -> None:
        """Send the password reset link to a user."""
        body = f"Click the following link to reset your password: {reset_link}"
        await self.send_email(to_address, RESET_SUBJECT, body)


def build_reset_link(base_url: str, token: str) -> str:
    """Append the reset token to the frontend reset page URL."""
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}token={token}"
