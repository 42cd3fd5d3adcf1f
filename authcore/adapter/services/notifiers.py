"""
Notifier backends.

LoggingNotifier is for development; SendGridNotifier delivers mail
through the SendGrid v3 HTTP API.
"""

import logging
from typing import Optional

import httpx

from authcore.app.services.notifier import NotificationError, Notifier

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class LoggingNotifier(Notifier):
    """Logs the recipient and subject instead of sending"""

    async def send(self, address: str, subject: str, body: str) -> None:
        # Body carries the one-time code and is never logged
        logger.info(f"[notifier] Message '{subject}' queued for {address}")


class SendGridNotifier(Notifier):
    def __init__(
        self,
        api_key: Optional[str],
        sender_email: str,
        sender_name: str,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.timeout = timeout
        self.client = client

    def _payload(self, address: str, subject: str, body: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": address}]}],
            "from": {"email": self.sender_email, "name": self.sender_name},
            "subject": subject,
            "content": [{"type": "text/html", "value": body}],
        }

    async def send(self, address: str, subject: str, body: str) -> None:
        if not self.api_key:
            logger.error("SendGrid API key is not configured")
            raise NotificationError("SendGrid API key is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        payload = self._payload(address, subject, body)
        try:
            if self.client is not None:
                response = await self.client.post(SENDGRID_SEND_URL, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(SENDGRID_SEND_URL, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise NotificationError(f"SendGrid request failed: {exc}") from exc

        if not response.is_success:
            logger.error(f"SendGrid rejected message: status={response.status_code} body={response.text}")
            raise NotificationError(f"SendGrid rejected message with status {response.status_code}")

        logger.info(f"SendGrid accepted message for {address}")
