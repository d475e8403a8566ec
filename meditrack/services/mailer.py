"""Outbound email delivery."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from meditrack.exceptions import MailDeliveryError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com"


class Mailer(Protocol):
    """Anything that can deliver an HTML email."""

    async def send(self, *, to: str, subject: str, html: str) -> str | None:
        """Deliver a message and return the provider message id."""


class ResendMailer:
    """Deliver email through the Resend HTTP API.

    Parameters
    ----------
    api_key : str
        Resend API key.
    sender : str
        ``From`` address.
    timeout : float, default=10.0
        Request timeout in seconds.
    transport : httpx.AsyncBaseTransport | None, default=None
        Optional transport for tests.
    """

    def __init__(
        self,
        *,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout
        self.transport = transport

    async def send(self, *, to: str, subject: str, html: str) -> str | None:
        """Send one message.

        Parameters
        ----------
        to : str
            Recipient address.
        subject : str
            Message subject.
        html : str
            HTML body.

        Returns
        -------
        str | None
            Resend message id.
        """
        async with httpx.AsyncClient(
            base_url=RESEND_API_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.post(
                    "/emails",
                    json={
                        "from": self.sender,
                        "to": [to],
                        "subject": subject,
                        "html": html,
                    },
                )
            except httpx.HTTPError as exc:
                raise MailDeliveryError(f"Mail provider unreachable: {exc}") from exc
        if response.status_code >= 400:
            raise MailDeliveryError(
                f"Mail provider rejected message: {response.text}",
                status_code=response.status_code,
            )
        message_id = response.json().get("id")
        logger.info("Resend accepted message %s", message_id)
        return message_id


class LoggingMailer:
    """Write messages to the operational log instead of sending them."""

    async def send(self, *, to: str, subject: str, html: str) -> str | None:
        """Log one message.

        Returns
        -------
        str | None
            Always ``None``.
        """
        logger.info(
            "Email to %s not sent, no mail provider configured: %s", to, subject
        )
        logger.debug("Email body for %s: %s", to, html)
        return None


def password_reset_email(reset_link: str) -> str:
    """Render the password reset email body.

    Parameters
    ----------
    reset_link : str
        Signed reset URL.

    Returns
    -------
    str
        HTML body.
    """
    return (
        "<p>Click the link below to reset your password:</p>"
        f'<a href="{reset_link}">Reset Password</a>'
        "<p>If you didn't request this, ignore this email.</p>"
    )
