"""Email sender interface + Resend / dry-run implementations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from flowaborate.core.config import settings
from flowaborate.core.errors import NotificationDispatchError
from flowaborate.core.structured_logging import mask_email

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"


class EmailSender(Protocol):
    key: str

    async def send(self, *, to_email: str, subject: str, html: str) -> None:
        """Send one message. Raises NotificationDispatchError on failure."""


class ResendEmailSender:
    """
    Sends through the Resend HTTP API.

    Single attempt per message with a bounded timeout; the caller decides
    what a failure means (the sweep does not retry within a run).
    """

    key = "resend"

    def __init__(
        self,
        api_key: str,
        *,
        from_email: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.from_email = from_email or settings.EMAIL_FROM
        self.timeout_seconds = timeout_seconds or settings.EMAIL_SEND_TIMEOUT_SECONDS
        self._client = client

    async def _post(self, payload: dict[str, object]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return await self._client.post(
                RESEND_SEND_URL, headers=headers, json=payload, timeout=self.timeout_seconds
            )
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(RESEND_SEND_URL, headers=headers, json=payload)

    async def send(self, *, to_email: str, subject: str, html: str) -> None:
        payload: dict[str, object] = {
            "from": self.from_email,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        try:
            response = await self._post(payload)
        except httpx.TimeoutException as exc:
            logger.warning("Resend timeout sending to %s", mask_email(to_email))
            raise NotificationDispatchError("Connection timeout", to_email=to_email) from exc
        except httpx.RequestError as exc:
            logger.warning(
                "Resend connection error sending to %s: %s",
                mask_email(to_email),
                exc.__class__.__name__,
            )
            raise NotificationDispatchError(
                f"Connection error: {exc.__class__.__name__}", to_email=to_email
            ) from exc

        if response.status_code >= 400:
            logger.warning(
                "Resend rejected message to %s: HTTP %s",
                mask_email(to_email),
                response.status_code,
            )
            raise NotificationDispatchError(
                f"Resend API error: HTTP {response.status_code}", to_email=to_email
            )


@dataclass
class SentMessage:
    to_email: str
    subject: str
    html: str


@dataclass
class DryRunEmailSender:
    """Logs instead of sending. Keeps what it would have sent for inspection."""

    key: str = "dry_run"
    sent: list[SentMessage] = field(default_factory=list)

    async def send(self, *, to_email: str, subject: str, html: str) -> None:
        logger.info("[DRY RUN] Email to %s: %s", mask_email(to_email), subject)
        self.sent.append(SentMessage(to_email=to_email, subject=subject, html=html))


def get_email_sender() -> EmailSender:
    """Resend when an API key is configured, otherwise dry run."""
    if settings.email_dry_run:
        return DryRunEmailSender()
    return ResendEmailSender(settings.RESEND_API_KEY)
