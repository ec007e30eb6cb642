"""Threshold alert emails delivered over SMTP."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import Callable

from fx_forecast.config import SMTPSettings
from fx_forecast.errors import NotificationError
from fx_forecast.ingestion.models import NotificationReceipt, NotificationRequest
from fx_forecast.utils.currency import CURRENCIES
from fx_forecast.utils.logger import get_logger

LOGGER = get_logger(__name__)

BODY_TEMPLATE = """\
Dear User,

Your currency alert has been triggered!

Currency Pair: {origin} ({origin_country}) to {destination} ({destination_country})
Threshold: {threshold:.6f}
Current Rate: {current_rate:.6f}
Date: {rate_date}

The current exchange rate has exceeded your specified threshold.

Best regards,
fx-forecast
"""


def build_message(request: NotificationRequest, sender: str) -> EmailMessage:
    """Render the alert for ``request`` as a plain-text email."""

    message = EmailMessage()
    message["Subject"] = (
        f"Currency Alert: {request.origin} to {request.destination} rate exceeded threshold"
    )
    message["From"] = sender
    message["To"] = request.notify_email
    message.set_content(
        BODY_TEMPLATE.format(
            origin=request.origin,
            origin_country=_country(request.origin),
            destination=request.destination,
            destination_country=_country(request.destination),
            threshold=request.threshold,
            current_rate=request.current_rate,
            rate_date=request.rate_date.isoformat(),
        )
    )
    return message


def _country(code: str) -> str:
    currency = CURRENCIES.get(code)
    return currency.country if currency else "unknown"


class EmailNotifier:
    """Send alerts over SMTP, or only log them when no SMTP host is configured."""

    def __init__(
        self,
        settings: SMTPSettings | None = None,
        *,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
        timeout: float = 30.0,
    ) -> None:
        self.settings = settings or SMTPSettings()
        self._smtp_factory = smtp_factory
        self.timeout = timeout

    def send(self, request: NotificationRequest) -> NotificationReceipt:
        message = build_message(request, self.settings.sender)
        if not self.settings.enabled:
            LOGGER.info(
                "SMTP not configured; email to %s not delivered:\nSubject: %s\n%s",
                request.notify_email,
                message["Subject"],
                message.get_content(),
            )
            return NotificationReceipt(message="Email queued", sent_to=request.notify_email)

        try:
            with self._smtp_factory(
                self.settings.host, self.settings.port, timeout=self.timeout
            ) as client:
                if self.settings.starttls:
                    client.starttls()
                if self.settings.username:
                    client.login(self.settings.username, self.settings.password or "")
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(
                f"failed to send email to {request.notify_email}: {exc}"
            ) from exc

        LOGGER.info("Sent alert for favorite %s to %s", request.favorite_id, request.notify_email)
        return NotificationReceipt(message="Email sent", sent_to=request.notify_email)


__all__ = ["EmailNotifier", "build_message"]
