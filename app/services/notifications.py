"""Notification channel interfaces and the disabled fallbacks.

Each channel is picked once at startup: the active implementation when its
credentials are complete, otherwise a disabled one that reports
``not configured`` without touching the network.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol, Sequence

from app.config import Settings
from app.schemas.notifications import NotificationResult
from app.schemas.payments import LineItem

logger = logging.getLogger(__name__)


class SmsNotifier(Protocol):
    enabled: bool

    async def send(
        self, phone: str, url: str, invoice_number: str, amount: Decimal
    ) -> NotificationResult:
        """Text the payment link to ``phone``."""


class EmailNotifier(Protocol):
    enabled: bool

    async def send(
        self,
        email: str,
        name: str,
        url: str,
        invoice_number: str,
        amount: Decimal,
        line_items: Sequence[LineItem],
    ) -> NotificationResult:
        """Email a payment request containing the link to ``email``."""


class DisabledSmsNotifier:
    enabled = False

    async def send(
        self, phone: str, url: str, invoice_number: str, amount: Decimal
    ) -> NotificationResult:
        logger.info("SMS not sent - Twilio not configured")
        return NotificationResult.not_configured()


class DisabledEmailNotifier:
    enabled = False

    async def send(
        self,
        email: str,
        name: str,
        url: str,
        invoice_number: str,
        amount: Decimal,
        line_items: Sequence[LineItem],
    ) -> NotificationResult:
        logger.info("Email not sent - AWS SES not configured")
        return NotificationResult.not_configured()


def build_sms_notifier(settings: Settings) -> SmsNotifier:
    if not settings.sms_configured:
        logger.warning("Twilio SMS disabled (credentials not configured)")
        return DisabledSmsNotifier()

    from app.services.sms import TwilioSmsNotifier

    logger.info("Twilio SMS enabled")
    return TwilioSmsNotifier(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number,
    )


def build_email_notifier(settings: Settings) -> EmailNotifier:
    if not settings.email_configured:
        logger.warning("AWS SES email disabled (credentials not configured)")
        return DisabledEmailNotifier()

    from app.services.mail import SesEmailNotifier

    logger.info("AWS SES email enabled")
    return SesEmailNotifier(
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        region=settings.aws_region,
        from_email=settings.ses_from_email,
    )
