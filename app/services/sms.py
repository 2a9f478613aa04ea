from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from app.schemas.notifications import NotificationResult
from app.services.exceptions import NotificationError
from app.services.formatting import format_amount

logger = logging.getLogger(__name__)


def render_sms_body(url: str, invoice_number: str, amount: Decimal) -> str:
    return (
        f"Payment Link for Invoice {invoice_number}\n\n"
        f"Amount: ${format_amount(amount)}\n\n"
        f"Pay here: {url}\n\n"
        "Thank you!"
    )


class TwilioSmsNotifier:
    """Sends payment links as text messages through Twilio."""

    enabled = True

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        from_number: str,
        client: Any = None,
    ) -> None:
        self._from_number = from_number
        self._client = client or Client(account_sid, auth_token)

    async def send(
        self, phone: str, url: str, invoice_number: str, amount: Decimal
    ) -> NotificationResult:
        try:
            sid = await self._dispatch(phone, render_sms_body(url, invoice_number, amount))
        except NotificationError as exc:
            logger.error("Error sending SMS to %s: %s", phone, exc)
            return NotificationResult.failed(str(exc))

        logger.info("SMS sent to %s - SID: %s", phone, sid)
        return NotificationResult(sent=True, message_sid=sid, to=phone)

    async def _dispatch(self, phone: str, body: str) -> str:
        try:
            message = await asyncio.to_thread(
                self._client.messages.create,
                body=body,
                from_=self._from_number,
                to=phone,
            )
        except TwilioException as exc:
            detail = getattr(exc, "msg", None) or str(exc)
            raise NotificationError("sms", detail, cause=exc) from exc
        except Exception as exc:  # requests/transport failures surface as generic errors
            raise NotificationError("sms", str(exc), cause=exc) from exc
        return message.sid
