"""Payment request emails delivered through AWS SES."""

from __future__ import annotations

import asyncio
import html
import logging
from decimal import Decimal
from typing import Any, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.schemas.notifications import NotificationResult
from app.schemas.payments import LineItem
from app.services.exceptions import NotificationError
from app.services.formatting import format_amount

logger = logging.getLogger(__name__)

_CHARSET = "UTF-8"
_ACCENT = "#667eea"
_GRADIENT = "linear-gradient(135deg, #667eea 0%, #764ba2 100%)"


def _item_amount(item: LineItem) -> str:
    return format_amount(item.amount) if item.amount is not None else "0.00"


def _line_items_html(line_items: Sequence[LineItem]) -> str:
    if not line_items:
        return ""
    head_cell = "padding: 10px; border-bottom: 2px solid #dee2e6;"
    cell = "padding: 10px; border-bottom: 1px solid #dee2e6;"
    rows = "".join(
        "<tr>"
        f'<td style="{cell}">{html.escape(item.description or "")}</td>'
        f'<td style="{cell} text-align: center;">{item.quantity or 1}</td>'
        f'<td style="{cell} text-align: right;">${_item_amount(item)}</td>'
        "</tr>"
        for item in line_items
    )
    return (
        '<h3 style="color: #333; margin-top: 20px;">Items:</h3>'
        '<table style="width: 100%; border-collapse: collapse; margin-top: 10px;">'
        '<tr style="background-color: #f8f9fa;">'
        f'<th style="{head_cell} text-align: left;">Description</th>'
        f'<th style="{head_cell} text-align: center;">Qty</th>'
        f'<th style="{head_cell} text-align: right;">Amount</th>'
        "</tr>"
        f"{rows}"
        "</table>"
    )


def render_html_body(
    name: str,
    url: str,
    invoice_number: str,
    amount: Decimal,
    line_items: Sequence[LineItem],
) -> str:
    safe_url = html.escape(url, quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #f4f4f4;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #f4f4f4; padding: 20px;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; border-radius: 8px; overflow: hidden;">
          <tr>
            <td style="background: {_GRADIENT}; padding: 30px; text-align: center;">
              <h1 style="color: #ffffff; margin: 0; font-size: 28px;">Payment Request</h1>
            </td>
          </tr>
          <tr>
            <td style="padding: 40px 30px;">
              <p style="color: #333; font-size: 16px; line-height: 1.6; margin: 0 0 20px 0;">Hello {html.escape(name)},</p>
              <p style="color: #666; font-size: 14px; line-height: 1.6; margin: 0 0 30px 0;">
                You have a payment request for invoice <strong>{html.escape(invoice_number)}</strong>.
              </p>
              {_line_items_html(line_items)}
              <div style="background-color: #f8f9fa; border-left: 4px solid {_ACCENT}; padding: 20px; margin: 20px 0;">
                <p style="color: #333; font-size: 18px; margin: 0;"><strong>Total Amount:</strong></p>
                <p style="color: {_ACCENT}; font-size: 32px; font-weight: bold; margin: 10px 0 0 0;">${format_amount(amount)}</p>
              </div>
              <table width="100%" cellpadding="0" cellspacing="0" style="margin: 30px 0;">
                <tr>
                  <td align="center">
                    <a href="{safe_url}" style="display: inline-block; background: {_GRADIENT}; color: #ffffff; text-decoration: none; padding: 16px 40px; border-radius: 6px; font-size: 16px; font-weight: bold;">Pay Now</a>
                  </td>
                </tr>
              </table>
              <p style="color: #999; font-size: 12px; line-height: 1.6; margin: 20px 0 0 0; text-align: center;">
                Or copy this link: <br/>
                <a href="{safe_url}" style="color: {_ACCENT}; word-break: break-all;">{safe_url}</a>
              </p>
            </td>
          </tr>
          <tr>
            <td style="background-color: #f8f9fa; padding: 20px; text-align: center; border-top: 1px solid #dee2e6;">
              <p style="color: #999; font-size: 12px; margin: 0;">This is an automated payment notification. Please do not reply to this email.</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def render_text_body(
    name: str,
    url: str,
    invoice_number: str,
    amount: Decimal,
    line_items: Sequence[LineItem],
) -> str:
    lines = [
        f"Payment Request for Invoice {invoice_number}",
        "",
        f"Hello {name},",
        "",
        f"You have a payment request for invoice {invoice_number}.",
        "",
    ]
    if line_items:
        lines.append("Items:")
        lines.extend(
            f"- {item.description or ''}: ${_item_amount(item)} x {item.quantity or 1}"
            for item in line_items
        )
        lines.append("")
    lines.extend(
        [
            f"Total Amount: ${format_amount(amount)}",
            "",
            f"Click here to pay: {url}",
            "",
            "Thank you!",
        ]
    )
    return "\n".join(lines)


class SesEmailNotifier:
    """Sends payment request emails with AWS SES."""

    enabled = True

    def __init__(
        self,
        *,
        access_key_id: str,
        secret_access_key: str,
        region: str,
        from_email: str,
        client: Any = None,
    ) -> None:
        self._from_email = from_email
        self._client = client or boto3.client(
            "ses",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    async def send(
        self,
        email: str,
        name: str,
        url: str,
        invoice_number: str,
        amount: Decimal,
        line_items: Sequence[LineItem],
    ) -> NotificationResult:
        message = {
            "Subject": {"Data": f"Payment Request - Invoice {invoice_number}", "Charset": _CHARSET},
            "Body": {
                "Html": {
                    "Data": render_html_body(name, url, invoice_number, amount, line_items),
                    "Charset": _CHARSET,
                },
                "Text": {
                    "Data": render_text_body(name, url, invoice_number, amount, line_items),
                    "Charset": _CHARSET,
                },
            },
        }
        try:
            message_id = await self._dispatch(email, message)
        except NotificationError as exc:
            logger.error("Error sending email to %s: %s", email, exc)
            return NotificationResult.failed(str(exc))

        logger.info("Email sent to %s - MessageId: %s", email, message_id)
        return NotificationResult(sent=True, message_id=message_id, to=email)

    async def _dispatch(self, email: str, message: dict) -> str:
        try:
            response = await asyncio.to_thread(
                self._client.send_email,
                Source=self._from_email,
                Destination={"ToAddresses": [email]},
                Message=message,
            )
        except (BotoCoreError, ClientError) as exc:
            raise NotificationError("email", str(exc), cause=exc) from exc
        except Exception as exc:  # transport failures outside botocore's hierarchy
            raise NotificationError("email", str(exc), cause=exc) from exc
        return response.get("MessageId")
