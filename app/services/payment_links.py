from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple
from urllib.parse import urlencode

from pydantic import ValidationError

from app.schemas.notifications import NotificationResult
from app.schemas.payments import (
    LINK2PAY,
    InvoiceInfo,
    PaymentLinkRequest,
    PaymentLinkResult,
)
from app.services.devices import DeviceCache
from app.services.exceptions import PaymentValidationError
from app.services.formatting import format_amount, to_decimal
from app.services.notifications import EmailNotifier, SmsNotifier

logger = logging.getLogger(__name__)

AMOUNT_REQUIRED = "Amount is required"
INVOICE_NUMBER_REQUIRED = "Invoice number is required"
CUSTOMER_REQUIRED = "Customer name and email are required"


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def invoice_description(invoice: InvoiceInfo) -> str:
    return invoice.description or f"Payment for {invoice.number}"


class PaymentLinkService:
    """Creates MX Merchant hosted payment links and notifies the customer."""

    def __init__(
        self,
        devices: DeviceCache,
        *,
        payment_page_url: str,
        sms: SmsNotifier,
        email: EmailNotifier,
    ) -> None:
        self._devices = devices
        self._payment_page_url = payment_page_url.rstrip("/")
        self._sms = sms
        self._email = email

    @staticmethod
    def parse_request(body: Any) -> PaymentLinkRequest:
        """Validate a raw JSON body, reporting the first missing field."""
        data = body if isinstance(body, dict) else {}

        amount = to_decimal(data.get("amount"))
        if amount is None or amount <= 0:
            raise PaymentValidationError(AMOUNT_REQUIRED)

        invoice = data.get("invoice")
        if not isinstance(invoice, dict) or not invoice.get("number"):
            raise PaymentValidationError(INVOICE_NUMBER_REQUIRED)

        customer = data.get("customer")
        if not isinstance(customer, dict) or not customer.get("name") or not customer.get("email"):
            raise PaymentValidationError(CUSTOMER_REQUIRED)

        try:
            return PaymentLinkRequest.model_validate({**data, "amount": amount})
        except ValidationError as exc:
            raise PaymentValidationError(
                f"Invalid payment request: {_describe_validation_error(exc)}", cause=exc
            ) from exc

    def build_payment_url(self, udid: str, request: PaymentLinkRequest) -> str:
        params: List[Tuple[str, str]] = [
            ("Amt", format_amount(request.amount)),
            ("InvoiceNo", request.invoice.number),
            ("CustomerName", request.customer.name),
            ("CustomerEmail", request.customer.email),
        ]
        if request.customer.phone:
            params.append(("CustomerPhone", request.customer.phone))
        params.append(("Memo", invoice_description(request.invoice)))

        for index, item in enumerate(request.line_items, start=1):
            if item.description:
                params.append((f"Item{index}Description", item.description))
            if item.amount:
                params.append((f"Item{index}Amount", format_amount(item.amount)))
            if item.quantity:
                params.append((f"Item{index}Quantity", str(item.quantity)))

        return f"{self._payment_page_url}/{LINK2PAY}/{udid}?{urlencode(params)}"

    @staticmethod
    def compose_message(
        sms: Optional[NotificationResult], email: Optional[NotificationResult]
    ) -> str:
        message = "Payment link created"
        notifications = []
        if sms is not None and sms.sent:
            notifications.append("SMS sent")
        if email is not None and email.sent:
            notifications.append("Email sent")
        if notifications:
            return f"{message} and {' and '.join(notifications)} to customer"
        return f"{message}. Redirect customer to paymentUrl to complete payment"

    async def create(self, request: PaymentLinkRequest) -> PaymentLinkResult:
        logger.info(
            "Creating payment link for invoice %s (%s %s)",
            request.invoice.number,
            format_amount(request.amount),
            request.currency,
        )
        udid = await self._devices.resolve()
        payment_url = self.build_payment_url(udid, request)
        customer = request.customer

        sms_result: Optional[NotificationResult] = None
        if customer.phone and request.send_sms is not False:
            sms_result = await self._sms.send(
                customer.phone, payment_url, request.invoice.number, request.amount
            )

        email_result: Optional[NotificationResult] = None
        if customer.email and request.send_email is not False:
            email_result = await self._email.send(
                customer.email,
                customer.name,
                payment_url,
                request.invoice.number,
                request.amount,
                request.line_items,
            )

        return PaymentLinkResult(
            payment_url=payment_url,
            amount=request.amount,
            currency=request.currency,
            invoice=InvoiceInfo(
                number=request.invoice.number,
                description=invoice_description(request.invoice),
            ),
            customer=customer,
            line_items=request.line_items,
            sms=sms_result,
            email=email_result,
            message=self.compose_message(sms_result, email_result),
        )
