from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_serializer,
)

from app.schemas.notifications import NotificationResult
from app.services.formatting import fits_cents

LINK2PAY = "Link2Pay"


def _check_cents(value: Decimal) -> Decimal:
    if not value.is_finite() or not fits_cents(value):
        raise ValueError("amount cannot be expressed in cents")
    return value


# Amounts stay Decimal in-process and render as JSON numbers.
Money = Annotated[
    Decimal,
    AfterValidator(_check_cents),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class InvoiceInfo(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    number: str = Field(..., min_length=1)
    description: Optional[str] = None


class CustomerInfo(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler) -> Dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class LineItem(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    description: Optional[str] = None
    amount: Optional[Money] = None
    quantity: Optional[int] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler) -> Dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class PaymentLinkRequest(BaseModel):
    """Body accepted by ``POST /api/payments/create``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    amount: Money = Field(..., gt=0)
    invoice: InvoiceInfo
    customer: CustomerInfo
    line_items: List[LineItem] = Field(default_factory=list, alias="lineItems")
    currency: str = "USD"
    send_sms: Optional[bool] = Field(default=None, alias="sendSms")
    send_email: Optional[bool] = Field(default=None, alias="sendEmail")

    @field_validator("line_items", mode="before")
    @classmethod
    def _default_line_items(cls, value):
        return [] if value is None else value

    @field_validator("send_sms", "send_email", mode="before")
    @classmethod
    def _only_literal_false(cls, value):
        # Only a JSON `false` opts out; any other value keeps the default.
        return False if value is False else None

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, value):
        return value or "USD"


class PaymentLinkResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payment_url: str = Field(..., alias="paymentUrl")
    amount: Money
    currency: str
    invoice: InvoiceInfo
    customer: CustomerInfo
    line_items: List[LineItem] = Field(default_factory=list, alias="lineItems")
    sms: Optional[NotificationResult] = None
    email: Optional[NotificationResult] = None
    message: str


class PaymentLinkResponse(BaseModel):
    success: bool = True
    data: PaymentLinkResult


class PaymentDevice(BaseModel):
    """Link2Pay device as returned by the MX Merchant ``/device`` endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    udid: str = Field(..., alias="UDID")
    enabled: Optional[bool] = None
    device_type: Optional[str] = Field(default=None, alias="deviceType")
    name: Optional[str] = None

    @property
    def usable(self) -> bool:
        return bool(self.enabled) and self.device_type == LINK2PAY


class PassthroughResponse(BaseModel):
    success: bool = True
    data: Any = None
