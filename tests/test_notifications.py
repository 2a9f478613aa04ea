import asyncio
import os
import sys
from decimal import Decimal
from unittest.mock import MagicMock

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from botocore.exceptions import ClientError
from twilio.base.exceptions import TwilioRestException

from app.config import Settings
from app.schemas.payments import LineItem
from app.services.mail import SesEmailNotifier, render_html_body, render_text_body
from app.services.notifications import (
    DisabledEmailNotifier,
    DisabledSmsNotifier,
    build_email_notifier,
    build_sms_notifier,
)
from app.services.sms import TwilioSmsNotifier, render_sms_body

URL = "https://pay.example.test/Link2Pay/U1?Amt=150.00&InvoiceNo=INV-1"

_BLANK_CHANNELS = {
    "twilio_account_sid": None,
    "twilio_auth_token": None,
    "twilio_phone_number": None,
    "aws_access_key_id": None,
    "aws_secret_access_key": None,
    "aws_region": None,
    "ses_from_email": None,
}


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**_BLANK_CHANNELS, **overrides})


def test_sms_body_embeds_invoice_amount_and_link() -> None:
    body = render_sms_body(URL, "INV-1", Decimal("150"))

    assert body == (
        "Payment Link for Invoice INV-1\n\nAmount: $150.00\n\n"
        f"Pay here: {URL}\n\nThank you!"
    )


def test_twilio_notifier_reports_message_sid() -> None:
    client = MagicMock()
    client.messages.create.return_value = MagicMock(sid="SM123")
    notifier = TwilioSmsNotifier(
        account_sid="AC1", auth_token="token", from_number="+15550000", client=client
    )

    result = asyncio.run(notifier.send("+15551111", URL, "INV-1", Decimal("99.5")))

    assert result.sent is True
    assert result.message_sid == "SM123"
    assert result.to == "+15551111"
    client.messages.create.assert_called_once_with(
        body=render_sms_body(URL, "INV-1", Decimal("99.5")),
        from_="+15550000",
        to="+15551111",
    )


def test_twilio_error_is_captured_not_raised() -> None:
    client = MagicMock()
    client.messages.create.side_effect = TwilioRestException(
        400, "/Messages", msg="Invalid 'To' Phone Number"
    )
    notifier = TwilioSmsNotifier(
        account_sid="AC1", auth_token="token", from_number="+15550000", client=client
    )

    result = asyncio.run(notifier.send("bad", URL, "INV-1", Decimal("10")))

    assert result.sent is False
    assert result.error == "Invalid 'To' Phone Number"
    assert result.model_dump(by_alias=True) == {
        "sent": False,
        "error": "Invalid 'To' Phone Number",
    }


def test_twilio_transport_error_is_captured() -> None:
    client = MagicMock()
    client.messages.create.side_effect = ConnectionError("network down")
    notifier = TwilioSmsNotifier(
        account_sid="AC1", auth_token="token", from_number="+15550000", client=client
    )

    result = asyncio.run(notifier.send("+15551111", URL, "INV-1", Decimal("10")))

    assert result.sent is False
    assert result.error == "network down"


def test_html_body_lists_line_items_and_call_to_action() -> None:
    items = [
        LineItem(description="Oil change <synthetic>", amount=Decimal("75"), quantity=2),
        LineItem(description="Tire rotation", amount=Decimal("75.5")),
    ]

    body = render_html_body("John & Sons", URL, "INV-1", Decimal("225.5"), items)

    assert "Hello John &amp; Sons," in body
    assert "<th" in body and "Description</th>" in body
    assert "Oil change &lt;synthetic&gt;" in body
    assert "$75.00" in body and "$75.50" in body
    assert ">2</td>" in body and ">1</td>" in body
    assert "$225.50" in body
    assert "Pay Now" in body
    assert 'href="https://pay.example.test/Link2Pay/U1?Amt=150.00&amp;InvoiceNo=INV-1"' in body


def test_html_body_omits_table_without_line_items() -> None:
    body = render_html_body("John", URL, "INV-1", Decimal("10"), [])

    assert "Items:" not in body
    assert "<th" not in body


def test_text_body_mirrors_html_content() -> None:
    items = [LineItem(description="Oil", amount=Decimal("5"))]

    body = render_text_body("John", URL, "INV-1", Decimal("5"), items)

    assert "Payment Request for Invoice INV-1" in body
    assert "- Oil: $5.00 x 1" in body
    assert "Total Amount: $5.00" in body
    assert f"Click here to pay: {URL}" in body


def test_ses_notifier_sends_html_and_text() -> None:
    client = MagicMock()
    client.send_email.return_value = {"MessageId": "msg-1"}
    notifier = SesEmailNotifier(
        access_key_id="AKIA",
        secret_access_key="secret",
        region="us-east-1",
        from_email="billing@shop.test",
        client=client,
    )

    result = asyncio.run(
        notifier.send("j@x.com", "John", URL, "INV-1", Decimal("150"), [])
    )

    assert result.model_dump(by_alias=True) == {
        "sent": True,
        "messageId": "msg-1",
        "to": "j@x.com",
    }
    kwargs = client.send_email.call_args.kwargs
    assert kwargs["Source"] == "billing@shop.test"
    assert kwargs["Destination"] == {"ToAddresses": ["j@x.com"]}
    assert kwargs["Message"]["Subject"]["Data"] == "Payment Request - Invoice INV-1"
    assert "Pay Now" in kwargs["Message"]["Body"]["Html"]["Data"]
    assert "Total Amount: $150.00" in kwargs["Message"]["Body"]["Text"]["Data"]


def test_ses_error_is_captured_not_raised() -> None:
    client = MagicMock()
    client.send_email.side_effect = ClientError(
        {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
        "SendEmail",
    )
    notifier = SesEmailNotifier(
        access_key_id="AKIA",
        secret_access_key="secret",
        region="us-east-1",
        from_email="billing@shop.test",
        client=client,
    )

    result = asyncio.run(notifier.send("j@x.com", "John", URL, "INV-1", Decimal("1"), []))

    assert result.sent is False
    assert "Email address is not verified." in result.error


def test_disabled_notifiers_report_not_configured() -> None:
    sms = asyncio.run(DisabledSmsNotifier().send("+1", URL, "INV-1", Decimal("1")))
    email = asyncio.run(
        DisabledEmailNotifier().send("j@x.com", "John", URL, "INV-1", Decimal("1"), [])
    )

    assert sms.model_dump(by_alias=True) == {"sent": False, "reason": "not configured"}
    assert email.model_dump(by_alias=True) == {"sent": False, "reason": "not configured"}


def test_builders_select_disabled_variant_on_partial_credentials() -> None:
    settings = _settings(
        twilio_account_sid="AC1",
        twilio_auth_token="token",
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        aws_region="us-east-1",
    )

    assert isinstance(build_sms_notifier(settings), DisabledSmsNotifier)
    assert isinstance(build_email_notifier(settings), DisabledEmailNotifier)


def test_builders_select_active_variant_with_full_credentials() -> None:
    settings = _settings(
        twilio_account_sid="AC00000000000000000000000000000000",
        twilio_auth_token="token",
        twilio_phone_number="+15550000",
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        aws_region="us-east-1",
        ses_from_email="billing@shop.test",
    )

    assert isinstance(build_sms_notifier(settings), TwilioSmsNotifier)
    assert isinstance(build_email_notifier(settings), SesEmailNotifier)
