import os
import sys
from decimal import Decimal

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import DEFAULT_MX_BASE_URL, DEFAULT_MX_PAYMENT_PAGE_URL, Settings
from app.services.formatting import format_amount, to_decimal

_ENV_KEYS = [
    "PORT",
    "NODE_ENV",
    "MX_API_KEY",
    "MX_API_SECRET",
    "MX_MERCHANT_ID",
    "MX_BASE_URL",
    "MX_PAYMENT_PAGE_URL",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_REGION",
    "SES_FROM_EMAIL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults_without_environment(clean_env) -> None:
    settings = Settings(_env_file=None)

    assert settings.port == 3000
    assert settings.node_env == "development"
    assert settings.mx_base_url == DEFAULT_MX_BASE_URL
    assert settings.mx_payment_page_url == DEFAULT_MX_PAYMENT_PAGE_URL
    assert settings.mx_configured is False
    assert settings.sms_configured is False
    assert settings.email_configured is False


def test_environment_variables_enable_integrations(clean_env) -> None:
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("MX_API_KEY", "key")
    clean_env.setenv("MX_API_SECRET", "secret")
    clean_env.setenv("TWILIO_ACCOUNT_SID", "AC1")
    clean_env.setenv("TWILIO_AUTH_TOKEN", "token")
    clean_env.setenv("TWILIO_PHONE_NUMBER", "+15550000")
    clean_env.setenv("AWS_ACCESS_KEY_ID", "AKIA")
    clean_env.setenv("AWS_SECRET_ACCESS_KEY", "secret")
    clean_env.setenv("AWS_REGION", "us-east-1")

    settings = Settings(_env_file=None)

    assert settings.port == 8080
    assert settings.mx_configured is True
    assert settings.sms_configured is True
    # SES_FROM_EMAIL is still missing.
    assert settings.email_configured is False

    clean_env.setenv("SES_FROM_EMAIL", "billing@shop.test")
    assert Settings(_env_file=None).email_configured is True


@pytest.mark.parametrize(
    "value, expected",
    [
        (150, "150.00"),
        (150.0, "150.00"),
        ("0.005", "0.01"),
        ("2.345", "2.35"),
        (Decimal("1E+2"), "100.00"),
    ],
)
def test_format_amount_uses_two_decimals(value, expected) -> None:
    assert format_amount(value) == expected


@pytest.mark.parametrize("value", [None, True, "abc", "NaN", "Infinity", "1e30", [], {}])
def test_to_decimal_rejects_non_numeric(value) -> None:
    assert to_decimal(value) is None
