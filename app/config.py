from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MX_BASE_URL = "https://api.mxmerchant.com/checkout/v3"
DEFAULT_MX_PAYMENT_PAGE_URL = "https://pay.mxmerchant.com"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field(default="MX Merchant Hosted Checkout API")
    port: int = Field(default=3000)
    node_env: str = Field(default="development")

    mx_api_key: str | None = Field(default=None)
    mx_api_secret: str | None = Field(default=None)
    mx_merchant_id: str | None = Field(default=None)
    mx_base_url: str = Field(default=DEFAULT_MX_BASE_URL)
    mx_payment_page_url: str = Field(default=DEFAULT_MX_PAYMENT_PAGE_URL)
    mx_device_success_url: str = Field(
        default="https://celebrationchevrolet.com/payment/success"
    )
    mx_device_failure_url: str = Field(
        default="https://celebrationchevrolet.com/payment/cancel"
    )

    twilio_account_sid: str | None = Field(default=None)
    twilio_auth_token: str | None = Field(default=None)
    twilio_phone_number: str | None = Field(default=None)

    aws_access_key_id: str | None = Field(default=None)
    aws_secret_access_key: str | None = Field(default=None)
    aws_region: str | None = Field(default=None)
    ses_from_email: str | None = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def mx_configured(self) -> bool:
        return bool(self.mx_api_key and self.mx_api_secret)

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )

    @property
    def email_configured(self) -> bool:
        return bool(
            self.aws_access_key_id
            and self.aws_secret_access_key
            and self.aws_region
            and self.ses_from_email
        )


SECRET_FIELDS = {
    "mx_api_key",
    "mx_api_secret",
    "aws_access_key_id",
    "twilio_auth_token",
    "aws_secret_access_key",
}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()
