from typing import Any


class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class PaymentValidationError(ServiceError):
    """Raised when a payment link request is missing or has malformed input."""


class UpstreamError(ServiceError):
    """Raised when the MX Merchant API fails or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        details: Any = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.details = details


class NotificationError(ServiceError):
    """Raised by a notification channel when dispatching a message fails."""

    def __init__(self, channel: str, message: str, *, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.channel = channel
