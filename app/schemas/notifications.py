from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer

NOT_CONFIGURED = "not configured"


class NotificationResult(BaseModel):
    """Outcome of one SMS or email dispatch attempt."""

    model_config = ConfigDict(populate_by_name=True)

    sent: bool
    message_sid: Optional[str] = Field(default=None, alias="messageSid")
    message_id: Optional[str] = Field(default=None, alias="messageId")
    to: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_empty(self, handler) -> Dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def not_configured(cls) -> "NotificationResult":
        return cls(sent=False, reason=NOT_CONFIGURED)

    @classmethod
    def failed(cls, error: str) -> "NotificationResult":
        return cls(sent=False, error=error)
