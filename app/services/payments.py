from __future__ import annotations

import logging
from typing import Any

from app.clients.mx_merchant import MXMerchantClient

logger = logging.getLogger(__name__)


class PaymentService:
    """Read-only passthrough to MX Merchant payment records."""

    def __init__(self, client: MXMerchantClient) -> None:
        self._client = client

    async def get(self, payment_id: str) -> Any:
        logger.debug("Retrieving payment %s", payment_id)
        return await self._client.get_payment(payment_id)

    async def list(self, limit: int = 10, offset: int = 0) -> Any:
        logger.debug("Listing payments limit=%s offset=%s", limit, offset)
        return await self._client.list_payments(limit=limit, offset=offset)
