"""Process-wide cache of the Link2Pay device used to build hosted payment links.

MX Merchant only serves hosted checkout pages under a provisioned Link2Pay
device. The first request resolves one (reusing an existing enabled device
when the merchant already has one) and every later request reuses the cached
UDID until the process exits.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol

from app.schemas.payments import LINK2PAY, PaymentDevice

logger = logging.getLogger(__name__)


class DeviceClient(Protocol):
    async def list_devices(self, merchant_id: str | None, device_type: str = LINK2PAY) -> list[PaymentDevice]:
        ...

    async def create_device(self, payload: Dict[str, Any]) -> PaymentDevice:
        ...


def _merchant_id_value(merchant_id: str | None) -> Any:
    if merchant_id is not None and merchant_id.strip().isdigit():
        return int(merchant_id)
    return merchant_id


class DeviceCache:
    """Single-slot, resolve-or-create cache for the Link2Pay device UDID."""

    def __init__(
        self,
        client: DeviceClient,
        *,
        merchant_id: str | None,
        success_url: str,
        failure_url: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._merchant_id = merchant_id
        self._success_url = success_url
        self._failure_url = failure_url
        self._clock = clock
        self._udid: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def udid(self) -> Optional[str]:
        return self._udid

    def clear(self) -> None:
        self._udid = None

    async def resolve(self) -> str:
        if self._udid:
            return self._udid
        async with self._lock:
            # Another request may have resolved while we waited.
            if self._udid:
                return self._udid
            udid = await self._find_existing()
            if udid is None:
                udid = await self._create()
            self._udid = udid
            return udid

    async def _find_existing(self) -> Optional[str]:
        devices = await self._client.list_devices(self._merchant_id, LINK2PAY)
        for device in devices:
            if device.usable:
                logger.info("Using existing Link2Pay device with UDID: %s", device.udid)
                return device.udid
        return None

    async def _create(self) -> str:
        timestamp = int(self._clock() * 1000)
        payload = {
            "name": f"Payment Link API {timestamp}",
            "description": "Hosted payment page for API",
            "deviceType": LINK2PAY,
            "merchantId": _merchant_id_value(self._merchant_id),
            "enabled": True,
            "onSuccessUrl": self._success_url,
            "onFailureUrl": self._failure_url,
        }
        device = await self._client.create_device(payload)
        logger.info("Created new Link2Pay device with UDID: %s", device.udid)
        return device.udid
