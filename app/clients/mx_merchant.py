from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.schemas.payments import LINK2PAY, PaymentDevice
from app.services.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def _error_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class MXMerchantClient:
    """Async HTTP client for the MX Merchant checkout REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None,
        api_secret: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        # MX Merchant expects Basic base64("apiKey:apiSecret").
        self._auth = httpx.BasicAuth(api_key or "", api_secret or "")
        self._headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            auth=self._auth,
            headers=self._headers,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        payload: Dict[str, Any] | None = None,
    ) -> Any:
        client = self._ensure_client()
        try:
            response = await client.request(method, path, params=params, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            details = _error_details(exc.response)
            message = details.get("message") if isinstance(details, dict) else None
            logger.error(
                "MX Merchant %s %s returned %s: %s",
                method,
                path,
                exc.response.status_code,
                details,
            )
            raise UpstreamError(
                message or "MX Merchant returned an error response",
                status_code=exc.response.status_code,
                details=details,
                cause=exc,
            ) from exc
        except httpx.RequestError as exc:
            logger.exception("Unable to reach MX Merchant: %s", exc)
            raise UpstreamError(
                "Unable to reach MX Merchant", status_code=None, cause=exc
            ) from exc
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("MX Merchant %s %s returned a non-JSON body", method, path)
            raise UpstreamError(
                "MX Merchant returned an unreadable response",
                status_code=None,
                details=response.text,
                cause=exc,
            ) from exc

    async def get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Dict[str, Any] | None = None,
    ) -> Any:
        return await self._request("POST", path, params=params, payload=payload)

    async def list_devices(
        self, merchant_id: str | None, device_type: str = LINK2PAY
    ) -> List[PaymentDevice]:
        data = await self.get(
            "/device", params={"merchantId": merchant_id, "deviceType": device_type}
        )
        if not isinstance(data, list):
            return []
        devices: List[PaymentDevice] = []
        for item in data:
            if not isinstance(item, dict) or not item.get("UDID"):
                continue
            try:
                devices.append(PaymentDevice.model_validate(item))
            except ValidationError:
                logger.warning("Skipping malformed device record: %s", item)
        return devices

    async def create_device(self, payload: Dict[str, Any]) -> PaymentDevice:
        data = await self.post("/device", payload, params={"echo": "true"})
        if not isinstance(data, dict) or not data.get("UDID"):
            raise UpstreamError(
                "MX Merchant did not echo the created device", details=data
            )
        try:
            return PaymentDevice.model_validate(data)
        except ValidationError as exc:
            raise UpstreamError(
                "MX Merchant echoed a malformed device", details=data, cause=exc
            ) from exc

    async def get_payment(self, payment_id: str) -> Any:
        return await self.get(f"/payments/{payment_id}")

    async def list_payments(self, limit: int = 10, offset: int = 0) -> Any:
        return await self.get("/payments", params={"limit": limit, "offset": offset})
