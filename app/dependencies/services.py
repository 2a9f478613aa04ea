from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.clients.mx_merchant import MXMerchantClient
from app.config import Settings, get_settings
from app.services import DeviceCache, PaymentLinkService, PaymentService
from app.services.notifications import (
    EmailNotifier,
    SmsNotifier,
    build_email_notifier,
    build_sms_notifier,
)


@lru_cache(maxsize=1)
def get_mx_client_cached() -> MXMerchantClient:
    settings = get_settings()
    return MXMerchantClient(
        settings.mx_base_url,
        api_key=settings.mx_api_key,
        api_secret=settings.mx_api_secret,
    )


@lru_cache(maxsize=1)
def get_device_cache_cached() -> DeviceCache:
    settings = get_settings()
    return DeviceCache(
        get_mx_client_cached(),
        merchant_id=settings.mx_merchant_id,
        success_url=settings.mx_device_success_url,
        failure_url=settings.mx_device_failure_url,
    )


@lru_cache(maxsize=1)
def get_sms_notifier_cached() -> SmsNotifier:
    return build_sms_notifier(get_settings())


@lru_cache(maxsize=1)
def get_email_notifier_cached() -> EmailNotifier:
    return build_email_notifier(get_settings())


def get_mx_client() -> MXMerchantClient:
    return get_mx_client_cached()


def get_device_cache() -> DeviceCache:
    return get_device_cache_cached()


def get_sms_notifier() -> SmsNotifier:
    return get_sms_notifier_cached()


def get_email_notifier() -> EmailNotifier:
    return get_email_notifier_cached()


def get_payment_link_service(
    devices: DeviceCache = Depends(get_device_cache),
    sms: SmsNotifier = Depends(get_sms_notifier),
    email: EmailNotifier = Depends(get_email_notifier),
    settings: Settings = Depends(get_settings),
) -> PaymentLinkService:
    return PaymentLinkService(
        devices,
        payment_page_url=settings.mx_payment_page_url,
        sms=sms,
        email=email,
    )


def get_payment_service(
    client: MXMerchantClient = Depends(get_mx_client),
) -> PaymentService:
    return PaymentService(client)
