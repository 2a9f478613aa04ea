# app/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings

router = APIRouter()


@router.get("/")
def service_info():
    return {
        "message": "MX Merchant Hosted Checkout API - Ready!",
        "status": "success",
        "type": "Hosted Payment Links",
        "description": (
            "Creates secure payment URLs where customers enter payment details "
            "on MX Merchant's hosted page"
        ),
        "endpoints": {
            "health": "GET /api/health",
            "createPaymentLink": "POST /api/payments/create - Returns a hosted payment URL",
            "getPayment": "GET /api/payments/:paymentId",
            "listPayments": "GET /api/payments",
        },
        "features": {
            "hostedCheckout": True,
            "multipleLineItems": True,
            "pciCompliant": True,
            "securePayments": True,
            "smsNotifications": True,
            "emailNotifications": True,
        },
    }


@router.get("/api/health")
def health(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.node_env,
        "mxConfigured": settings.mx_configured,
        "twilioConfigured": settings.sms_configured,
        "sesConfigured": settings.email_configured,
    }
