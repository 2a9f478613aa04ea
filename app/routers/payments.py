from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from app.dependencies.services import get_payment_link_service, get_payment_service
from app.schemas.payments import PassthroughResponse, PaymentLinkResponse
from app.services import PaymentLinkService, PaymentService
from app.services.exceptions import PaymentValidationError, UpstreamError

router = APIRouter()


def _upstream_failure(exc: UpstreamError, fallback: str) -> JSONResponse:
    details = exc.details
    message = details.get("message") if isinstance(details, dict) else None
    return JSONResponse(
        status_code=exc.status_code or 500,
        content={"success": False, "error": message or fallback, "details": details},
    )


@router.post("/create", response_model=PaymentLinkResponse)
async def create_payment_link(
    body: Any = Body(default=None),
    service: PaymentLinkService = Depends(get_payment_link_service),
):
    try:
        request = service.parse_request(body)
    except PaymentValidationError as exc:
        return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})

    try:
        result = await service.create(request)
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to create payment link")
    return PaymentLinkResponse(data=result)


@router.get("/{payment_id}", response_model=PassthroughResponse)
async def get_payment(
    payment_id: str,
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return PassthroughResponse(data=await service.get(payment_id))
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to retrieve payment")


@router.get("", response_model=PassthroughResponse)
async def list_payments(
    limit: int = Query(10, ge=0),
    offset: int = Query(0, ge=0),
    service: PaymentService = Depends(get_payment_service),
):
    try:
        return PassthroughResponse(data=await service.list(limit=limit, offset=offset))
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to retrieve payments")
