"""
Payments API routes.

Exposes the charge endpoint used by the dashboard and the Tranzak webhook.
Keep this thin: no gateway details here.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_payment_service
from application.dtos.payments import ChargeInput, WebhookState
from application.services.payment_service import PaymentService
from core.logging_config import get_logger
from core.response import error_response, success_response
from core.settings import payment_settings
from domain.payment.value_objects import TV_PACKAGE_PRICES
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode


router = APIRouter(prefix="/payments", tags=["Payments"])
logger = get_logger(__name__)

_WEBHOOK_STATE_TO_CODE = {
    WebhookState.CONFIG_MISSING: PaymentCode.WEBHOOK_NOT_CONFIGURED,
    WebhookState.SIGNATURE_MISSING: PaymentCode.SIGNATURE_MISSING,
    WebhookState.SIGNATURE_INVALID: PaymentCode.SIGNATURE_INVALID,
    WebhookState.BODY_MALFORMED: PaymentCode.PAYLOAD_MALFORMED,
}


@router.post("/charges", summary="Initiate mobile-money charge")
async def create_charge(payload: ChargeInput, service: PaymentService = Depends(get_payment_service)):
    # A declined or failed charge is a business outcome, still HTTP 200
    outcome = await service.initiate_charge(payload)
    return success_response(
        data=outcome.model_dump(mode="json"),
        message=outcome.message,
        code=BusinessCode.SUCCESS if outcome.success else BusinessCode.BUSINESS_ERROR,
    )


@router.get("/tv-packages", summary="TV subscription package prices (XAF)")
async def tv_packages():
    return success_response(data=TV_PACKAGE_PRICES)


@router.post("/webhooks/tranzak", summary="Tranzak transaction notification")
async def tranzak_webhook(request: Request, service: PaymentService = Depends(get_payment_service)):
    # Read once: the same bytes are signed over and, if valid, parsed
    raw_body = await request.body()
    signature = request.headers.get(payment_settings.webhook.signature_header)
    result = service.handle_webhook(raw_body, signature)

    if not result.ok:
        response = error_response(
            code=_WEBHOOK_STATE_TO_CODE.get(result.state, BusinessCode.SYSTEM_ERROR),
            message=result.error or "Webhook rejected",
            error_type=result.state.value,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(status_code=result.http_status, content=response.model_dump(mode="json"))

    event = result.event
    return success_response(
        data={
            "provider": event.provider,
            "transaction_id": event.transaction_id,
            "status": event.status,
        },
        message="Webhook received",
    )
