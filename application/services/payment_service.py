"""
Application service orchestrating payment use-cases.

This class depends only on the application ports and DTOs. Gateway
implementations are provided by infrastructure and must be injected
from the composition root (API lifespan), keeping dependencies one-way.

`initiate_charge` never raises: every failure resolves to a ChargeOutcome
with success=False. Gateway or transport detail is logged for operators and
never copied into the user-facing message, except the gateway's own
`message` field which is meant for end users.
"""
from __future__ import annotations

import uuid
from typing import Optional

from application.dtos.payments import (
    ChargeInput,
    ChargeOutcome,
    ChargeRequest,
    GatewayResponse,
    WebhookResult,
)
from application.ports.payment_gateway import ChargeGateway, WebhookVerifier
from core.logging_config import get_logger
from core.settings import TranzakSettings
from domain.payment.value_objects import (
    PaymentFlow,
    build_memo,
    mno_code_for,
    normalize_phone,
)
from shared.codes.payment_codes import TRANZAK_SUCCESS_STATUS


logger = get_logger(__name__)

MSG_CONFIG_ERROR = "Server configuration error. Please contact support."
MSG_INITIATED = "Payment initiated successfully."
MSG_APPROVE_HINT = " Please approve the transaction on your phone."
MSG_REQUEST_FAILED = "Payment request failed."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again."

REDIRECT_RETURN_PATH = "/dashboard/history"


class PaymentService:
    def __init__(
        self,
        gateway: ChargeGateway,
        webhook_verifier: WebhookVerifier,
        config: TranzakSettings,
        *,
        public_base_url: str,
    ) -> None:
        self.gateway = gateway
        self.config = config
        self.public_base_url = public_base_url.rstrip("/")
        self.webhook_verifier = webhook_verifier

    def build_charge_request(self, data: ChargeInput) -> ChargeRequest:
        """Assemble the wire body; a fresh request id is drawn on every call."""
        redirect_url = None
        if data.payment_flow is PaymentFlow.REDIRECT:
            redirect_url = f"{self.public_base_url}{REDIRECT_RETURN_PATH}"
        return ChargeRequest(
            amount=data.amount,
            currency_code=self.config.currency_code,
            request_id=str(uuid.uuid4()),
            memo=data.memo or build_memo(data.purpose, data.reference, data.package),
            mno_code=mno_code_for(data.payment_method),
            phone_number=normalize_phone(data.phone_number, self.config.country_code),
            redirect_url=redirect_url,
        )

    async def initiate_charge(self, data: ChargeInput) -> ChargeOutcome:
        if not self.gateway.is_configured:
            logger.error(
                "payment_gateway_not_configured",
                provider=self.gateway.provider,
                missing=self.gateway.missing_credentials(),
            )
            return ChargeOutcome(success=False, message=MSG_CONFIG_ERROR)

        request_id = None
        try:
            req = self.build_charge_request(data)
            request_id = req.request_id
            logger.info(
                "payment_charge_request",
                provider=self.gateway.provider,
                request_id=request_id,
                mno_code=req.mno_code,
                flow=data.payment_flow.value,
                amount=str(req.amount),
            )
            response = await self.gateway.send_charge(req)
            outcome = self._classify(response, data.payment_flow, request_id)
        except Exception as exc:
            logger.error(
                "payment_charge_exception",
                provider=self.gateway.provider,
                request_id=request_id,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return ChargeOutcome(success=False, message=MSG_UNEXPECTED)
        return outcome

    def _classify(self, response: GatewayResponse, flow: PaymentFlow, request_id: str) -> ChargeOutcome:
        body = response.data if isinstance(response.data, dict) else {}
        if response.is_success and body.get("status") == TRANZAK_SUCCESS_STATUS:
            message = MSG_INITIATED
            if flow is PaymentFlow.DIRECT:
                message += MSG_APPROVE_HINT
            transaction_id = body.get("transaction_id")
            redirect_url = body.get("redirect_url")
            logger.info(
                "payment_charge_accepted",
                provider=self.gateway.provider,
                request_id=request_id,
                transaction_id=transaction_id,
            )
            return ChargeOutcome(
                success=True,
                message=message,
                transaction_id=str(transaction_id) if transaction_id is not None else None,
                redirect_url=redirect_url or None,
            )

        logger.error(
            "payment_charge_failed",
            provider=self.gateway.provider,
            request_id=request_id,
            status_code=response.status_code,
            response=response.data,
        )
        gateway_message = body.get("message")
        return ChargeOutcome(
            success=False,
            message=str(gateway_message) if gateway_message else MSG_REQUEST_FAILED,
        )

    def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> WebhookResult:
        result = self.webhook_verifier.verify_and_parse(raw_body, signature)
        if result.ok and result.event is not None:
            # No reconciliation store yet; verified events go to the log sink
            logger.info(
                "payment_webhook_verified",
                provider=result.event.provider,
                transaction_id=result.event.transaction_id,
                status=result.event.status,
                internal_status=result.event.internal_status,
            )
        return result

    async def aclose(self) -> None:
        close = getattr(self.gateway, "aclose", None)
        if callable(close):
            await close()
