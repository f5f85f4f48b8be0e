"""
Exceptions for payment providers mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional
from domain.common.exceptions import BusinessException
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode
from application.dtos.payments import WebhookState


class PaymentProviderError(BusinessException):
    def __init__(self, message: str, *, provider: str, provider_code: str | None = None, details: Optional[dict] = None):
        full_details = {"provider": provider, "provider_code": provider_code}
        if details:
            full_details.update(details)
        super().__init__(
            code=PaymentCode.PROVIDER_ERROR,
            message=message,
            error_type="PaymentProviderError",
            details=full_details,
        )


class PaymentConfigurationError(BusinessException):
    def __init__(self, message: str, *, provider: str, missing: list[str]):
        super().__init__(
            code=BusinessCode.CONFIGURATION_ERROR,
            message=message,
            error_type="PaymentConfigurationError",
            details={"provider": provider, "missing": missing},
        )


class WebhookVerificationError(BusinessException):
    """Base for every terminal webhook rejection; `state` drives the HTTP status."""

    state: WebhookState = WebhookState.RECEIVED
    default_code: int = PaymentCode.SIGNATURE_INVALID

    def __init__(self, message: str, *, provider: str, details: Optional[dict] = None):
        full_details = {"provider": provider, "state": self.state.value}
        if details:
            full_details.update(details)
        super().__init__(
            code=self.default_code,
            message=message,
            error_type=type(self).__name__,
            details=full_details,
        )


class WebhookConfigError(WebhookVerificationError):
    state = WebhookState.CONFIG_MISSING
    default_code = PaymentCode.WEBHOOK_NOT_CONFIGURED


class WebhookSignatureMissing(WebhookVerificationError):
    state = WebhookState.SIGNATURE_MISSING
    default_code = PaymentCode.SIGNATURE_MISSING


class WebhookSignatureInvalid(WebhookVerificationError):
    state = WebhookState.SIGNATURE_INVALID
    default_code = PaymentCode.SIGNATURE_INVALID


class WebhookPayloadMalformed(WebhookVerificationError):
    state = WebhookState.BODY_MALFORMED
    default_code = PaymentCode.PAYLOAD_MALFORMED
