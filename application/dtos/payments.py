"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_serializer, field_validator
from pydantic.types import condecimal

from domain.payment.value_objects import (
    LOCAL_PHONE_DIGITS,
    ChargePurpose,
    PaymentFlow,
    PaymentMethod,
    parse_payment_method,
)
from shared.codes.payment_codes import PROVIDER_STATUS_TO_INTERNAL


class ChargeInput(BaseModel):
    """Pre-validated values handed over by the UI collaborator."""

    phone_number: str = Field(pattern=rf"^[0-9]{{{LOCAL_PHONE_DIGITS}}}$")
    amount: condecimal(gt=0)  # type: ignore[valid-type]
    payment_method: PaymentMethod
    payment_flow: PaymentFlow = PaymentFlow.DIRECT
    memo: Optional[str] = None
    # Used only to derive a memo when none is given
    purpose: Optional[ChargePurpose] = None
    reference: Optional[str] = None
    package: Optional[str] = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def _closed_payment_method(cls, v: Any) -> PaymentMethod:
        # Raises UnsupportedPaymentMethodException rather than a generic enum error
        return parse_payment_method(v)


class ChargeRequest(BaseModel):
    """Body of the outbound charge request, field names as on the wire."""

    amount: Decimal
    currency_code: str
    request_id: str
    memo: str
    mno_code: str
    phone_number: str
    redirect_url: Optional[str] = None

    @field_serializer("amount")
    def _amount_as_number(self, amount: Decimal) -> int | float:
        return int(amount) if amount == amount.to_integral_value() else float(amount)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class GatewayResponse(BaseModel):
    status_code: int
    data: Any = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class ChargeOutcome(BaseModel):
    success: bool
    message: str
    transaction_id: Optional[str] = None
    redirect_url: Optional[str] = None


class WebhookState(str, Enum):
    RECEIVED = "received"
    CONFIG_MISSING = "config_missing"
    SIGNATURE_MISSING = "signature_missing"
    SIGNATURE_INVALID = "signature_invalid"
    BODY_MALFORMED = "body_malformed"
    VERIFIED = "verified"


WEBHOOK_HTTP_STATUS: dict[WebhookState, int] = {
    WebhookState.VERIFIED: 200,
    WebhookState.SIGNATURE_MISSING: 400,
    WebhookState.BODY_MALFORMED: 400,
    WebhookState.SIGNATURE_INVALID: 403,
    WebhookState.CONFIG_MISSING: 500,
}


class WebhookEvent(BaseModel):
    provider: str
    data: dict[str, Any]
    raw_body: Optional[bytes] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def _lookup(self, *keys: str) -> Optional[str]:
        sources = [self.data]
        resource = self.data.get("resource")
        if isinstance(resource, dict):
            sources.append(resource)
        for source in sources:
            for key in keys:
                value = source.get(key)
                if value is not None:
                    return str(value)
        return None

    @property
    def transaction_id(self) -> Optional[str]:
        return self._lookup("transactionId", "transaction_id")

    @property
    def status(self) -> Optional[str]:
        return self._lookup("transactionStatus", "status")

    @property
    def internal_status(self) -> Optional[str]:
        raw = self.status
        if raw is None:
            return None
        return PROVIDER_STATUS_TO_INTERNAL.get(self.provider, {}).get(raw.upper(), raw.lower())


class WebhookResult(BaseModel):
    state: WebhookState
    event: Optional[WebhookEvent] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is WebhookState.VERIFIED

    @property
    def http_status(self) -> int:
        return WEBHOOK_HTTP_STATUS.get(self.state, 500)
