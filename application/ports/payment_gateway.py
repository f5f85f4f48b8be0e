"""
Payment gateway ports (application/ports) exposing replaceable protocols.

Application depends on these Protocols; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from application.dtos.payments import (
    ChargeRequest,
    GatewayResponse,
    WebhookResult,
)


@runtime_checkable
class ChargeGateway(Protocol):
    """Outbound side: sends one charge request and returns the raw response.

    Implementations must not retry and must not interpret the body.
    """

    provider: str

    @property
    def is_configured(self) -> bool: ...

    def missing_credentials(self) -> list[str]: ...

    async def send_charge(self, req: ChargeRequest) -> GatewayResponse: ...


@runtime_checkable
class WebhookVerifier(Protocol):
    """Inbound side: authenticates and parses one raw notification body."""

    provider: str

    def verify_and_parse(self, raw_body: bytes, signature: Optional[str]) -> WebhookResult: ...
