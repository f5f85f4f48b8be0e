"""
Tranzak charge adapter over httpx.

Notes on the gateway contract:
- Credentials travel as custom headers (`X-App-Id`, `X-Api-Key`), not as a
  bearer token.
- The gateway returns structured JSON error bodies on non-2xx responses, so
  the body is decoded regardless of status and interpretation is left to the
  application service.
"""
from __future__ import annotations

from typing import Optional

import httpx

from application.dtos.payments import ChargeRequest, GatewayResponse
from core.settings import TranzakSettings
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import (
    PaymentConfigurationError,
    PaymentProviderError,
)


class TranzakClient(BasePaymentClient):
    provider = "tranzak"

    def __init__(
        self,
        config: TranzakSettings,
        *,
        timeouts: Optional[dict[str, float]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(timeouts=timeouts, transport=transport)
        self._config = config
        # Evaluated once; settings are fixed for the life of the process
        self._missing = config.missing_credentials()

    @property
    def config(self) -> TranzakSettings:
        return self._config

    @property
    def is_configured(self) -> bool:
        return not self._missing

    def missing_credentials(self) -> list[str]:
        return list(self._missing)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-App-Id": self._config.app_id or "",
            "X-Api-Key": self._config.api_key or "",
        }

    async def send_charge(self, req: ChargeRequest) -> GatewayResponse:
        if not self.is_configured:
            raise PaymentConfigurationError(
                "Tranzak credentials not configured",
                provider=self.provider,
                missing=self.missing_credentials(),
            )
        self._log("tranzak_charge_sending", request_id=req.request_id, mno_code=req.mno_code)
        try:
            async with self.client() as http:
                response = await http.post(
                    self._config.request_url,
                    json=req.to_wire(),
                    headers=self._headers(),
                )
        except httpx.HTTPError as exc:
            raise PaymentProviderError(
                f"Tranzak request failed: {exc}",
                provider=self.provider,
                details={"request_id": req.request_id, "error_type": type(exc).__name__},
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise PaymentProviderError(
                "Tranzak returned a non-JSON body",
                provider=self.provider,
                provider_code=str(response.status_code),
                details={"request_id": req.request_id, "content_type": response.headers.get("content-type")},
            ) from exc
        self._log(
            "tranzak_charge_response",
            request_id=req.request_id,
            status_code=response.status_code,
            gateway_status=data.get("status") if isinstance(data, dict) else None,
        )
        return GatewayResponse(status_code=response.status_code, data=data)
