"""
Tranzak webhook verification.

The gateway signs the exact request body bytes with HMAC-SHA256 and sends
the lowercase hex digest in `X-Tranzak-Signature`. Verification therefore
runs on the raw bytes captured once by the route; the very same bytes are
decoded as JSON only after the signature matched.
"""
from __future__ import annotations

import hashlib
import hmac
import json
from typing import Optional

from application.dtos.payments import WebhookEvent, WebhookResult, WebhookState
from core.logging_config import get_logger
from core.settings import TranzakSettings
from infrastructure.external.payments.exceptions import (
    WebhookConfigError,
    WebhookPayloadMalformed,
    WebhookSignatureInvalid,
    WebhookSignatureMissing,
    WebhookVerificationError,
)


logger = get_logger(__name__)


def compute_signature(secret: str, raw_body: bytes) -> str:
    """hex(HMAC_SHA256(secret, raw_body)), lowercase."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def signatures_match(expected: str, supplied: str) -> bool:
    """Constant-time comparison of two hex digests.

    Hex is case-insensitive, so the supplied value is lowered; lengths must
    agree before any byte is compared.
    """
    candidate = supplied.strip().lower().encode("utf-8")
    reference = expected.encode("ascii")
    if len(candidate) != len(reference):
        return False
    return hmac.compare_digest(reference, candidate)


class TranzakWebhookVerifier:
    provider = "tranzak"

    def __init__(self, config: TranzakSettings) -> None:
        self._secret = config.webhook_secret or None

    @property
    def is_configured(self) -> bool:
        return self._secret is not None

    def verify(self, raw_body: bytes, signature: Optional[str]) -> WebhookEvent:
        """Authenticate then parse; raises a WebhookVerificationError subclass."""
        if not self._secret:
            raise WebhookConfigError("Webhook secret not configured", provider=self.provider)
        if not signature or not signature.strip():
            raise WebhookSignatureMissing("Missing webhook signature", provider=self.provider)

        expected = compute_signature(self._secret, raw_body)
        if not signatures_match(expected, signature):
            raise WebhookSignatureInvalid("Invalid webhook signature", provider=self.provider)

        try:
            data = json.loads(raw_body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise WebhookPayloadMalformed(
                "Webhook body is not valid JSON", provider=self.provider, details={"error": str(exc)}
            ) from exc
        if not isinstance(data, dict):
            raise WebhookPayloadMalformed(
                "Webhook body must be a JSON object",
                provider=self.provider,
                details={"json_type": type(data).__name__},
            )
        return WebhookEvent(provider=self.provider, data=data, raw_body=raw_body)

    def verify_and_parse(self, raw_body: bytes, signature: Optional[str]) -> WebhookResult:
        try:
            event = self.verify(raw_body, signature)
        except WebhookVerificationError as exc:
            self._log_rejection(exc, raw_body)
            return WebhookResult(state=exc.state, error=exc.message)
        return WebhookResult(state=WebhookState.VERIFIED, event=event)

    def _log_rejection(self, exc: WebhookVerificationError, raw_body: bytes) -> None:
        # Payload contents are never logged for rejected notifications
        if exc.state is WebhookState.CONFIG_MISSING:
            logger.error("webhook_secret_not_configured", provider=self.provider)
        elif exc.state is WebhookState.SIGNATURE_INVALID:
            logger.warning("webhook_signature_invalid", provider=self.provider, body_bytes=len(raw_body))
        else:
            logger.warning(
                "webhook_rejected",
                provider=self.provider,
                state=exc.state.value,
                body_bytes=len(raw_body),
            )
