"""
Payment specific codes and gateway status sentinels.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    SUCCESS = 0

    # Provider errors (60xxx)
    PROVIDER_ERROR = 60000

    # Webhook verification (61xxx)
    SIGNATURE_MISSING = 61001
    SIGNATURE_INVALID = 61002
    PAYLOAD_MALFORMED = 61003
    WEBHOOK_NOT_CONFIGURED = 61004

    # Charge input (62xxx)
    UNSUPPORTED_PAYMENT_METHOD = 62001


# Synchronous request status that means the charge was accepted
TRANZAK_SUCCESS_STATUS = "SUCCESSFUL"

# Gateway transaction status → internal status (webhook payloads)
PROVIDER_STATUS_TO_INTERNAL = {
    "tranzak": {
        "PENDING": "pending",
        "PAYMENT_IN_PROGRESS": "processing",
        "SUCCESSFUL": "succeeded",
        "FAILED": "failed",
        "CANCELLED": "canceled",
        "CANCELLED_BY_PAYER": "canceled",
        "EXPIRED": "expired",
        "REFUNDED": "refunded",
    },
}
