"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

import httpx

from core.settings import PaymentSettings, payment_settings
from application.ports.payment_gateway import ChargeGateway, WebhookVerifier


def get_charge_gateway(
    provider: Optional[str] = None,
    *,
    settings: Optional[PaymentSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChargeGateway:
    cfg = settings or payment_settings
    name = (provider or "tranzak").lower()
    if name == "tranzak":
        from .tranzak_client import TranzakClient
        return TranzakClient(cfg.tranzak, timeouts=cfg.timeouts.model_dump(), transport=transport)
    raise ValueError(f"Unsupported payment provider: {name}")


def get_webhook_verifier(
    provider: Optional[str] = None,
    *,
    settings: Optional[PaymentSettings] = None,
) -> WebhookVerifier:
    cfg = settings or payment_settings
    name = (provider or "tranzak").lower()
    if name == "tranzak":
        from .webhook import TranzakWebhookVerifier
        return TranzakWebhookVerifier(cfg.tranzak)
    raise ValueError(f"Unsupported payment provider: {name}")
