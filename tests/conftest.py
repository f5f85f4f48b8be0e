"""Pytest bootstrap configuration.

Pin environment before application settings are imported, then provide a
stub Tranzak gateway built on httpx.MockTransport.
"""
import os

os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("APP_PUBLIC_URL", "https://camerpay.test")

from typing import Callable

import httpx
import pytest

from application.services.payment_service import PaymentService
from core.settings import TranzakSettings
from infrastructure.external.payments.tranzak_client import TranzakClient
from infrastructure.external.payments.webhook import TranzakWebhookVerifier
from tests.stubs import WEBHOOK_SECRET, StubGateway


@pytest.fixture
def tranzak_config() -> TranzakSettings:
    return TranzakSettings(app_id="app_test", api_key="key_test", webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def make_service(tranzak_config) -> Callable[..., PaymentService]:
    def _make(stub: StubGateway, config: TranzakSettings | None = None) -> PaymentService:
        cfg = config or tranzak_config
        client = TranzakClient(cfg, transport=httpx.MockTransport(stub.handler))
        return PaymentService(
            gateway=client,
            config=cfg,
            public_base_url="https://camerpay.test",
            webhook_verifier=TranzakWebhookVerifier(cfg),
        )
    return _make
