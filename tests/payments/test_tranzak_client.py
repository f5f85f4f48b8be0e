import httpx
import pytest

from application.dtos.payments import ChargeRequest
from application.ports.payment_gateway import ChargeGateway, WebhookVerifier
from core.settings import PaymentSettings, TranzakSettings
from infrastructure.external.payments import get_charge_gateway, get_webhook_verifier
from infrastructure.external.payments.exceptions import (
    PaymentConfigurationError,
    PaymentProviderError,
)
from infrastructure.external.payments.tranzak_client import TranzakClient
from infrastructure.external.payments.webhook import TranzakWebhookVerifier
from tests.stubs import StubGateway


def _request(**overrides) -> ChargeRequest:
    values = {
        "amount": 500,
        "currency_code": "XAF",
        "request_id": "0b7c1c1e-2b1a-4d7e-9a55-3c1c2f7e8a10",
        "memo": "CamerPay Payment",
        "mno_code": "MTN_MOMO",
        "phone_number": "+237670000000",
    }
    values.update(overrides)
    return ChargeRequest(**values)


def test_factory_builds_tranzak_adapters():
    settings = PaymentSettings(tranzak=TranzakSettings(app_id="a", api_key="k", webhook_secret="s"))
    gw = get_charge_gateway("tranzak", settings=settings)
    verifier = get_webhook_verifier("TRANZAK", settings=settings)

    assert isinstance(gw, TranzakClient)
    assert isinstance(gw, ChargeGateway)
    assert gw.is_configured
    assert isinstance(verifier, TranzakWebhookVerifier)
    assert isinstance(verifier, WebhookVerifier)


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError):
        get_charge_gateway("stripe")
    with pytest.raises(ValueError):
        get_webhook_verifier("paypal")


def test_missing_credentials_are_named():
    client = TranzakClient(TranzakSettings(api_key="k"))
    assert client.is_configured is False
    assert client.missing_credentials() == ["TRANZAK__APP_ID"]


def test_request_url_joins_base_and_path():
    cfg = TranzakSettings(base_url="https://sandbox.dev.tranzak.me/", request_path="v1/request")
    assert cfg.request_url == "https://sandbox.dev.tranzak.me/v1/request"


@pytest.mark.asyncio
async def test_send_charge_refuses_without_credentials():
    stub = StubGateway()
    client = TranzakClient(TranzakSettings(), transport=httpx.MockTransport(stub.handler))
    with pytest.raises(PaymentConfigurationError):
        await client.send_charge(_request())
    assert stub.calls == 0


@pytest.mark.asyncio
async def test_send_charge_returns_body_for_error_status(tranzak_config):
    stub = StubGateway(status_code=422, body={"message": "Invalid phone"})
    client = TranzakClient(tranzak_config, transport=httpx.MockTransport(stub.handler))

    response = await client.send_charge(_request())

    assert response.status_code == 422
    assert response.is_success is False
    assert response.data == {"message": "Invalid phone"}


@pytest.mark.asyncio
async def test_redirect_url_only_sent_when_present(tranzak_config):
    stub = StubGateway()
    client = TranzakClient(tranzak_config, transport=httpx.MockTransport(stub.handler))

    await client.send_charge(_request())
    await client.send_charge(_request(redirect_url="https://camerpay.test/dashboard/history"))

    first, second = stub.sent_bodies()
    assert "redirect_url" not in first
    assert second["redirect_url"] == "https://camerpay.test/dashboard/history"
    await client.aclose()


@pytest.mark.asyncio
async def test_non_json_body_raises_provider_error(tranzak_config):
    stub = StubGateway(status_code=503, raw=b"Service Unavailable")
    client = TranzakClient(tranzak_config, transport=httpx.MockTransport(stub.handler))

    with pytest.raises(PaymentProviderError) as exc_info:
        await client.send_charge(_request())
    assert exc_info.value.details["provider_code"] == "503"


@pytest.mark.asyncio
async def test_transport_error_raises_provider_error(tranzak_config):
    def _timeout(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    client = TranzakClient(tranzak_config, transport=httpx.MockTransport(_timeout))
    with pytest.raises(PaymentProviderError) as exc_info:
        await client.send_charge(_request())
    assert exc_info.value.details["error_type"] == "ReadTimeout"


def test_client_timeouts_come_from_settings():
    settings = PaymentSettings(tranzak=TranzakSettings(app_id="a", api_key="k"))
    timeout = get_charge_gateway("tranzak", settings=settings).timeouts
    assert (timeout.connect, timeout.read, timeout.write) == (5.0, 15.0, 15.0)
    # pool falls back to the overall budget
    assert timeout.pool == 30.0
