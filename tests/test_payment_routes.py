import hashlib
import hmac

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import payments as payments_routes
from core.exceptions import register_exception_handlers
from core.settings import TranzakSettings
from tests.stubs import WEBHOOK_SECRET, StubGateway


WEBHOOK_PATH = "/api/v1/payments/webhooks/tranzak"
CHARGE_PATH = "/api/v1/payments/charges"


def _build_client(service) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(payments_routes.router, prefix="/api/v1")
    app.state.payment_service = service
    return TestClient(app)


@pytest.fixture
def stub():
    return StubGateway()


@pytest.fixture
def client(make_service, stub):
    return _build_client(make_service(stub))


def _signed(body: bytes) -> dict:
    sig = hmac.new(WEBHOOK_SECRET.encode(), body, hashlib.sha256).hexdigest()
    return {"X-Tranzak-Signature": sig, "Content-Type": "application/json"}


class TestChargeRoute:
    def test_direct_charge_returns_outcome(self, client, stub):
        response = client.post(
            CHARGE_PATH,
            json={"phone_number": "670000000", "amount": 500, "payment_method": "mtn-momo"},
        )
        assert response.status_code == 200
        payload = response.json()
        assert payload["code"] == 0
        assert payload["data"]["success"] is True
        assert payload["data"]["transaction_id"] == "TX123"
        assert "approve the transaction" in payload["data"]["message"]
        assert stub.sent_bodies()[0]["phone_number"] == "+237670000000"

    def test_gateway_failure_is_still_http_200(self, make_service):
        stub = StubGateway(status_code=400, body={"message": "Invalid wallet"})
        client = _build_client(make_service(stub))
        response = client.post(
            CHARGE_PATH,
            json={"phone_number": "670000000", "amount": 500, "payment_method": "orange-money"},
        )
        assert response.status_code == 200
        payload = response.json()
        assert payload["code"] != 0
        assert payload["data"]["success"] is False
        assert payload["data"]["message"] == "Invalid wallet"

    def test_unknown_payment_method_is_422_without_io(self, client, stub):
        response = client.post(
            CHARGE_PATH,
            json={"phone_number": "670000000", "amount": 500, "payment_method": "nexttel"},
        )
        assert response.status_code == 422
        assert response.json()["error"]["type"] == "UnsupportedPaymentMethod"
        assert stub.calls == 0

    @pytest.mark.parametrize("method", [123, ["mtn-momo"], {"a": 1}, None])
    def test_non_string_payment_method_is_422(self, client, stub, method):
        response = client.post(
            CHARGE_PATH,
            json={"phone_number": "670000000", "amount": 500, "payment_method": method},
        )
        assert response.status_code == 422
        assert response.json()["error"]["type"] == "UnsupportedPaymentMethod"
        assert stub.calls == 0

    @pytest.mark.parametrize("phone", ["6700", "٦٧٠٠٠٠٠٠٠"])
    def test_bad_phone_is_422(self, client, stub, phone):
        response = client.post(
            CHARGE_PATH,
            json={"phone_number": phone, "amount": 500, "payment_method": "mtn-momo"},
        )
        assert response.status_code == 422
        assert stub.calls == 0

    def test_tv_packages(self, client):
        response = client.get("/api/v1/payments/tv-packages")
        assert response.status_code == 200
        assert response.json()["data"]["monthly"] == 2500


class TestWebhookRoute:
    def test_verified_webhook_is_acknowledged(self, client):
        body = b'{"transactionId":"TX123","transactionStatus":"SUCCESSFUL"}'
        response = client.post(WEBHOOK_PATH, content=body, headers=_signed(body))
        assert response.status_code == 200
        payload = response.json()
        assert payload["message"] == "Webhook received"
        assert payload["data"]["transaction_id"] == "TX123"

    def test_missing_signature_is_400(self, client):
        response = client.post(WEBHOOK_PATH, content=b"{}", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "signature_missing"

    def test_invalid_signature_is_403(self, client):
        headers = {"X-Tranzak-Signature": "0" * 64, "Content-Type": "application/json"}
        response = client.post(WEBHOOK_PATH, content=b'{"a":1}', headers=headers)
        assert response.status_code == 403

    def test_malformed_body_is_400(self, client):
        body = b"definitely-not-json"
        response = client.post(WEBHOOK_PATH, content=body, headers=_signed(body))
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "body_malformed"

    def test_missing_secret_is_500(self, make_service, stub):
        service = make_service(stub, config=TranzakSettings(app_id="a", api_key="k"))
        client = _build_client(service)
        body = b"{}"
        response = client.post(WEBHOOK_PATH, content=body, headers=_signed(body))
        assert response.status_code == 500


def test_app_registers_payment_routes():
    from main import app
    paths = app.openapi()["paths"]
    assert WEBHOOK_PATH in paths
    assert CHARGE_PATH in paths
    assert "/api/v1/payments/tv-packages" in paths


def test_health_echoes_request_id():
    from main import app
    with TestClient(app) as client:
        response = client.get("/health", headers={"X-Request-ID": "trace-1"})
        assert response.status_code == 200
        assert response.json()["data"] == {"status": "healthy"}
        assert response.headers["X-Request-ID"] == "trace-1"
        assert app.state.payment_service is not None
