"""Integration tests for API endpoints"""

from fastapi.testclient import TestClient

from vinti4_gateway.api.main import create_app
from vinti4_gateway.domain.encoding import decode_document
from vinti4_gateway.domain.fingerprint import REQUEST

CALLBACK = "https://shop.cv/callback"


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["service"] == "vinti4-gateway"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "vinti4_requests_built_total" in response.text
    assert "vinti4_callback_outcomes_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_service_payment_endpoint(client: TestClient):
    """Test POST /v1/payments for a service payment"""
    response = client.post(
        "/v1/payments",
        json={
            "kind": "service_payment",
            "amount": "1000",
            "response_url": CALLBACK,
            "entity_code": "12345",
            "reference_number": "67890",
            "merchant_ref": "R1",
            "merchant_session": "S1",
        },
    )

    assert response.status_code == 200
    data = response.json()
    fields = data["fields"]
    assert fields["transactionCode"] == "2"
    assert fields["amount"] == "1000"
    assert fields["urlMerchantResponse"] == CALLBACK
    assert fields["fingerprint"] == REQUEST.compute("SECRET123", fields)
    assert data["submission_url"].startswith("https://mc.vinti4net.cv/BizMPIOnUs/CardPayment?FingerPrint=")


def test_purchase_endpoint_with_billing(client: TestClient):
    response = client.post(
        "/v1/payments",
        json={
            "kind": "purchase",
            "amount": "150.50",
            "response_url": CALLBACK,
            "billing": {
                "email": "cliente@exemplo.com",
                "country": "132",
                "city": "Mindelo",
                "address_line1": "Rua Amílcar Cabral, 10",
                "postal_code": "2110",
                "extras": {"addrMatch": "Y"},
            },
        },
    )

    assert response.status_code == 200
    fields = response.json()["fields"]
    assert fields["transactionCode"] == "1"
    assert fields["amount"] == "150.5"
    document = decode_document(fields["purchaseRequest"])
    assert document["shipAddrCity"] == "Mindelo"


def test_purchase_endpoint_incomplete_billing(client: TestClient):
    """Every missing billing field is reported in one 422"""
    response = client.post(
        "/v1/payments",
        json={"kind": "purchase", "amount": "150", "billing": {"email": "a@b.cv"}},
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["fields"] == ["billAddrCountry", "billAddrCity", "billAddrLine1", "billAddrPostCode"]


def test_recharge_endpoint_missing_reference(client: TestClient):
    response = client.post("/v1/payments", json={"kind": "recharge", "amount": "200", "entity_code": "1"})

    assert response.status_code == 422
    assert response.json()["detail"]["fields"] == ["referenceNumber"]


def test_payment_endpoint_non_numeric_entity_code(client: TestClient):
    """Values that cannot be encoded for the fingerprint are refused, not signed"""
    response = client.post(
        "/v1/payments",
        json={"kind": "service_payment", "amount": "10", "entity_code": "ABC", "reference_number": "1"},
    )

    assert response.status_code == 422
    assert "ABC" in response.json()["detail"]


def test_payment_endpoint_oversized_amount(client: TestClient):
    response = client.post(
        "/v1/payments",
        json={"kind": "service_payment", "amount": "1e5000", "entity_code": "1", "reference_number": "2"},
    )
    assert response.status_code == 422


def test_payment_endpoint_rejects_non_positive_amount(client: TestClient):
    response = client.post("/v1/payments", json={"kind": "recharge", "amount": "0"})
    assert response.status_code == 422


def test_payment_form_endpoint(client: TestClient):
    response = client.post(
        "/v1/payments/form",
        json={"kind": "service_payment", "amount": "1000", "entity_code": "1", "reference_number": "2"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "document.forms[0].submit()" in response.text
    assert "name='fingerprint'" in response.text
    assert "BizMPIOnUs/CardPayment?FingerPrint=" in response.text


def test_reversal_endpoint(client: TestClient):
    response = client.post(
        "/v1/reversals",
        json={
            "amount": "1500",
            "response_url": CALLBACK,
            "clearing_period": "CP42",
            "transaction_id": "TID9",
            "merchant_ref": "R1",
            "merchant_session": "S1",
        },
    )

    assert response.status_code == 200
    fields = response.json()["fields"]
    assert fields["transactionCode"] == "4"
    assert fields["reversal"] == "R"
    assert "fingerPrint6" in fields


def test_reversal_endpoint_requires_original_references(client: TestClient):
    response = client.post(
        "/v1/reversals",
        json={"amount": "1500", "clearing_period": "CP42", "transaction_id": "TID9", "merchant_ref": "R1"},
    )
    assert response.status_code == 422


def test_payment_callback_success(client: TestClient, success_callback):
    response = client.post("/v1/callbacks/payment", data=success_callback())

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "SUCCESS"
    assert data["success"] is True
    assert data["debug"] is None


def test_payment_callback_tampered(client: TestClient, success_callback):
    """Tampered callbacks are reported with both fingerprints, still as 200"""
    form = success_callback()
    form["merchantRespPurchaseAmount"] = "1.00"

    response = client.post("/v1/callbacks/payment", data=form)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "TAMPERED"
    assert data["success"] is False
    assert data["debug"]["received"] == form["resultFingerPrint"]
    assert data["debug"]["calculated"]


def test_payment_callback_cancelled_as_html(client: TestClient, success_callback):
    response = client.post(
        "/v1/callbacks/payment?format=html", data=success_callback(UserCancelled="true")
    )

    assert response.status_code == 200
    assert "cancelled by the cardholder" in response.text
    assert "R12345" in response.text


def test_payment_callback_html_escapes_gateway_values(client: TestClient):
    response = client.post(
        "/v1/callbacks/payment?format=html",
        data={"messageType": "6", "merchantRespErrorDescription": "<script>alert(1)</script>"},
    )

    assert response.status_code == 200
    assert "<script>" not in response.text
    assert "&lt;script&gt;" in response.text


def test_payment_callback_unrecognized(client: TestClient):
    response = client.post("/v1/callbacks/payment", data={})
    assert response.json()["status"] == "UNRECOGNIZED"


def test_payment_callback_rejects_unknown_format(client: TestClient, success_callback):
    response = client.post("/v1/callbacks/payment?format=xml", data=success_callback())
    assert response.status_code == 422


def test_reversal_callback(client: TestClient, reversal_callback):
    response = client.post("/v1/callbacks/reversal", data=reversal_callback())

    assert response.status_code == 200
    assert response.json()["status"] == "SUCCESS"


def test_unconfigured_service_returns_503(monkeypatch):
    """Without merchant credentials the service refuses to sign or verify"""
    monkeypatch.setattr("vinti4_gateway.api.dependencies.settings.pos_id", "")
    client = TestClient(create_app())

    response = client.post("/v1/payments", json={"kind": "purchase", "amount": "10"})

    assert response.status_code == 503
