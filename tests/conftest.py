"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Any, Callable, Dict
from fastapi.testclient import TestClient

from vinti4_gateway.api.dependencies import get_client
from vinti4_gateway.api.main import create_app
from vinti4_gateway.client import Vinti4Client
from vinti4_gateway.domain.fingerprint import REVERSAL_RESPONSE, SUCCESS_RESPONSE
from vinti4_gateway.domain.models import BillingDocument, Credentials

POS_ID = "90000443"
SECRET = "SECRET123"


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(pos_id=POS_ID, pos_auth_code=SECRET)


@pytest.fixture
def gateway() -> Vinti4Client:
    """Client with test credentials and the default endpoint"""
    return Vinti4Client(POS_ID, SECRET)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 10, 28, 12, 0, 0)


@pytest.fixture
def billing() -> BillingDocument:
    return BillingDocument(
        email="cliente@exemplo.com",
        country="132",
        city="Mindelo",
        address_line1="Rua Amílcar Cabral, 10",
        postal_code="2110",
    )


@pytest.fixture
def success_callback() -> Callable[..., Dict[str, Any]]:
    """Factory for a correctly signed payment callback; overrides are applied before signing"""

    def make(secret: str = SECRET, **overrides: Any) -> Dict[str, Any]:
        data = {
            "messageType": "8",
            "merchantRespCP": "20251028",
            "merchantRespTid": "TST123",
            "merchantRespMerchantRef": "R12345",
            "merchantRespMerchantSession": "S67890",
            "merchantRespPurchaseAmount": "100.00",
            "merchantRespMessageID": "MSG01",
            "merchantRespPan": "411111******1111",
            "merchantResp": "C",
            "merchantRespTimeStamp": "2025-10-28 12:05:00",
            "merchantRespReferenceNumber": "456",
            "merchantRespEntityCode": "123",
            "merchantRespClientReceipt": "OK",
            "merchantRespAdditionalErrorMessage": "",
            "merchantRespReloadCode": "",
        }
        data.update(overrides)
        data["resultFingerPrint"] = SUCCESS_RESPONSE.compute(secret, data)
        return data

    return make


@pytest.fixture
def reversal_callback() -> Callable[..., Dict[str, Any]]:
    """Factory for a correctly signed reversal callback"""

    def make(secret: str = SECRET, **overrides: Any) -> Dict[str, Any]:
        data = {
            "messageType": "10",
            "merchantRespMerchantRef": "R12345",
            "merchantRespMerchantSession": "S67890",
            "merchantRespCP": "20251028",
            "merchantRespTid": "TST123",
            "merchantRespMessageID": "MSG02",
            "languageMessages": "pt",
            "merchantRespTimeStamp": "2025-10-29 09:00:00",
            "resultFingerPrintVersion": "1",
        }
        data.update(overrides)
        data["resultFingerPrint7"] = REVERSAL_RESPONSE.compute(secret, data)
        return data

    return make


@pytest.fixture
def client(gateway: Vinti4Client) -> TestClient:
    """Create FastAPI test client with test credentials"""
    app = create_app()
    app.dependency_overrides[get_client] = lambda: gateway
    return TestClient(app)
