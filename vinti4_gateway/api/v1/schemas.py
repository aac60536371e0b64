"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PaymentKind(str, Enum):
    purchase = "purchase"
    service_payment = "service_payment"
    recharge = "recharge"


class BillingSchema(BaseModel):
    """3-D Secure billing data; emptiness is checked by the domain so every gap is reported"""

    email: str = ""
    country: str = Field("", description="Billing country (ISO 3166 numeric)")
    city: str = ""
    address_line1: str = ""
    postal_code: str = ""
    acct_info: Dict[str, Any] = Field(default_factory=dict)
    extras: Dict[str, Any] = Field(default_factory=dict, description="addrMatch, shipAddr*, phones...")


class PaymentRequestBody(BaseModel):
    """Request body for POST /v1/payments"""

    kind: PaymentKind = PaymentKind.purchase
    amount: Decimal = Field(..., gt=0, description="Amount in currency units")
    response_url: Optional[str] = Field(None, description="Callback URL (defaults to configured one)")
    entity_code: Optional[str] = None
    reference_number: Optional[str] = None
    merchant_ref: Optional[str] = None
    merchant_session: Optional[str] = None
    language: Optional[str] = None
    currency: Optional[str] = None
    billing: Optional[BillingSchema] = None


class ReversalRequestBody(BaseModel):
    """Request body for POST /v1/reversals"""

    amount: Decimal = Field(..., gt=0)
    response_url: Optional[str] = None
    clearing_period: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
    merchant_ref: str = Field(..., min_length=1)
    merchant_session: str = Field(..., min_length=1)
    language: Optional[str] = None


class FieldSetResponse(BaseModel):
    """Signed fields the browser must POST to submission_url"""

    submission_url: str
    fields: Dict[str, str]


class OutcomeResponse(BaseModel):
    """Classified callback"""

    status: str
    message: str
    success: bool
    data: Dict[str, Any]
    dcc: Optional[Dict[str, Any]] = None
    detail: Optional[str] = None
    debug: Optional[Dict[str, str]] = None
