"""POST /v1/payments, /v1/payments/form and /v1/reversals - signed request builders"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from vinti4_gateway.api.dependencies import get_client
from vinti4_gateway.api.rendering import render_payment_form
from vinti4_gateway.api.v1.schemas import (
    FieldSetResponse,
    PaymentKind,
    PaymentRequestBody,
    ReversalRequestBody,
)
from vinti4_gateway.client import Vinti4Client
from vinti4_gateway.config import settings
from vinti4_gateway.domain.models import BillingDocument, TransactionRequest

router = APIRouter()


def _to_request(client: Vinti4Client, body: PaymentRequestBody) -> TransactionRequest:
    extra = {
        "merchant_ref": body.merchant_ref,
        "merchant_session": body.merchant_session,
        "language": body.language,
        "currency": body.currency,
    }
    response_url = body.response_url or settings.response_url

    if body.kind is PaymentKind.purchase:
        billing = BillingDocument(**body.billing.model_dump()) if body.billing else None
        return client.purchase(body.amount, response_url, billing, **extra)
    if body.kind is PaymentKind.service_payment:
        return client.service_payment(
            body.amount, response_url, body.entity_code or "", body.reference_number or "", **extra
        )
    return client.recharge(body.amount, response_url, body.entity_code or "", body.reference_number or "", **extra)


@router.post("/payments", response_model=FieldSetResponse)
def create_payment(
    body: PaymentRequestBody,
    client: Vinti4Client = Depends(get_client),
):
    """
    Build the signed field set for a purchase, service payment or recharge.

    The caller renders or forwards {submission_url, fields}; nothing is sent
    to the gateway from here.
    """
    field_set = client.build(_to_request(client, body))
    return FieldSetResponse(**field_set.to_dict())


@router.post("/payments/form", response_class=HTMLResponse)
def create_payment_form(
    body: PaymentRequestBody,
    client: Vinti4Client = Depends(get_client),
):
    """Same as /payments, rendered as an auto-submitting HTML form"""
    field_set = client.build(_to_request(client, body))
    return HTMLResponse(render_payment_form(field_set))


@router.post("/reversals", response_model=FieldSetResponse)
def create_reversal(
    body: ReversalRequestBody,
    client: Vinti4Client = Depends(get_client),
):
    """Build the signed field set reversing a completed transaction"""
    transaction = client.reversal(
        body.amount,
        body.response_url or settings.response_url,
        clearing_period=body.clearing_period,
        transaction_id=body.transaction_id,
        merchant_ref=body.merchant_ref,
        merchant_session=body.merchant_session,
        language=body.language,
    )
    field_set = client.build(transaction)
    return FieldSetResponse(**field_set.to_dict())
