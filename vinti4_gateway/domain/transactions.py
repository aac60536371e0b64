"""Outbound transaction assembly - field set, fingerprint and submission URL"""

from datetime import datetime
from typing import Dict
from urllib.parse import urlencode

from vinti4_gateway.domain.billing import build_billing
from vinti4_gateway.domain.encoding import format_amount, to_decimal, whole_units
from vinti4_gateway.domain.exceptions import EncodingError, ValidationError
from vinti4_gateway.domain.fingerprint import REQUEST, REVERSAL_REQUEST
from vinti4_gateway.domain.models import (
    Credentials,
    OutboundFieldSet,
    PurchaseDetails,
    RechargeDetails,
    ReversalDetails,
    ServicePaymentDetails,
    TransactionRequest,
)
from vinti4_gateway.utils.date_utils import default_reference, gateway_timestamp, parse_gateway_timestamp

DEFAULT_ENDPOINT = "https://mc.vinti4net.cv/BizMPIOnUs/CardPayment"
DEFAULT_CURRENCY = "132"  # Cape Verde escudo
DEFAULT_LANGUAGE = "pt"
FINGERPRINT_VERSION = "1"


def submission_url(endpoint: str, fingerprint: str, timestamp: str, version: str) -> str:
    """Endpoint with FingerPrint, TimeStamp and FingerPrintVersion query parameters"""
    query = urlencode({"FingerPrint": fingerprint, "TimeStamp": timestamp, "FingerPrintVersion": version})
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}{query}"


def _validate_common(request: TransactionRequest) -> None:
    missing = []
    if not request.response_url:
        missing.append("urlMerchantResponse")
    if request.amount is None or str(request.amount).strip() == "":
        missing.append("amount")
    if missing:
        raise ValidationError("Incomplete transaction request", missing)

    try:
        amount = to_decimal(request.amount)
    except EncodingError as e:
        raise ValidationError(str(e), ["amount"]) from e
    if amount <= 0:
        raise ValidationError("Amount must be positive", ["amount"])


def _moment(request: TransactionRequest, now: datetime | None) -> datetime:
    """Instant the default references derive from: the request timestamp when given"""
    if request.timestamp:
        try:
            return parse_gateway_timestamp(request.timestamp)
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp {request.timestamp!r}", ["timeStamp"]) from e
    return now or datetime.now()


def _payment_fields(
    credentials: Credentials, request: TransactionRequest, timestamp: str, moment: datetime
) -> Dict[str, str]:
    details = request.details
    entity_code = ""
    reference_number = ""
    if isinstance(details, (ServicePaymentDetails, RechargeDetails)):
        missing = [
            name
            for name, value in (("entityCode", details.entity_code), ("referenceNumber", details.reference_number))
            if not value
        ]
        if missing:
            raise ValidationError(f"Incomplete {request.kind.name.lower()} request", missing)
        entity_code = str(details.entity_code)
        reference_number = str(details.reference_number)

    fields = {
        "transactionCode": request.kind.value,
        "posID": credentials.pos_id,
        "merchantRef": request.merchant_ref or default_reference("R", moment),
        "merchantSession": request.merchant_session or default_reference("S", moment),
        "amount": format_amount(request.amount),
        "currency": request.currency or DEFAULT_CURRENCY,
        "is3DSec": "1",
        "urlMerchantResponse": request.response_url,
        "languageMessages": request.language or DEFAULT_LANGUAGE,
        "timeStamp": timestamp,
        "fingerprintversion": FINGERPRINT_VERSION,
        "entityCode": entity_code,
        "referenceNumber": reference_number,
    }

    # Degraded 3DS mode when a purchase carries no billing data
    if isinstance(details, PurchaseDetails) and details.billing is not None:
        fields["purchaseRequest"] = build_billing(details.billing)

    return fields


def _reversal_fields(
    credentials: Credentials, request: TransactionRequest, details: ReversalDetails, timestamp: str
) -> Dict[str, str]:
    # A reversal references the original payment; nothing here may be defaulted
    missing = [
        name
        for name, value in (
            ("merchantRef", request.merchant_ref),
            ("merchantSession", request.merchant_session),
            ("clearingPeriod", details.clearing_period),
            ("transactionID", details.transaction_id),
        )
        if not value
    ]
    if missing:
        raise ValidationError("Incomplete reversal request", missing)

    return {
        "transactionCode": request.kind.value,
        "posID": credentials.pos_id,
        "merchantRef": request.merchant_ref,
        "merchantSession": request.merchant_session,
        "amount": whole_units(request.amount),
        "currency": request.currency or DEFAULT_CURRENCY,
        "clearingPeriod": details.clearing_period,
        "transactionID": details.transaction_id,
        "reversal": "R",
        "urlMerchantResponse": request.response_url,
        "languageMessages": request.language or DEFAULT_LANGUAGE,
        "fingerPrintVersion": FINGERPRINT_VERSION,
        "timeStamp": timestamp,
    }


def build_transaction(
    credentials: Credentials,
    request: TransactionRequest,
    endpoint: str = DEFAULT_ENDPOINT,
    now: datetime | None = None,
) -> OutboundFieldSet:
    """
    Build the signed field set for one transaction.

    Flow:
    1. Populate defaults (timestamp, currency, language, version); default
       references derive from the request timestamp, else from now
    2. Purchase with billing data → purchaseRequest sub-document
    3. Fingerprint over the populated fields (request or reversal ordering)
    4. Submission URL carrying fingerprint, timestamp and version

    Any ValidationError/EncodingError is raised before the fingerprint is
    computed, so an incomplete payload is never signed.
    """
    _validate_common(request)

    moment = _moment(request, now)
    timestamp = request.timestamp or gateway_timestamp(moment)

    if isinstance(request.details, ReversalDetails):
        fields = _reversal_fields(credentials, request, request.details, timestamp)
        signature = REVERSAL_REQUEST.compute(credentials.pos_auth_code, fields)
        fields["fingerPrint6"] = signature
        version = fields["fingerPrintVersion"]
    else:
        fields = _payment_fields(credentials, request, timestamp, moment)
        signature = REQUEST.compute(credentials.pos_auth_code, fields)
        fields["fingerprint"] = signature
        version = fields["fingerprintversion"]

    return OutboundFieldSet(
        submission_url=submission_url(endpoint, signature, timestamp, version),
        fields=fields,
    )
