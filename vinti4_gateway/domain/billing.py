"""3-D Secure billing sub-document (purchaseRequest) generation"""

from typing import Any, Dict

from vinti4_gateway.domain.encoding import encode_document
from vinti4_gateway.domain.exceptions import ValidationError
from vinti4_gateway.domain.models import BillingDocument

REQUIRED_BILLING_FIELDS = ("billAddrCountry", "billAddrCity", "billAddrLine1", "billAddrPostCode", "email")

# Copied from billing to shipping only when present on the billing side
_OPTIONAL_ADDRESS_SUFFIXES = ("Line2", "Line3", "PostCode", "State")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def apply_address_match(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    When addrMatch is "Y" the shipping address mirrors the billing address.

    Derived shipping fields overwrite anything the caller supplied.
    """
    if payload.get("addrMatch", "N") != "Y":
        return payload

    payload["shipAddrCountry"] = payload["billAddrCountry"]
    payload["shipAddrCity"] = payload["billAddrCity"]
    payload["shipAddrLine1"] = payload["billAddrLine1"]
    for suffix in _OPTIONAL_ADDRESS_SUFFIXES:
        if f"billAddr{suffix}" in payload:
            payload[f"shipAddr{suffix}"] = payload[f"billAddr{suffix}"]
    return payload


def build_billing(document: BillingDocument) -> str:
    """
    Validate and encode the billing sub-document.

    Steps:
    1. Every required field must be present and non-empty (all offenders reported)
    2. Address-match derivation of shipping fields
    3. Compact JSON of non-empty values, Base64-encoded

    Raises:
        ValidationError: One or more required fields missing or empty
        EncodingError: Payload cannot be serialized
    """
    payload = document.to_payload()

    missing = [name for name in REQUIRED_BILLING_FIELDS if _is_blank(payload.get(name))]
    if missing:
        raise ValidationError("Incomplete billing data for purchaseRequest", missing)

    return encode_document(apply_address_match(payload))
