"""Gateway callback classification"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from vinti4_gateway.domain.exceptions import DomainException
from vinti4_gateway.domain.fingerprint import (
    REVERSAL_RESPONSE,
    SUCCESS_RESPONSE,
    FieldOrdering,
    fingerprints_match,
)
from vinti4_gateway.domain.models import Credentials, OutcomeStatus, ResponseFlow, ResponseOutcome

# Immediate approval, batch approval, and two partner-specific approvals
SUCCESS_MESSAGE_TYPES = frozenset({"8", "10", "P", "M"})

_ORDERING_BY_FLOW: Dict[ResponseFlow, FieldOrdering] = {
    ResponseFlow.PAYMENT: SUCCESS_RESPONSE,
    ResponseFlow.REVERSAL: REVERSAL_RESPONSE,
}

_FINGERPRINT_FIELD_BY_FLOW: Dict[ResponseFlow, str] = {
    ResponseFlow.PAYMENT: "resultFingerPrint",
    ResponseFlow.REVERSAL: "resultFingerPrint7",
}


def decode_dcc(raw: Any) -> Optional[Dict[str, Any]]:
    """Decode the dynamic currency conversion document; None when absent or invalid"""
    if not raw:
        return None
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logging.warning("Ignoring undecodable DCC data")
        return None
    return decoded if isinstance(decoded, dict) else None


def _is_cancelled(data: Mapping[str, Any]) -> bool:
    return str(data.get("UserCancelled") or "").strip().lower() == "true"


def classify_response(
    credentials: Credentials,
    data: Mapping[str, Any],
    flow: ResponseFlow = ResponseFlow.PAYMENT,
) -> ResponseOutcome:
    """
    Classify a gateway callback. Terminal on the first matching rule:

    1. UserCancelled == "true"          → CANCELLED (no fingerprint check)
    2. merchantRespDCCData present      → decoded and attached when valid
    3. no messageType                   → UNRECOGNIZED (timeout / transport)
    4. messageType in success set       → SUCCESS if the recomputed fingerprint
                                          matches, TAMPERED otherwise
    5. anything else                    → FAILURE with the gateway error text

    A success message type alone never yields SUCCESS. Never raises.
    """
    payload = dict(data)

    if _is_cancelled(payload):
        return ResponseOutcome(
            status=OutcomeStatus.CANCELLED,
            message="Transaction cancelled by the cardholder.",
            data=payload,
        )

    dcc = decode_dcc(payload.get("merchantRespDCCData"))

    message_type = payload.get("messageType")
    if message_type is None or str(message_type).strip() == "":
        return ResponseOutcome(
            status=OutcomeStatus.UNRECOGNIZED,
            message="No response from the gateway (timeout or network issue).",
            data=payload,
            dcc=dcc,
        )

    if str(message_type) in SUCCESS_MESSAGE_TYPES:
        ordering = _ORDERING_BY_FLOW[flow]
        try:
            computed = ordering.compute(credentials.pos_auth_code, payload)
        except DomainException as e:
            # Approval claim that cannot be authenticated
            logging.warning("Cannot verify %s fingerprint: %s", ordering.name, e)
            return ResponseOutcome(
                status=OutcomeStatus.FAILURE,
                message="Incomplete approval callback; fingerprint could not be verified.",
                data=payload,
                dcc=dcc,
                detail=str(e),
            )

        received = payload.get(_FINGERPRINT_FIELD_BY_FLOW[flow])
        if fingerprints_match(received, computed):
            return ResponseOutcome(
                status=OutcomeStatus.SUCCESS,
                message="Transaction successful and fingerprint valid.",
                data=payload,
                dcc=dcc,
            )

        return ResponseOutcome(
            status=OutcomeStatus.TAMPERED,
            message="Transaction may have been approved but the response fingerprint is invalid.",
            data=payload,
            dcc=dcc,
            received_fingerprint="" if received is None else str(received),
            computed_fingerprint=computed,
        )

    return ResponseOutcome(
        status=OutcomeStatus.FAILURE,
        message=payload.get("merchantRespErrorDescription") or "Unknown transaction error.",
        data=payload,
        dcc=dcc,
        detail=payload.get("merchantRespErrorDetail") or "",
    )
