"""Fingerprint engine - keyed two-stage SHA-512 digests over fixed field orderings"""

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Tuple

from vinti4_gateway.domain.encoding import numeric_or_empty, stripped, text, to_minor_units
from vinti4_gateway.domain.exceptions import MissingFieldError


def _b64_sha512(value: str) -> str:
    return base64.b64encode(hashlib.sha512(value.encode("utf-8")).digest()).decode("ascii")


def fingerprint(secret: str, ordered_fields: Iterable[str]) -> str:
    """
    Compute a gateway fingerprint.

    Scheme (identical for every message family):
        b64(sha512( b64(sha512(secret)) + field_1 + field_2 + ... ))

    Fields are concatenated without separators, so callers must pass them
    already encoded and in wire order.
    """
    to_hash = _b64_sha512(secret) + "".join(ordered_fields)
    return _b64_sha512(to_hash)


def fingerprints_match(received: Any, computed: str) -> bool:
    """Constant-time comparison; a missing or non-string received value never raises"""
    return hmac.compare_digest(str(received or "").encode("utf-8"), computed.encode("utf-8"))


@dataclass(frozen=True)
class Position:
    """One slot of an ordering: wire field, encoder, and whether it may be absent"""

    key: str
    encode: Callable[[Any], str] = text
    optional: bool = False


@dataclass(frozen=True)
class FieldOrdering:
    """Fixed sequence of fields hashed for one message family"""

    name: str
    positions: Tuple[Position, ...]

    def values(self, data: Mapping[str, Any]) -> list[str]:
        """
        Encode the ordered values from a field map.

        Raises:
            MissingFieldError: A non-optional position is absent or None
            EncodingError: A value cannot be normalized
        """
        values = []
        for position in self.positions:
            value = data.get(position.key)
            if value is None and not position.optional:
                raise MissingFieldError(position.key, self.name)
            values.append(position.encode(value))
        return values

    def compute(self, secret: str, data: Mapping[str, Any]) -> str:
        return fingerprint(secret, self.values(data))


REQUEST = FieldOrdering(
    "request",
    (
        Position("timeStamp"),
        Position("amount", to_minor_units),
        Position("merchantRef"),
        Position("merchantSession"),
        Position("posID"),
        Position("currency"),
        Position("transactionCode"),
        Position("entityCode", numeric_or_empty, optional=True),
        Position("referenceNumber", numeric_or_empty, optional=True),
    ),
)

SUCCESS_RESPONSE = FieldOrdering(
    "success response",
    (
        Position("messageType"),
        Position("merchantRespCP"),
        Position("merchantRespTid"),
        Position("merchantRespMerchantRef"),
        Position("merchantRespMerchantSession"),
        Position("merchantRespPurchaseAmount", to_minor_units),
        Position("merchantRespMessageID"),
        Position("merchantRespPan"),
        Position("merchantResp"),
        Position("merchantRespTimeStamp"),
        Position("merchantRespReferenceNumber", numeric_or_empty, optional=True),
        Position("merchantRespEntityCode", numeric_or_empty, optional=True),
        Position("merchantRespClientReceipt", optional=True),
        Position("merchantRespAdditionalErrorMessage", stripped, optional=True),
        Position("merchantRespReloadCode", optional=True),
    ),
)

REVERSAL_REQUEST = FieldOrdering(
    "reversal request",
    (
        Position("transactionCode"),
        Position("posID"),
        Position("merchantRef"),
        Position("merchantSession"),
        Position("amount"),
        Position("currency"),
        Position("clearingPeriod"),
        Position("transactionID"),
        Position("reversal"),
        Position("urlMerchantResponse"),
        Position("languageMessages"),
        Position("fingerPrintVersion"),
        Position("timeStamp"),
    ),
)

REVERSAL_RESPONSE = FieldOrdering(
    "reversal response",
    (
        Position("merchantRespMerchantRef"),
        Position("merchantRespMerchantSession"),
        Position("merchantRespErrorCode", optional=True),
        Position("merchantRespErrorDescription", optional=True),
        Position("merchantRespErrorDetail", optional=True),
        Position("merchantRespAdditionalErrorMessage", optional=True),
        Position("merchantRespCP", optional=True),
        Position("merchantRespTid", optional=True),
        Position("merchantRespMessageID", optional=True),
        Position("languageMessages", optional=True),
        Position("messageType", optional=True),
        Position("merchantRespTimeStamp", optional=True),
        Position("resultFingerPrintVersion", optional=True),
    ),
)
