"""Domain models - pure Python dataclasses representing gateway messages"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union


class TransactionKind(str, Enum):
    """Transaction types with their wire codes"""

    PURCHASE = "1"
    SERVICE_PAYMENT = "2"
    RECHARGE = "3"
    REVERSAL = "4"


class OutcomeStatus(str, Enum):
    """Verdict of a classified gateway callback"""

    SUCCESS = "SUCCESS"
    CANCELLED = "CANCELLED"
    FAILURE = "FAILURE"
    TAMPERED = "TAMPERED"  # fingerprint mismatch
    UNRECOGNIZED = "UNRECOGNIZED"  # no callback content


class ResponseFlow(str, Enum):
    """Which request a callback answers; selects the fingerprint ordering"""

    PAYMENT = "payment"
    REVERSAL = "reversal"


@dataclass(frozen=True)
class Credentials:
    """Merchant point-of-sale id and secret authorization code"""

    pos_id: str
    pos_auth_code: str = field(repr=False)


@dataclass
class BillingDocument:
    """Cardholder billing data for 3-D Secure purchases"""

    email: str = ""
    country: str = ""
    city: str = ""
    address_line1: str = ""
    postal_code: str = ""
    acct_info: Dict[str, Any] = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)  # addrMatch, shipAddr*, phones...

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "BillingDocument":
        """Build from gateway field names (billAddrCountry, email, ...)"""
        known = {"email", "billAddrCountry", "billAddrCity", "billAddrLine1", "billAddrPostCode", "acctInfo"}
        return cls(
            email=data.get("email") or "",
            country=data.get("billAddrCountry") or "",
            city=data.get("billAddrCity") or "",
            address_line1=data.get("billAddrLine1") or "",
            postal_code=data.get("billAddrPostCode") or "",
            acct_info=dict(data.get("acctInfo") or {}),
            extras={k: v for k, v in data.items() if k not in known},
        )

    def to_payload(self) -> Dict[str, Any]:
        """Gateway field names, required fields first"""
        payload: Dict[str, Any] = {
            "billAddrCountry": self.country,
            "billAddrCity": self.city,
            "billAddrLine1": self.address_line1,
            "billAddrPostCode": self.postal_code,
            "email": self.email,
        }
        if self.acct_info:
            payload["acctInfo"] = dict(self.acct_info)
        payload.update(self.extras)
        return payload


@dataclass(frozen=True)
class PurchaseDetails:
    billing: Optional[BillingDocument] = None


@dataclass(frozen=True)
class ServicePaymentDetails:
    entity_code: str
    reference_number: str


@dataclass(frozen=True)
class RechargeDetails:
    entity_code: str  # operator
    reference_number: str  # phone number


@dataclass(frozen=True)
class ReversalDetails:
    clearing_period: str  # merchantRespCP of the original transaction
    transaction_id: str  # merchantRespTid of the original transaction


TransactionDetails = Union[PurchaseDetails, ServicePaymentDetails, RechargeDetails, ReversalDetails]

_KIND_BY_DETAILS = {
    PurchaseDetails: TransactionKind.PURCHASE,
    ServicePaymentDetails: TransactionKind.SERVICE_PAYMENT,
    RechargeDetails: TransactionKind.RECHARGE,
    ReversalDetails: TransactionKind.REVERSAL,
}


@dataclass
class TransactionRequest:
    """Caller-side description of one outbound transaction"""

    amount: Decimal
    response_url: str
    details: TransactionDetails
    merchant_ref: Optional[str] = None
    merchant_session: Optional[str] = None
    language: Optional[str] = None
    currency: Optional[str] = None
    timestamp: Optional[str] = None  # "YYYY-MM-DD HH:MM:SS"

    @property
    def kind(self) -> TransactionKind:
        return _KIND_BY_DETAILS[type(self.details)]


@dataclass(frozen=True)
class OutboundFieldSet:
    """Signed form fields and the URL the browser must POST them to"""

    submission_url: str
    fields: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_dict(self) -> Dict[str, Any]:
        return {"submission_url": self.submission_url, "fields": dict(self.fields)}


@dataclass
class ResponseOutcome:
    """Output of callback classification"""

    status: OutcomeStatus
    message: str
    data: Dict[str, Any]
    dcc: Optional[Dict[str, Any]] = None
    detail: Optional[str] = None
    received_fingerprint: Optional[str] = None
    computed_fingerprint: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def requires_reconciliation(self) -> bool:
        """Gateway reported approval but authenticity could not be confirmed"""
        return self.status is OutcomeStatus.TAMPERED

    @property
    def debug(self) -> Dict[str, str]:
        if self.status is not OutcomeStatus.TAMPERED:
            return {}
        return {
            "received": self.received_fingerprint or "",
            "calculated": self.computed_fingerprint or "",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "success": self.succeeded,
            "data": dict(self.data),
            "dcc": self.dcc,
            "detail": self.detail,
            "debug": self.debug or None,
        }
