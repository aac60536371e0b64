"""Merchant-side client for the Vinti4Net card payment gateway"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from vinti4_gateway.config import Settings
from vinti4_gateway.domain.exceptions import ConfigurationError, EncodingError, MissingFieldError, ValidationError
from vinti4_gateway.domain.models import (
    BillingDocument,
    Credentials,
    OutboundFieldSet,
    PurchaseDetails,
    RechargeDetails,
    ResponseFlow,
    ResponseOutcome,
    ReversalDetails,
    ServicePaymentDetails,
    TransactionDetails,
    TransactionRequest,
)
from vinti4_gateway.domain.responses import classify_response
from vinti4_gateway.domain.transactions import (
    DEFAULT_CURRENCY,
    DEFAULT_ENDPOINT,
    DEFAULT_LANGUAGE,
    build_transaction,
)
from vinti4_gateway.infrastructure.observability.logging import log_outcome, log_request_built
from vinti4_gateway.infrastructure.observability.metrics import (
    record_outcome,
    record_request_built,
    record_request_rejected,
)

Amount = Union[Decimal, int, float, str]


class Vinti4Client:
    """
    Builds signed payment/reversal requests and verifies gateway callbacks.

    Holds only the immutable credential pair and defaults, so one instance
    can serve concurrent requests.
    """

    def __init__(
        self,
        pos_id: str,
        pos_auth_code: str,
        endpoint: str | None = None,
        currency: str = DEFAULT_CURRENCY,
        language: str = DEFAULT_LANGUAGE,
    ):
        if not pos_id or not pos_auth_code:
            raise ConfigurationError("Gateway credentials (posID / posAutCode) are not configured")
        self.credentials = Credentials(pos_id=pos_id, pos_auth_code=pos_auth_code)
        self.endpoint = endpoint or DEFAULT_ENDPOINT
        self.currency = currency
        self.language = language

    @classmethod
    def from_settings(cls, settings: Settings) -> "Vinti4Client":
        return cls(
            pos_id=settings.pos_id,
            pos_auth_code=settings.pos_auth_code.get_secret_value(),
            endpoint=settings.endpoint,
            currency=settings.currency,
            language=settings.language,
        )

    def _request(
        self,
        amount: Amount,
        response_url: str,
        details: TransactionDetails,
        merchant_ref: Optional[str] = None,
        merchant_session: Optional[str] = None,
        language: Optional[str] = None,
        currency: Optional[str] = None,
        timestamp: Optional[str] = None,
    ) -> TransactionRequest:
        return TransactionRequest(
            amount=amount,
            response_url=response_url,
            details=details,
            merchant_ref=merchant_ref,
            merchant_session=merchant_session,
            language=language or self.language,
            currency=currency or self.currency,
            timestamp=timestamp,
        )

    def purchase(
        self,
        amount: Amount,
        response_url: str,
        billing: Union[BillingDocument, Mapping[str, Any], None] = None,
        **extra: Any,
    ) -> TransactionRequest:
        """Purchase (code 1). Billing may be a BillingDocument or a map of gateway field names."""
        if billing is not None and not isinstance(billing, BillingDocument):
            billing = BillingDocument.from_mapping(billing)
        return self._request(amount, response_url, PurchaseDetails(billing=billing), **extra)

    def service_payment(
        self, amount: Amount, response_url: str, entity_code: str, reference_number: str, **extra: Any
    ) -> TransactionRequest:
        """Service payment (code 2) to an entity/reference pair"""
        return self._request(amount, response_url, ServicePaymentDetails(entity_code, reference_number), **extra)

    def recharge(
        self, amount: Amount, response_url: str, entity_code: str, reference_number: str, **extra: Any
    ) -> TransactionRequest:
        """Top-up (code 3): entity_code is the operator, reference_number the phone number"""
        return self._request(amount, response_url, RechargeDetails(entity_code, reference_number), **extra)

    def reversal(
        self,
        amount: Amount,
        response_url: str,
        clearing_period: str,
        transaction_id: str,
        merchant_ref: str,
        merchant_session: str,
        **extra: Any,
    ) -> TransactionRequest:
        """Reversal (code 4) of a completed transaction, identified by its original references"""
        return self._request(
            amount,
            response_url,
            ReversalDetails(clearing_period, transaction_id),
            merchant_ref=merchant_ref,
            merchant_session=merchant_session,
            **extra,
        )

    def build(self, request: TransactionRequest, now: datetime | None = None) -> OutboundFieldSet:
        """
        Sign a request.

        Raises:
            ValidationError: Required input missing (billing, kind-specific fields)
            EncodingError: Sub-document or amount cannot be encoded
            MissingFieldError: Fingerprint input absent
        """
        try:
            field_set = build_transaction(self.credentials, request, self.endpoint, now)
        except ValidationError:
            record_request_rejected("validation")
            raise
        except EncodingError:
            record_request_rejected("encoding")
            raise
        except MissingFieldError:
            record_request_rejected("missing_field")
            raise

        kind = request.kind.name.lower()
        record_request_built(kind)
        log_request_built(
            self.credentials.pos_id,
            kind,
            field_set.fields["merchantRef"],
            field_set.fields["merchantSession"],
        )
        return field_set

    def classify(self, data: Mapping[str, Any], flow: ResponseFlow = ResponseFlow.PAYMENT) -> ResponseOutcome:
        outcome = classify_response(self.credentials, data, flow)
        record_outcome(flow.value, outcome.status.value)
        log_outcome(flow, outcome)
        return outcome

    def process_response(self, data: Mapping[str, Any]) -> ResponseOutcome:
        """Classify a payment callback (purchase, service payment, recharge)"""
        return self.classify(data, ResponseFlow.PAYMENT)

    def process_reversal_response(self, data: Mapping[str, Any]) -> ResponseOutcome:
        return self.classify(data, ResponseFlow.REVERSAL)
