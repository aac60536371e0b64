"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from vinti4_gateway.domain.models import OutcomeStatus, ResponseFlow, ResponseOutcome


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "vinti4-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_request_built(pos_id: str, kind: str, merchant_ref: str, merchant_session: str) -> None:
    """Log a signed outbound request (never the secret or the fingerprint)"""
    logging.info(
        "Transaction request built",
        extra={
            "pos_id": pos_id,
            "step": "request_built",
            "transaction_kind": kind,
            "merchant_ref": merchant_ref,
            "merchant_session": merchant_session,
        },
    )


def log_outcome(flow: ResponseFlow, outcome: ResponseOutcome) -> None:
    """Log callback verdict; tampered callbacks are raised to WARNING for reconciliation"""
    extra = {
        "step": "callback_classified",
        "flow": flow.value,
        "status": outcome.status.value,
        "merchant_ref": outcome.data.get("merchantRespMerchantRef", ""),
        "message_type": outcome.data.get("messageType", ""),
    }
    if outcome.status is OutcomeStatus.TAMPERED:
        logging.warning("Callback fingerprint mismatch", extra=extra)
    else:
        logging.info("Callback classified", extra=extra)
