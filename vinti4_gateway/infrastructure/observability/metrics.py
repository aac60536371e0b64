"""Prometheus metrics for signed requests and callback verdicts"""

from prometheus_client import Counter, Histogram

# Outbound requests
request_built_counter = Counter(
    "vinti4_requests_built_total",
    "Signed transaction requests built",
    ["kind"],  # purchase | service_payment | recharge | reversal
)

request_rejected_counter = Counter(
    "vinti4_requests_rejected_total",
    "Transaction requests refused before signing",
    ["reason"],  # validation | encoding | missing_field
)

# Callbacks
callback_outcome_counter = Counter(
    "vinti4_callback_outcomes_total",
    "Classified gateway callbacks",
    ["flow", "status"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_request_built(kind: str) -> None:
    request_built_counter.labels(kind=kind).inc()


def record_request_rejected(reason: str) -> None:
    request_rejected_counter.labels(reason=reason).inc()


def record_outcome(flow: str, status: str) -> None:
    """Record callback verdicts; a rising tampered count needs manual reconciliation"""
    callback_outcome_counter.labels(flow=flow, status=status).inc()
