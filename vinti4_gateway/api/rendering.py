"""HTML for the browser hand-off form and the payment receipt"""

from decimal import Decimal, InvalidOperation
from html import escape
from typing import Any

from vinti4_gateway.domain.models import OutboundFieldSet, OutcomeStatus, ResponseOutcome

STATUS_LABELS = {
    OutcomeStatus.SUCCESS: "Transaction successful",
    OutcomeStatus.CANCELLED: "Transaction cancelled by the cardholder",
    OutcomeStatus.TAMPERED: "Invalid fingerprint - pending reconciliation",
    OutcomeStatus.FAILURE: "Transaction failed",
    OutcomeStatus.UNRECOGNIZED: "No response from the gateway",
}


def _e(value: Any) -> str:
    return escape("" if value is None else str(value), quote=True)


def render_payment_form(field_set: OutboundFieldSet, title: str = "Vinti4Net payment") -> str:
    """Auto-submitting form that posts the signed fields to the gateway"""
    inputs = "\n".join(
        f"<input type='hidden' name='{_e(name)}' value='{_e(value)}'>" for name, value in field_set.fields.items()
    )
    return (
        "<html>"
        f"<head><title>{_e(title)}</title></head>"
        "<body onload='document.forms[0].submit()'>"
        "<div><h5>Processing payment... please wait.</h5>"
        f"<form action='{_e(field_set.submission_url)}' method='post'>\n{inputs}\n</form>"
        "</div></body></html>"
    )


def _format_amount(raw: Any) -> str:
    try:
        value = Decimal(str(raw or "0"))
    except InvalidOperation:
        value = Decimal("0")
    # 1.234,56 style used on gateway receipts
    return f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")


def render_receipt(outcome: ResponseOutcome) -> str:
    """Receipt for a classified callback; every gateway value is escaped"""
    data = outcome.data
    dcc = outcome.dcc or {}
    currency = data.get("merchantRespPurchaseCurrency") or "CVE"
    colour = "#28a745" if outcome.succeeded else "#dc3545"

    parts = [
        "<div class='vinti4-receipt' style='font-family:Arial,sans-serif;max-width:600px;margin:auto;'>",
        f"<h2 style='text-align:center;color:{colour};'>Payment receipt</h2>",
        f"<p><strong>Status:</strong> {_e(STATUS_LABELS[outcome.status])}</p>",
    ]
    if outcome.status in (OutcomeStatus.FAILURE, OutcomeStatus.TAMPERED):
        failure = " ".join(
            _e(data.get(key))
            for key in ("merchantRespErrorDescription", "merchantRespErrorDetail", "merchantRespAdditionalErrorMessage")
            if data.get(key)
        )
        parts.append(f"<p style='color:#dc3545;'><strong>Failure:</strong> {failure or _e(outcome.message)}</p>")
    else:
        parts.append(f"<p><strong>Message:</strong> {_e(outcome.message)}</p>")

    parts += [
        "<hr>",
        f"<p><strong>Reference:</strong> {_e(data.get('merchantRespMerchantRef'))}</p>",
        f"<p><strong>Amount:</strong> {_format_amount(data.get('merchantRespPurchaseAmount'))} {_e(currency)}</p>",
        f"<p><strong>Session:</strong> {_e(data.get('merchantRespMerchantSession'))}</p>",
    ]

    if dcc:
        dcc_currency = _e(dcc.get("currency", ""))
        parts += [
            "<hr>",
            "<h3>Dynamic Currency Conversion (DCC)</h3>",
            f"<p><strong>Amount:</strong> {_e(dcc.get('amount', 0))} {dcc_currency}</p>",
            f"<p><strong>Rate:</strong> 1 {dcc_currency} = {_e(dcc.get('rate', 0))} {_e(currency)}</p>",
            f"<p><strong>Markup:</strong> {_e(dcc.get('markup', 0))} {dcc_currency}</p>",
        ]

    parts.append("</div>")
    return "".join(parts)
