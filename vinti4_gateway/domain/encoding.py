"""Canonical encoding of values that take part in a fingerprint"""

import base64
import json
from decimal import Decimal, ROUND_DOWN
from typing import Any, Dict, Mapping

from vinti4_gateway.domain.exceptions import EncodingError

# Gateway fixed-point convention: amounts are hashed in thousandths
AMOUNT_SCALE = 1000

# Whole-unit digits accepted in an amount
MAX_AMOUNT_DIGITS = 15


def to_decimal(amount: Any) -> Decimal:
    """Parse an amount without going through binary floats"""
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount).strip())
        except (ArithmeticError, ValueError) as e:
            raise EncodingError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise EncodingError(f"Invalid amount: {amount!r}")
    if value and value.adjusted() >= MAX_AMOUNT_DIGITS:
        raise EncodingError(f"Amount out of range: {amount!r}")
    return value


def to_minor_units(amount: Any) -> str:
    """
    Amount as an integer number of thousandths, truncated toward zero.

    Example:
        1000.00 → "1000000", 1000 → "1000000", 1000.01 → "1000010"
    """
    scaled = to_decimal(amount) * AMOUNT_SCALE
    return str(int(scaled.to_integral_value(rounding=ROUND_DOWN)))


def format_amount(amount: Any) -> str:
    """Plain decimal string for the amount form field (1000.50 → "1000.5")"""
    value = to_decimal(amount)
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def whole_units(amount: Any) -> str:
    """Amount truncated to whole currency units (reversal requests)"""
    return str(int(to_decimal(amount).to_integral_value(rounding=ROUND_DOWN)))


def numeric_or_empty(value: Any) -> str:
    """
    Entity codes and reference numbers hash as integers without leading
    zeros. Missing, empty and "0" contribute the empty string; other
    all-zero values ("00") hash as "0".
    """
    if value is None:
        return ""
    text = str(value).strip()
    if text in ("", "0"):
        return ""
    # ASCII digits only: no sign, no underscores
    if not (text.isascii() and text.isdigit()):
        raise EncodingError(f"Expected a numeric value, got {value!r}")
    return str(int(text))


def text(value: Any) -> str:
    return "" if value is None else str(value)


def stripped(value: Any) -> str:
    return text(value).strip()


def _is_present(value: Any) -> bool:
    # bool first: True/False are ints in Python
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return value != ""
    return bool(value)


def compact_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only non-empty or numeric values"""
    return {key: value for key, value in payload.items() if _is_present(value)}


def encode_document(payload: Mapping[str, Any]) -> str:
    """Compact JSON (slashes and non-ASCII left as-is), Base64-encoded"""
    try:
        raw = json.dumps(compact_payload(payload), ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot serialize document: {e}") from e
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_document(encoded: str) -> Dict[str, Any]:
    """Inverse of encode_document, for inspection and tests"""
    return json.loads(base64.b64decode(encoded).decode("utf-8"))
