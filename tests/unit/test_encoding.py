"""Unit tests for canonical value encoding"""

import base64
import json
import pytest
from decimal import Decimal

from vinti4_gateway.domain.encoding import (
    compact_payload,
    decode_document,
    encode_document,
    format_amount,
    numeric_or_empty,
    to_minor_units,
    whole_units,
)
from vinti4_gateway.domain.exceptions import EncodingError


@pytest.mark.parametrize(
    "amount, expected",
    [
        ("1000.00", "1000000"),
        (1000, "1000000"),
        (Decimal("1000"), "1000000"),
        ("1000.01", "1000010"),
        ("0.29", "290"),  # exact in Decimal, 289.99... in binary floats
        ("12.3456", "12345"),  # truncated toward zero
    ],
)
def test_to_minor_units(amount, expected):
    """Amounts hash as integer thousandths"""
    assert to_minor_units(amount) == expected


def test_to_minor_units_rejects_garbage():
    with pytest.raises(EncodingError):
        to_minor_units("abc")
    with pytest.raises(EncodingError):
        to_minor_units("NaN")


@pytest.mark.parametrize("amount", ["1e5000", "1e999999", "-1e40", "1000000000000000"])
def test_amount_out_of_range_is_an_encoding_error(amount):
    """Oversized amounts are refused before any integer conversion"""
    for encode in (to_minor_units, format_amount, whole_units):
        with pytest.raises(EncodingError):
            encode(amount)


def test_format_amount_strips_trailing_zeros():
    assert format_amount("1000.00") == "1000"
    assert format_amount("1000.50") == "1000.5"
    assert format_amount(150) == "150"


def test_whole_units_truncates():
    assert whole_units("1500.99") == "1500"


@pytest.mark.parametrize(
    "value, expected",
    [(None, ""), ("", ""), ("0", ""), (0, ""), ("00", "0"), ("00123", "123"), (456, "456"), (" 7 ", "7")],
)
def test_numeric_or_empty(value, expected):
    """Missing numeric fields contribute '' (never '0' or 'null')"""
    assert numeric_or_empty(value) == expected


@pytest.mark.parametrize("value", ["12abc", "+12", "-5", "1_000", "1.5", "\u0661\u0662"])
def test_numeric_or_empty_rejects_non_digits(value):
    with pytest.raises(EncodingError):
        numeric_or_empty(value)


def test_compact_payload_keeps_numeric_zero():
    payload = {"a": "", "b": None, "c": 0, "d": "0", "e": {}, "f": {"x": 1}, "g": False}
    assert compact_payload(payload) == {"c": 0, "d": "0", "f": {"x": 1}}


def test_encode_document_does_not_escape_slashes_or_unicode():
    encoded = encode_document({"billAddrLine1": "Rua Amílcar Cabral 10/2", "empty": ""})
    raw = base64.b64decode(encoded).decode("utf-8")

    assert raw == '{"billAddrLine1":"Rua Amílcar Cabral 10/2"}'
    assert decode_document(encoded) == json.loads(raw)


def test_encode_document_unserializable_value():
    with pytest.raises(EncodingError):
        encode_document({"email": object()})
