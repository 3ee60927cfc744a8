"""
Unit tests for Cadence argument values.

Tests cover:
1. UFix64 parsing and range checks
2. UInt64 and Address validation
3. JSON-Cadence encoding
4. Decoding script results
"""

import pytest
from decimal import Decimal

from orbital.core.values import (
    Address,
    String,
    UFix64,
    UInt64,
    UFIX64_MAX,
    decode_value,
    encode_arguments,
    ufix,
)


class TestUFix64:
    """Tests for fixed-point amounts."""

    def test_parse_and_format(self):
        """Amounts are printed with eight decimal places."""
        assert str(ufix("60.0")) == "60.00000000"
        assert str(ufix("100000")) == "100000.00000000"

    def test_to_json(self):
        assert ufix("1000000.0").to_json() == {"type": "UFix64", "value": "1000000.00000000"}

    def test_accepts_max(self):
        assert ufix(str(UFIX64_MAX)).value == UFIX64_MAX

    @pytest.mark.parametrize("literal", [
        "abc",
        "",
        "-1.0",
        "0.000000001",
        "184467440737.09551616",
        "NaN",
    ])
    def test_rejects_invalid(self, literal):
        with pytest.raises(ValueError):
            ufix(literal)

    def test_requires_decimal(self):
        with pytest.raises(ValueError):
            UFix64(1.5)

    def test_equal_values(self):
        assert ufix("60.0") == ufix("60.00")


class TestUInt64:
    """Tests for unsigned integers."""

    def test_to_json(self):
        assert UInt64(8).to_json() == {"type": "UInt64", "value": "8"}

    @pytest.mark.parametrize("value", [-1, 2**64, True, "8"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            UInt64(value)


class TestAddress:
    """Tests for account addresses."""

    def test_normalizes_prefix_and_case(self):
        assert Address("01CF0E2F2F715450") == Address("0x01cf0e2f2f715450")
        assert Address("01CF0E2F2F715450").value == "0x01cf0e2f2f715450"

    def test_pads_short_addresses(self):
        assert Address("0x1").value == "0x0000000000000001"
        assert Address("0x1").hex == "0000000000000001"

    @pytest.mark.parametrize("value", ["0xzz", "0x" + "1" * 17, "", 42])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            Address(value)


class TestEncoding:
    """Tests for JSON-Cadence argument lists."""

    def test_encode_arguments(self):
        args = (Address("0x01cf0e2f2f715450"), UInt64(1), ufix("65.0"), String("hi"))
        assert encode_arguments(args) == [
            {"type": "Address", "value": "0x01cf0e2f2f715450"},
            {"type": "UInt64", "value": "1"},
            {"type": "UFix64", "value": "65.00000000"},
            {"type": "String", "value": "hi"},
        ]

    def test_encode_empty(self):
        assert encode_arguments(()) == []


class TestDecoding:
    """Tests for decoding script results."""

    def test_scalars(self):
        assert decode_value({"type": "UFix64", "value": "100000.00000000"}) == Decimal("100000")
        assert decode_value({"type": "UInt64", "value": "12"}) == 12
        assert decode_value({"type": "Bool", "value": True}) is True
        assert decode_value({"type": "String", "value": "orb"}) == "orb"
        assert decode_value({"type": "Address", "value": "0xf8d6e0586b0a20c7"}) == Address("0xf8d6e0586b0a20c7")

    def test_optional_and_void(self):
        assert decode_value({"type": "Optional", "value": None}) is None
        assert decode_value({"type": "Optional", "value": {"type": "UInt8", "value": "3"}}) == 3
        assert decode_value({"type": "Void"}) is None

    def test_array(self):
        data = {"type": "Array", "value": [
            {"type": "UInt64", "value": "1"},
            {"type": "UInt64", "value": "2"},
        ]}
        assert decode_value(data) == [1, 2]

    def test_dictionary_with_address_keys(self):
        data = {"type": "Dictionary", "value": [
            {
                "key": {"type": "Address", "value": "0x01cf0e2f2f715450"},
                "value": {"type": "UFix64", "value": "60.00000000"},
            },
        ]}
        assert decode_value(data) == {"0x01cf0e2f2f715450": Decimal("60")}

    def test_struct_fields(self):
        data = {"type": "Struct", "value": {
            "id": "A.01cf0e2f2f715450.OrbitalAuction.EpochInfo",
            "fields": [
                {"name": "epoch", "value": {"type": "UInt64", "value": "3"}},
                {"name": "balance", "value": {"type": "UFix64", "value": "1.50000000"}},
            ],
        }}
        assert decode_value(data) == {"epoch": 3, "balance": Decimal("1.5")}

    def test_passthrough(self):
        assert decode_value({"output": "text"}) == {"output": "text"}
        assert decode_value("plain") == "plain"

    def test_unknown_type_returns_raw_value(self):
        assert decode_value({"type": "Path", "value": {"domain": "storage"}}) == {"domain": "storage"}
