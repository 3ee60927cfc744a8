"""
Cadence argument values.

Transactions and scripts take typed arguments. This module defines the
handful of Cadence types the demo passes around and their JSON-Cadence
encoding, which is what the Flow CLI accepts through ``--args-json``.

Decoding goes the other way and turns a script result back into plain
Python values:
- Int/UInt/Word types -> int
- Fix64/UFix64 -> Decimal
- Array -> list, Dictionary -> dict
- Struct/Resource/Event -> dict of field name to value
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Union


# =============================================================================
# Constants
# =============================================================================

UFIX64_DECIMALS = 8
UFIX64_SCALE = 10**UFIX64_DECIMALS
UFIX64_MAX = Decimal(2**64 - 1) / UFIX64_SCALE   # 184467440737.09551615

UINT64_MAX = 2**64 - 1

ADDRESS_LENGTH = 8  # bytes

_ADDRESS_RE = re.compile(r"^(0x)?[0-9a-fA-F]{1,16}$")

_INTEGER_TYPES = {
    "Int", "Int8", "Int16", "Int32", "Int64", "Int128", "Int256",
    "UInt", "UInt8", "UInt16", "UInt32", "UInt64", "UInt128", "UInt256",
    "Word8", "Word16", "Word32", "Word64",
}
_FIXED_POINT_TYPES = {"Fix64", "UFix64"}
_COMPOSITE_TYPES = {"Struct", "Resource", "Event", "Contract", "Enum"}


# =============================================================================
# Value Types
# =============================================================================


@dataclass(frozen=True)
class UFix64:
    """Unsigned fixed-point number with 8 decimal places."""
    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            raise ValueError(f"UFix64 value must be a Decimal, got {type(self.value).__name__}")
        if not self.value.is_finite():
            raise ValueError(f"UFix64 value must be finite, got {self.value}")
        if self.value < 0:
            raise ValueError(f"UFix64 value must be non-negative, got {self.value}")
        if self.value > UFIX64_MAX:
            raise ValueError(f"UFix64 value exceeds {UFIX64_MAX}, got {self.value}")
        exponent = self.value.normalize().as_tuple().exponent
        if isinstance(exponent, int) and -exponent > UFIX64_DECIMALS:
            raise ValueError(
                f"UFix64 supports at most {UFIX64_DECIMALS} decimal places, got {self.value}"
            )

    def __str__(self) -> str:
        return f"{self.value:.{UFIX64_DECIMALS}f}"

    def to_json(self) -> Dict[str, str]:
        return {"type": "UFix64", "value": str(self)}


@dataclass(frozen=True)
class UInt64:
    """Unsigned 64-bit integer."""
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"UInt64 value must be an int, got {type(self.value).__name__}")
        if not 0 <= self.value <= UINT64_MAX:
            raise ValueError(f"UInt64 value out of range [0, {UINT64_MAX}], got {self.value}")

    def __str__(self) -> str:
        return str(self.value)

    def to_json(self) -> Dict[str, str]:
        return {"type": "UInt64", "value": str(self.value)}


@dataclass(frozen=True)
class Address:
    """
    Account address.

    Stored as ``0x`` followed by 16 lowercase hex digits; shorter inputs
    are left-padded with zeros.
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not _ADDRESS_RE.match(self.value):
            raise ValueError(f"Invalid address: {self.value!r}")
        digits = self.value[2:] if self.value.startswith("0x") else self.value
        object.__setattr__(self, "value", "0x" + digits.lower().zfill(ADDRESS_LENGTH * 2))

    def __str__(self) -> str:
        return self.value

    @property
    def hex(self) -> str:
        """Address without the 0x prefix."""
        return self.value[2:]

    def to_json(self) -> Dict[str, str]:
        return {"type": "Address", "value": self.value}


@dataclass(frozen=True)
class String:
    """Cadence string."""
    value: str

    def __str__(self) -> str:
        return self.value

    def to_json(self) -> Dict[str, str]:
        return {"type": "String", "value": self.value}


CadenceValue = Union[UFix64, UInt64, Address, String]


# =============================================================================
# Helpers
# =============================================================================


def ufix(text: Union[str, int, Decimal]) -> UFix64:
    """
    Parse a decimal string into a UFix64.

    Args:
        text: Decimal literal such as "100000.0"

    Returns:
        UFix64 value

    Raises:
        ValueError: If the literal is malformed or out of range
    """
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid UFix64 literal: {text!r}") from None
    return UFix64(amount)


def encode_arguments(args) -> List[Dict[str, Any]]:
    """Encode a sequence of values as a JSON-Cadence argument list."""
    return [arg.to_json() for arg in args]


def decode_value(data: Any) -> Any:
    """
    Decode a JSON-Cadence value into plain Python.

    Unknown types are returned with their raw ``value`` payload.
    """
    if not isinstance(data, dict) or "type" not in data:
        return data

    kind = data["type"]
    value = data.get("value")

    if kind == "Optional":
        return decode_value(value) if value is not None else None
    if kind == "Void":
        return None
    if kind in ("Bool", "String", "Character"):
        return value
    if kind == "Address":
        return Address(value)
    if kind in _INTEGER_TYPES:
        return int(value)
    if kind in _FIXED_POINT_TYPES:
        return Decimal(value)
    if kind == "Array":
        return [decode_value(item) for item in value]
    if kind == "Dictionary":
        decoded = {}
        for entry in value:
            key = decode_value(entry["key"])
            if isinstance(key, Address):
                key = key.value
            decoded[key] = decode_value(entry["value"])
        return decoded
    if kind in _COMPOSITE_TYPES:
        return {
            field["name"]: decode_value(field["value"])
            for field in value.get("fields", [])
        }

    return value
