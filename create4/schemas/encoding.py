"""
Schemas & Encoding
File: encoding.py

Purpose: Parse plan inputs at the boundary. Chain ids arrive as native
integers, decimal strings or 0x-hex strings and leave this module as Python
ints in the uint64 range; bytecode, salts and addresses leave it as
lowercase 0x-prefixed hex.

Output always renders chain ids as decimal strings so that hosts with
limited integer width never lose precision.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, TypeVar

from eth_utils import is_hex_address, to_normalized_address

from .errors import EncodingException, PlanValidationException


UINT64_MAX: int = (1 << 64) - 1

ZERO_SALT: str = "0x" + "00" * 32

HEX_BODY_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
DECIMAL_PATTERN = re.compile(r"^-?[0-9]+$")
SALT_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
WHITESPACE_PATTERN = re.compile(r"\s+")

T = TypeVar("T")


# =============================================================================
# Chain ids
# =============================================================================

def _parse_chain_id_string(value: str, field_name: str) -> int:
    trimmed = value.strip()
    if not trimmed:
        raise EncodingException(f"{field_name} cannot be empty", field_name=field_name)

    if trimmed.startswith(("0x", "0X")):
        body = trimmed[2:]
        if not body or not HEX_BODY_PATTERN.match(body):
            raise EncodingException(f"invalid {field_name}: {value}", field_name=field_name)
        return int(body, 16)

    if not DECIMAL_PATTERN.match(trimmed):
        raise EncodingException(f"invalid {field_name}: {value}", field_name=field_name)
    return int(trimmed, 10)


def normalize_chain_id(value: Any, field_name: str = "chain id") -> int:
    """
    Normalize a chain id from any accepted representation to an int.

    Accepted: int (not bool), integral float, decimal string (leading zeros
    allowed), 0x-prefixed hex string. Surrounding whitespace is ignored.

    Raises:
        EncodingException: value is missing, empty or not an integer
        PlanValidationException: value is outside [0, 2**64 - 1]

    Example:
        >>> normalize_chain_id("0x0a") == normalize_chain_id("00010") == 10
        True
    """
    if value is None:
        raise EncodingException(f"{field_name} is required", field_name=field_name)

    if isinstance(value, bool):
        raise EncodingException(
            f"{field_name} must be an integer or string", field_name=field_name
        )

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise EncodingException(f"{field_name} must be an integer", field_name=field_name)
        parsed = int(value)
    elif isinstance(value, str):
        parsed = _parse_chain_id_string(value, field_name)
    else:
        raise EncodingException(
            f"{field_name} must be an integer or string", field_name=field_name
        )

    if parsed < 0 or parsed > UINT64_MAX:
        raise PlanValidationException(f"{field_name} must fit within uint64")
    return parsed


def chain_id_to_json(value: Any) -> str:
    """Render a chain id as its canonical decimal string."""
    return str(normalize_chain_id(value))


def sort_chains_by_id(
    entries: Iterable[T],
    key: Callable[[T], Any] = lambda entry: entry["chainId"],  # type: ignore[index]
) -> list[T]:
    """
    Return entries sorted ascending by normalized chain id.

    The sort is stable, so different encodings of the same id keep their
    relative order.
    """
    return sorted(entries, key=lambda entry: normalize_chain_id(key(entry)))


# =============================================================================
# Hex, bytecode, salts, addresses
# =============================================================================

def normalize_hex_string(
    value: Any,
    field_name: str = "hex value",
    *,
    allow_empty: bool = False,
    strip_whitespace: bool = False,
    strip_quotes: bool = False,
) -> str:
    """
    Normalize a hex string to lowercase with a 0x prefix.

    The prefix is optional on input. Odd-length bodies and non-hex
    characters are rejected rather than padded.
    """
    if not isinstance(value, str):
        raise EncodingException(
            f"{field_name} must be provided as a string", field_name=field_name
        )

    normalized = value.strip()
    if (
        strip_quotes
        and len(normalized) >= 2
        and normalized[0] == normalized[-1]
        and normalized[0] in ("'", '"')
    ):
        normalized = normalized[1:-1].strip()
    if strip_whitespace:
        normalized = WHITESPACE_PATTERN.sub("", normalized)
    if normalized.startswith(("0x", "0X")):
        normalized = normalized[2:]

    if not normalized:
        if allow_empty:
            return "0x"
        raise EncodingException(f"{field_name} cannot be empty", field_name=field_name)
    if not HEX_BODY_PATTERN.match(normalized):
        raise EncodingException(f"{field_name} must be a hex string", field_name=field_name)
    if len(normalized) % 2 != 0:
        raise EncodingException(f"{field_name} hex length must be even", field_name=field_name)
    return "0x" + normalized.lower()


def normalize_bytecode(value: Any, field_name: str = "bytecode") -> str:
    """Normalize init code, tolerating embedded whitespace and wrapping quotes."""
    return normalize_hex_string(
        value, field_name, strip_whitespace=True, strip_quotes=True
    )


def bytecode_to_bytes(value: Any, field_name: str = "bytecode") -> bytes:
    """Decode init code given in any accepted hex form."""
    return bytes.fromhex(normalize_bytecode(value, field_name)[2:])


def normalize_salt_hex(value: Any) -> str:
    """
    Validate a user salt: exactly 32 bytes, 0x-prefixed, lowercased.
    """
    if not isinstance(value, str):
        raise EncodingException("salt must be provided as a string", field_name="salt")
    normalized = value.strip()
    if not SALT_PATTERN.match(normalized):
        raise EncodingException(
            "salt must be a 32-byte hex value prefixed with 0x", field_name="salt"
        )
    return normalized.lower()


def get_salt_hex(spec_salt: Any = None, override: Any = None) -> str:
    """
    Resolve the salt for an operation.

    An explicit override wins, then a non-blank salt from the plan spec. Only when
    both are absent does the all-zero salt apply.
    """
    if override is not None:
        return normalize_salt_hex(str(override))
    if isinstance(spec_salt, str) and spec_salt.strip():
        return normalize_salt_hex(spec_salt)
    if spec_salt is not None and not isinstance(spec_salt, str):
        raise EncodingException("salt must be provided as a string", field_name="salt")
    return ZERO_SALT


def normalize_address(value: Any) -> str:
    """Validate a 0x-prefixed 20-byte address and return it lowercased."""
    if not isinstance(value, str):
        raise EncodingException("address must be a hex string", field_name="address")
    stripped = value.strip()
    if not stripped.startswith(("0x", "0X")) or not is_hex_address(stripped):
        raise EncodingException(f"invalid address: {value}", field_name="address")
    return to_normalized_address(stripped)


__all__ = [
    "UINT64_MAX",
    "ZERO_SALT",
    "normalize_chain_id",
    "chain_id_to_json",
    "sort_chains_by_id",
    "normalize_hex_string",
    "normalize_bytecode",
    "bytecode_to_bytes",
    "normalize_salt_hex",
    "get_salt_hex",
    "normalize_address",
]
