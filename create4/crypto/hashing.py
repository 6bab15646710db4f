"""
Hashing Utilities
Keccak-256 primitives and hex helpers shared by the leaf encoder, the Merkle
tree and the address deriver.

This module provides:
- keccak256 for raw bytes
- hash_pair: keccak256(a ‖ b) over two 32-byte words
- commutative_hash: hash_pair over the two words sorted ascending
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- keccak256 is the Ethereum variant (pre-NIST padding), not hashlib.sha3_256
- Words are compared as unsigned big-endian integers, which for equal-length
  byte strings is the same as lexicographic bytes comparison
"""
from __future__ import annotations

from eth_utils import decode_hex, is_hex, keccak

from create4.schemas.errors import EncodingException


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def hash_pair(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences: keccak256(left ‖ right).

    Used for leaf hashes (prefix ‖ initCodeHash) and deployment salts
    (root ‖ salt), where argument order is significant.
    """
    return keccak256(left + right)


def commutative_hash(a: bytes, b: bytes) -> bytes:
    """
    Hash two nodes in sorted order so the result ignores argument order.

    commutative_hash(a, b) == commutative_hash(b, a) for all inputs, which
    keeps a proof valid however its siblings were presented left/right.

    Args:
        a: First 32-byte node
        b: Second 32-byte node

    Returns:
        32-byte parent node
    """
    if a < b:
        return hash_pair(a, b)
    return hash_pair(b, a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(
    hex_string: str,
    expected_length: int | None = None,
    field_name: str = "hex value",
) -> bytes:
    """
    Convert a 0x-prefixed hexadecimal string to bytes.

    Args:
        hex_string: Hex string with 0x (or 0X) prefix
        expected_length: If given, the exact number of decoded bytes required
        field_name: Name used in error messages

    Returns:
        Decoded bytes

    Raises:
        EncodingException: If the prefix is missing, the length is odd,
            the string contains non-hex characters, or the decoded length
            differs from expected_length. Values are never truncated or padded.
    """
    if not isinstance(hex_string, str):
        raise EncodingException(
            f"{field_name} must be provided as a string",
            field_name=field_name,
        )

    if not hex_string.startswith(("0x", "0X")):
        raise EncodingException(
            f"{field_name} must start with '0x' prefix, got: {hex_string[:10]}...",
            field_name=field_name,
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise EncodingException(
            f"{field_name} must have even length after 0x prefix, "
            f"got length {len(hex_content)}",
            field_name=field_name,
        )

    # embedded whitespace counts as invalid
    if not is_hex(hex_string):
        raise EncodingException(
            f"Invalid hex characters in {field_name}: {hex_string[:20]}",
            field_name=field_name,
        )

    data = decode_hex(hex_string)

    if expected_length is not None and len(data) != expected_length:
        raise EncodingException(
            f"Expected {expected_length} bytes for {field_name} but received {len(data)}",
            field_name=field_name,
            details={"expected_length": expected_length, "actual_length": len(data)},
        )

    return data


def as_bytes(value: bytes | str, expected_length: int | None = None, field_name: str = "hex value") -> bytes:
    """Accept raw bytes or 0x-hex and return bytes of the expected length."""
    if isinstance(value, (bytes, bytearray)):
        if expected_length is not None and len(value) != expected_length:
            raise EncodingException(
                f"Expected {expected_length} bytes for {field_name} but received {len(value)}",
                field_name=field_name,
            )
        return bytes(value)
    if isinstance(value, str):
        value = value.strip()
    return from_hex(value, expected_length, field_name)


__all__ = [
    "keccak256",
    "hash_pair",
    "commutative_hash",
    "to_hex",
    "from_hex",
    "as_bytes",
]
