"""
Leaf Encoding
Packs a leaf's (chainId, nextChainId, isFallback) triple into one 32-byte
word and hashes it together with the init code hash.

Prefix bit layout (big-endian uint256):
- bits [0..63]:    chainId of the leaf
- bits [64..127]:  nextChainId, the successor leaf in sorted order
- bit 248:         1 for the fallback leaf, 0 otherwise
All remaining bits are zero.

leafHash = keccak256(prefix ‖ keccak256(initCode))
"""
from __future__ import annotations

from typing import NamedTuple

from create4.crypto.hashing import hash_pair
from create4.schemas.encoding import UINT64_MAX
from create4.schemas.errors import EncodingException


PREFIX_LENGTH = 32

_CHAIN_ID_MASK = UINT64_MAX
_NEXT_CHAIN_ID_SHIFT = 64
_FALLBACK_BIT = 248
_USED_BITS = (
    _CHAIN_ID_MASK
    | (_CHAIN_ID_MASK << _NEXT_CHAIN_ID_SHIFT)
    | (1 << _FALLBACK_BIT)
)


class LeafPrefix(NamedTuple):
    """Decoded fields of a packed leaf prefix."""
    chain_id: int
    next_chain_id: int
    is_fallback: bool


def _require_uint64(value: int, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingException(f"{field_name} must be an integer", field_name=field_name)
    if value < 0 or value > UINT64_MAX:
        raise EncodingException(
            f"{field_name} must fit within uint64, got {value}",
            field_name=field_name,
        )
    return value


def pack_leaf_prefix(chain_id: int, next_chain_id: int, is_fallback: bool | int) -> bytes:
    """
    Pack a leaf prefix into its canonical 32-byte word.

    Args:
        chain_id: Leaf chain id (uint64)
        next_chain_id: Successor chain id (uint64)
        is_fallback: True/1 for the fallback leaf, False/0 otherwise

    Returns:
        32-byte big-endian prefix

    Raises:
        EncodingException: A chain id is outside uint64 or is_fallback is not 0/1
    """
    cid = _require_uint64(chain_id, "chain id")
    ncid = _require_uint64(next_chain_id, "next chain id")
    if is_fallback not in (0, 1):
        raise EncodingException("isFallback must be 0 or 1", field_name="is_fallback")

    word = (int(is_fallback) << _FALLBACK_BIT) | (ncid << _NEXT_CHAIN_ID_SHIFT) | cid
    return word.to_bytes(PREFIX_LENGTH, "big")


def unpack_leaf_prefix(prefix: bytes) -> LeafPrefix:
    """
    Decode a packed prefix. Exact inverse of pack_leaf_prefix.

    Raises:
        EncodingException: prefix is not 32 bytes or has bits set outside
            the chainId, nextChainId and fallback fields
    """
    if len(prefix) != PREFIX_LENGTH:
        raise EncodingException(
            f"Expected {PREFIX_LENGTH} bytes for leaf prefix but received {len(prefix)}",
            field_name="prefix",
        )
    word = int.from_bytes(prefix, "big")
    if word & ~_USED_BITS:
        raise EncodingException(
            "leaf prefix has reserved bits set", field_name="prefix"
        )
    return LeafPrefix(
        chain_id=word & _CHAIN_ID_MASK,
        next_chain_id=(word >> _NEXT_CHAIN_ID_SHIFT) & _CHAIN_ID_MASK,
        is_fallback=bool((word >> _FALLBACK_BIT) & 1),
    )


def compute_leaf_hash(prefix: bytes, init_code_hash: bytes) -> bytes:
    """leafHash = keccak256(prefix ‖ initCodeHash)."""
    return hash_pair(prefix, init_code_hash)


# The fallback leaf is the only leaf with chainId = nextChainId = 0 and the flag set.
FALLBACK_PREFIX: bytes = pack_leaf_prefix(0, 0, True)


__all__ = [
    "PREFIX_LENGTH",
    "LeafPrefix",
    "pack_leaf_prefix",
    "unpack_leaf_prefix",
    "compute_leaf_hash",
    "FALLBACK_PREFIX",
]
