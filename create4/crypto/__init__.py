"""
Core cryptographic utilities.

Keccak-256 hashing and the two node-combination rules used by deployment
plans: ordered pair hashing and commutative (sorted) pair hashing.
"""
from .hashing import (
    keccak256,
    hash_pair,
    commutative_hash,
    to_hex,
    from_hex,
    as_bytes,
)

__all__ = [
    "keccak256",
    "hash_pair",
    "commutative_hash",
    "to_hex",
    "from_hex",
    "as_bytes",
]
