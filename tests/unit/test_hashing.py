"""
Hashing Unit Tests
Tests for create4/crypto/hashing.py

Covers:
1. keccak256 matches known Ethereum vectors (not NIST SHA3)
2. hash_pair is order-sensitive
3. commutative_hash ignores argument order
4. Hex helpers round-trip and reject malformed input
"""
import hashlib

import pytest

from create4.crypto.hashing import (
    as_bytes,
    commutative_hash,
    from_hex,
    hash_pair,
    keccak256,
    to_hex,
)
from create4.schemas.errors import EncodingException


class TestKeccak256:
    """Tests for the keccak256 primitive."""

    def test_empty_input_vector(self):
        """keccak256(b"") matches the well-known Ethereum value."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_abc_vector(self):
        assert keccak256(b"abc").hex() == (
            "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45"
        )

    def test_differs_from_nist_sha3(self):
        """Keccak padding differs from the standardized SHA3-256."""
        assert keccak256(b"abc") != hashlib.sha3_256(b"abc").digest()

    def test_output_is_32_bytes(self):
        assert len(keccak256(b"some data")) == 32


class TestPairHashing:
    """Tests for ordered and commutative pair hashing."""

    def test_hash_pair_is_concatenation_hash(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        assert hash_pair(a, b) == keccak256(a + b)

    def test_hash_pair_order_matters(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        assert hash_pair(a, b) != hash_pair(b, a)

    @pytest.mark.parametrize("seed_a,seed_b", [(b"x", b"y"), (b"1", b"2"), (b"same", b"same")])
    def test_commutative_hash_symmetric(self, seed_a, seed_b):
        """combine(a, b) == combine(b, a)."""
        a = keccak256(seed_a)
        b = keccak256(seed_b)
        assert commutative_hash(a, b) == commutative_hash(b, a)

    def test_commutative_hash_sorts_ascending(self):
        low = bytes(31) + b"\x01"
        high = b"\xff" + bytes(31)
        assert commutative_hash(high, low) == hash_pair(low, high)

    def test_commutative_hash_of_self(self):
        """A node paired with itself hashes node ‖ node."""
        a = keccak256(b"lonely")
        assert commutative_hash(a, a) == keccak256(a + a)


class TestHexHelpers:
    """Tests for to_hex/from_hex/as_bytes."""

    def test_to_hex_lowercase_prefixed(self):
        assert to_hex(bytes.fromhex("DEADBEEF")) == "0xdeadbeef"

    def test_from_hex_accepts_uppercase_prefix(self):
        assert from_hex("0XABCD") == b"\xab\xcd"

    def test_from_hex_roundtrip(self):
        data = keccak256(b"roundtrip")
        assert from_hex(to_hex(data), 32) == data

    def test_from_hex_missing_prefix(self):
        with pytest.raises(EncodingException, match="0x"):
            from_hex("abcd")

    def test_from_hex_odd_length(self):
        with pytest.raises(EncodingException, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_characters(self):
        with pytest.raises(EncodingException, match="Invalid hex"):
            from_hex("0xzz")

    @pytest.mark.parametrize("value", ["0x12  34", "0x12\t34", "0x 1234 "])
    def test_from_hex_rejects_embedded_whitespace(self, value):
        """Whitespace between byte pairs is malformed input, not padding."""
        with pytest.raises(EncodingException, match="Invalid hex"):
            from_hex(value)

    def test_as_bytes_rejects_spaced_salt(self):
        salt = "0x" + "00" * 16 + "  " + "00" * 16
        with pytest.raises(EncodingException, match="Invalid hex"):
            as_bytes(salt, 32, "salt")

    def test_from_hex_wrong_length_not_padded(self):
        """Fixed-width values are never zero-padded."""
        with pytest.raises(EncodingException, match="Expected 32 bytes"):
            from_hex("0x" + "00" * 31, 32, "salt")

    def test_from_hex_non_string(self):
        with pytest.raises(EncodingException, match="must be provided as a string"):
            from_hex(1234)

    def test_as_bytes_accepts_bytes_and_hex(self):
        word = keccak256(b"w")
        assert as_bytes(word, 32) == word
        assert as_bytes("  " + to_hex(word) + "  ", 32) == word

    def test_as_bytes_rejects_wrong_length_bytes(self):
        with pytest.raises(EncodingException, match="Expected 20 bytes"):
            as_bytes(b"\x00" * 19, 20, "factory address")
