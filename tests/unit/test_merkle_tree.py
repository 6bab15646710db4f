"""
Merkle Tree Unit Tests
Tests for create4/merkle/merkle_tree.py

Required behavior:
1. Single leaf - root equals leaf, proof is empty
2. Padding - an unpaired last node is paired with itself at every layer
3. Proof verification - every index folds back to the root
4. Tamper detection - altered leaf or sibling folds elsewhere
5. Commutativity - sibling order inside the tree does not matter
"""
import pytest

from create4.crypto.hashing import commutative_hash, keccak256
from create4.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_merkle_proof,
    build_merkle_root,
    compute_tree_depth,
    process_proof,
    verify_leaf,
    verify_merkle_proof,
)


def _leaves(n: int) -> list[bytes]:
    return [keccak256(f"leaf-{i}".encode()) for i in range(n)]


class TestEmptyTree:
    """Tests for empty input."""

    def test_zero_leaves_rejected(self):
        with pytest.raises(ValueError, match="zero leaves"):
            MerkleTree([])

    def test_build_root_empty_raises(self):
        with pytest.raises(ValueError):
            build_merkle_root([])


class TestSingleLeaf:
    """Tests for single leaf tree behavior."""

    def test_single_leaf_root_equals_leaf(self):
        """Root of single-leaf tree equals the leaf itself."""
        leaf = keccak256(b"single leaf")
        assert build_merkle_root([leaf]) == leaf

    def test_single_leaf_proof_empty(self):
        leaf = keccak256(b"only one")
        proof = build_merkle_proof([leaf], 0)

        assert proof.siblings == ()
        assert proof.root == leaf
        assert verify_merkle_proof(proof)


class TestPadding:
    """Tests for the self-duplication padding rule."""

    def test_two_leaves(self):
        a, b = _leaves(2)
        assert build_merkle_root([a, b]) == commutative_hash(a, b)

    def test_three_leaves_duplicates_last(self):
        """[a, b, c] -> [H(a,b), H(c,c)] -> root."""
        a, b, c = _leaves(3)
        expected = commutative_hash(commutative_hash(a, b), commutative_hash(c, c))
        assert build_merkle_root([a, b, c]) == expected

    def test_five_leaves_duplicates_at_two_layers(self):
        """Layer 0 has 5 nodes and layer 1 has 3; both pad with self."""
        a, b, c, d, e = _leaves(5)
        l1 = [commutative_hash(a, b), commutative_hash(c, d), commutative_hash(e, e)]
        l2 = [commutative_hash(l1[0], l1[1]), commutative_hash(l1[2], l1[2])]
        assert build_merkle_root([a, b, c, d, e]) == commutative_hash(l2[0], l2[1])

    def test_unpaired_proof_uses_self_as_sibling(self):
        leaves = _leaves(5)
        tree = MerkleTree(leaves)
        proof = tree.get_proof(4)

        assert proof[0] == leaves[4]
        assert proof[1] == tree.layers[1][2]
        assert len(proof) == tree.depth == 3

    def test_differs_from_skip_odd_rule(self):
        """Promoting the odd node unchanged would give a different root."""
        a, b, c = _leaves(3)
        skip_rule_root = commutative_hash(commutative_hash(a, b), c)
        assert build_merkle_root([a, b, c]) != skip_rule_root


class TestProofs:
    """Tests for proof generation and verification."""

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 7, 8, 9])
    def test_every_index_verifies(self, n):
        leaves = _leaves(n)
        tree = MerkleTree(leaves)
        for i, leaf in enumerate(leaves):
            assert process_proof(leaf, tree.get_proof(i)) == tree.root
            assert verify_merkle_proof(tree.prove(i))

    def test_out_of_range_index(self):
        tree = MerkleTree(_leaves(3))
        with pytest.raises(IndexError):
            tree.get_proof(3)
        with pytest.raises(IndexError):
            tree.get_proof(-1)

    def test_tampered_leaf_fails(self):
        leaves = _leaves(4)
        tree = MerkleTree(leaves)
        assert not verify_leaf(keccak256(b"evil"), tree.get_proof(1), tree.root)

    def test_tampered_sibling_fails(self):
        leaves = _leaves(4)
        tree = MerkleTree(leaves)
        proof = list(tree.get_proof(2))
        proof[0] = keccak256(b"evil")
        assert not verify_leaf(leaves[2], proof, tree.root)

    def test_sibling_order_does_not_matter_within_layer(self):
        """Swapping a pair changes nothing thanks to commutative parents."""
        a, b, c, d = _leaves(4)
        assert build_merkle_root([a, b, c, d]) == build_merkle_root([b, a, d, c])

    def test_negative_index_in_proof_rejected(self):
        leaf = keccak256(b"x")
        with pytest.raises(ValueError, match="non-negative"):
            MerkleProof(leaf=leaf, index=-1, siblings=(), root=leaf)


class TestTreeDepth:
    """Tests for compute_tree_depth."""

    @pytest.mark.parametrize(
        "n,depth",
        [(0, 0), (1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (8, 3), (9, 4)],
    )
    def test_depth(self, n, depth):
        assert compute_tree_depth(n) == depth

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 9])
    def test_depth_matches_tree(self, n):
        assert MerkleTree(_leaves(n)).depth == compute_tree_depth(n)
