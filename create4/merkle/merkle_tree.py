"""
Merkle Tree Implementation
Deterministic commutative Merkle tree construction, proof generation, and
root re-derivation.

This module provides:
- MerkleTree: all layers of a tree built from an ordered list of leaf hashes
- Proof generation for any leaf index
- Root re-derivation by folding a proof into a leaf hash
- Proof verification against a known root

Canonical Commitment Rules (Hard Contracts):
1. Parent hashing: parent = commutative_hash(left, right), i.e. the two
   children are sorted ascending before keccak256(lo ‖ hi)
2. Padding rule: an unpaired last node at ANY layer is paired with itself
3. Proof rule: the sibling emitted for an unpaired node is the node itself
4. Single leaf: root = leaf, proof = [] (no layers built)
5. Empty leaves: rejected, a plan always has at least two leaves

Determinism Notes:
- Because parents are commutative, a proof carries no left/right flags and
  the fold depends only on the order of siblings
- This module never sorts leaves; the plan assembler fixes their order
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from create4.crypto.hashing import commutative_hash


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a commutative Merkle tree.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top, one per layer
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


class MerkleTree:
    """
    A fully materialized commutative Merkle tree.

    layers[0] is the input leaf list and layers[-1] holds the root alone.
    Each layer depends on the one below it; pairs within a layer are
    independent of each other.

    Example:
        >>> tree = MerkleTree([a, b, c])
        >>> process_proof(c, tree.get_proof(2)) == tree.root
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        if len(leaves) == 0:
            raise ValueError("cannot build a tree with zero leaves")

        layers: list[list[bytes]] = [list(leaves)]
        while len(layers[-1]) > 1:
            prev = layers[-1]
            next_layer: list[bytes] = []
            for i in range(0, len(prev), 2):
                left = prev[i]
                right = prev[i + 1] if i + 1 < len(prev) else left
                next_layer.append(commutative_hash(left, right))
            layers.append(next_layer)

        self._layers = tuple(tuple(layer) for layer in layers)

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def layers(self) -> tuple[tuple[bytes, ...], ...]:
        return self._layers

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    @property
    def depth(self) -> int:
        """Number of layers built above the leaves (= proof length)."""
        return len(self._layers) - 1

    def get_proof(self, index: int) -> tuple[bytes, ...]:
        """
        Return the sibling list for the leaf at index.

        At each layer the sibling is the paired node (index XOR 1); when the
        node is the unpaired last element of its layer the sibling is the
        node itself, matching how that layer's parent was built.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(
                f"Leaf index {index} out of range for {self.leaf_count} leaves"
            )

        siblings: list[bytes] = []
        idx = index
        for layer in self._layers[:-1]:
            pair_index = idx ^ 1
            sibling = layer[pair_index] if pair_index < len(layer) else layer[idx]
            siblings.append(sibling)
            idx //= 2
        return tuple(siblings)

    def prove(self, index: int) -> MerkleProof:
        """Return a MerkleProof for the leaf at index."""
        siblings = self.get_proof(index)
        return MerkleProof(
            leaf=self._layers[0][index],
            index=index,
            siblings=siblings,
            root=self.root,
        )


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Padding Rule: pair the unpaired last node with itself at each level.
    Example: [a, b, c] -> [H(a,b), H(c,c)] -> [H(H(a,b), H(c,c))]

    Raises:
        ValueError: If leaves is empty
    """
    return MerkleTree(leaves).root


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    return MerkleTree(leaves).prove(index)


def process_proof(leaf: bytes, siblings: Sequence[bytes]) -> bytes:
    """
    Fold a proof into a leaf hash with the commutative combinator.

    This is the exact re-derivation the verifying contract performs. It
    never fails: a wrong proof simply folds to a different node.
    """
    node = leaf
    for sibling in siblings:
        node = commutative_hash(node, sibling)
    return node


def verify_leaf(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
    """True if folding siblings into leaf reproduces root."""
    return process_proof(leaf, siblings) == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof against its claimed root.

    The index is not consulted: commutative parents make the fold
    independent of left/right position.
    """
    return verify_leaf(proof.leaf, proof.siblings, proof.root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the number of layers built above the leaves.

    A single leaf has depth 0, two leaves depth 1, three or four leaves depth 2.
    This equals the proof length for every leaf of the tree.
    """
    if num_leaves <= 1:
        return 0

    depth = 0
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "build_merkle_root",
    "build_merkle_proof",
    "process_proof",
    "verify_leaf",
    "verify_merkle_proof",
    "compute_tree_depth",
]
