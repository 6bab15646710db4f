"""
Merkle Tree and Leaf Encoding
Commutative Merkle tree construction, proof generation and re-derivation,
plus the packed leaf prefix shared by off-chain tooling and the verifier.

Canonical Commitment Rules:
1. Leaf hash: keccak256(prefix ‖ keccak256(initCode))
2. Parent hash: keccak256(min(a, b) ‖ max(a, b))
3. Padding: an unpaired node is paired with itself at any level
4. Single leaf: root = leaf

Usage:
    from create4.merkle import MerkleTree, process_proof

    tree = MerkleTree(leaf_hashes)
    proof = tree.get_proof(2)
    assert process_proof(leaf_hashes[2], proof) == tree.root
"""
from .leaf import (
    PREFIX_LENGTH,
    FALLBACK_PREFIX,
    LeafPrefix,
    pack_leaf_prefix,
    unpack_leaf_prefix,
    compute_leaf_hash,
)
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_merkle_root,
    build_merkle_proof,
    process_proof,
    verify_leaf,
    verify_merkle_proof,
    compute_tree_depth,
)


__all__ = [
    # Leaf encoding
    "PREFIX_LENGTH",
    "FALLBACK_PREFIX",
    "LeafPrefix",
    "pack_leaf_prefix",
    "unpack_leaf_prefix",
    "compute_leaf_hash",
    # Tree
    "MerkleProof",
    "MerkleTree",
    "build_merkle_root",
    "build_merkle_proof",
    "process_proof",
    "verify_leaf",
    "verify_merkle_proof",
    "compute_tree_depth",
]
