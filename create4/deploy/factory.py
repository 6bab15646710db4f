"""
Verifying Factory
Off-chain mirror of the CREATE4 factory contract's two entry points.

The factory stores no roots. Every deployment salt is recomputed from
caller-supplied proof material:

Primary path (chain has its own leaf):
    leaf = keccak256(pack(chainid, nextChainId, 0) ‖ keccak256(initCode))
    node = fold(leaf, proof)
    deploy(keccak256(node ‖ salt), initCode)

Fallback path (chain falls in some leaf's gap):
    1. gap prefix must not carry the fallback flag
    2. chainid must lie in the gap of that leaf
    3. fold(gap leaf, gapProof) must equal fold(fallback leaf, fallbackProof)
    4. deploy(keccak256(node ‖ salt), initCode)

A wrong proof on the primary path is not an error: it folds to a different
node and so deploys to a different, equally deterministic address. Users
must check the address they expect before relying on a deployment.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence, Union

from create4.crypto.hashing import as_bytes, hash_pair, keccak256, to_hex
from create4.merkle.leaf import (
    FALLBACK_PREFIX,
    compute_leaf_hash,
    pack_leaf_prefix,
    unpack_leaf_prefix,
)
from create4.merkle.merkle_tree import process_proof
from create4.plan.gap import require_chain_id_in_gap
from create4.schemas.encoding import bytecode_to_bytes, normalize_chain_id
from create4.schemas.errors import ProofConsistencyException

from .create3 import DeploymentPrimitive


logger = logging.getLogger(__name__)

BytesLike = Union[bytes, str]


def _proof_bytes(proof: Sequence[BytesLike], field_name: str) -> list[bytes]:
    return [as_bytes(p, 32, f"{field_name}[{i}]") for i, p in enumerate(proof)]


def _init_code_bytes(init_code: BytesLike) -> bytes:
    if isinstance(init_code, (bytes, bytearray)):
        return bytes(init_code)
    return bytecode_to_bytes(init_code, "init code")


class Create4Factory:
    """
    Deploys contracts at plan-committed addresses on one chain.

    Args:
        chain_id: The chain this factory instance runs on (block.chainid)
        primitive: CREATE3 deployment primitive that performs the deployment
    """

    def __init__(self, chain_id: Any, primitive: DeploymentPrimitive) -> None:
        self.chain_id = normalize_chain_id(chain_id)
        self.primitive = primitive

    # -------------------------------------------------------------------------
    # Salt derivation
    # -------------------------------------------------------------------------

    def primary_deployment_salt(
        self,
        proof: Sequence[BytesLike],
        init_code: BytesLike,
        next_chain_id: Any,
        salt: BytesLike,
    ) -> bytes:
        """Deployment salt for the primary path. Never raises on a wrong proof."""
        code = _init_code_bytes(init_code)
        prefix = pack_leaf_prefix(
            self.chain_id, normalize_chain_id(next_chain_id, "next chain id"), 0
        )
        leaf = compute_leaf_hash(prefix, keccak256(code))
        node = process_proof(leaf, _proof_bytes(proof, "proof"))
        return hash_pair(node, as_bytes(salt, 32, "salt"))

    def fallback_deployment_salt(
        self,
        gap_leaf_prefix: BytesLike,
        gap_leaf_init_code_hash: BytesLike,
        gap_proof: Sequence[BytesLike],
        fallback_proof: Sequence[BytesLike],
        init_code: BytesLike,
        salt: BytesLike,
    ) -> bytes:
        """
        Deployment salt for the fallback path.

        Raises:
            ProofConsistencyException: the gap leaf is the fallback leaf, or
                the two proofs fold to different nodes
            GapException: this chain is not in the gap leaf's gap
        """
        prefix_bytes = as_bytes(gap_leaf_prefix, 32, "gap leaf prefix")
        decoded = unpack_leaf_prefix(prefix_bytes)
        if decoded.is_fallback:
            raise ProofConsistencyException(
                "gap leaf must not be the fallback leaf",
                details={"gap_leaf_prefix": to_hex(prefix_bytes)},
            )

        require_chain_id_in_gap(decoded.chain_id, decoded.next_chain_id, self.chain_id)

        gap_leaf = compute_leaf_hash(
            prefix_bytes, as_bytes(gap_leaf_init_code_hash, 32, "gap leaf init code hash")
        )
        gap_node = process_proof(gap_leaf, _proof_bytes(gap_proof, "gap proof"))

        fallback_leaf = compute_leaf_hash(FALLBACK_PREFIX, keccak256(_init_code_bytes(init_code)))
        fallback_node = process_proof(fallback_leaf, _proof_bytes(fallback_proof, "fallback proof"))

        if gap_node != fallback_node:
            logger.warning(
                f"Fallback proof mismatch on chain {self.chain_id}: "
                f"gap node {to_hex(gap_node)} != fallback node {to_hex(fallback_node)}"
            )
            raise ProofConsistencyException(
                "gap proof and fallback proof fold to different roots",
                details={
                    "chain_id": self.chain_id,
                    "gap_node": to_hex(gap_node),
                    "fallback_node": to_hex(fallback_node),
                },
            )

        return hash_pair(gap_node, as_bytes(salt, 32, "salt"))

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def deploy(
        self,
        proof: Sequence[BytesLike],
        init_code: BytesLike,
        next_chain_id: Any,
        salt: BytesLike,
    ) -> str:
        """Deploy this chain's own leaf. Returns the deployed address."""
        deployment_salt = self.primary_deployment_salt(proof, init_code, next_chain_id, salt)
        address = self.primitive.deploy(deployment_salt, _init_code_bytes(init_code))
        logger.debug(f"Primary deployment on chain {self.chain_id} at {address}")
        return address

    def deploy_fallback(
        self,
        gap_leaf_prefix: BytesLike,
        gap_leaf_init_code_hash: BytesLike,
        gap_proof: Sequence[BytesLike],
        fallback_proof: Sequence[BytesLike],
        init_code: BytesLike,
        salt: BytesLike,
    ) -> str:
        """Deploy the fallback init code on a chain without its own leaf."""
        deployment_salt = self.fallback_deployment_salt(
            gap_leaf_prefix,
            gap_leaf_init_code_hash,
            gap_proof,
            fallback_proof,
            init_code,
            salt,
        )
        address = self.primitive.deploy(deployment_salt, _init_code_bytes(init_code))
        logger.debug(f"Fallback deployment on chain {self.chain_id} at {address}")
        return address

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def compute_address(
        self,
        proof: Sequence[BytesLike],
        init_code: BytesLike,
        next_chain_id: Any,
        salt: BytesLike,
    ) -> str:
        return self.primitive.get_address(
            self.primary_deployment_salt(proof, init_code, next_chain_id, salt)
        )

    def compute_fallback_address(
        self,
        gap_leaf_prefix: BytesLike,
        gap_leaf_init_code_hash: BytesLike,
        gap_proof: Sequence[BytesLike],
        fallback_proof: Sequence[BytesLike],
        init_code: BytesLike,
        salt: BytesLike,
    ) -> str:
        return self.primitive.get_address(
            self.fallback_deployment_salt(
                gap_leaf_prefix,
                gap_leaf_init_code_hash,
                gap_proof,
                fallback_proof,
                init_code,
                salt,
            )
        )


__all__ = ["Create4Factory"]
