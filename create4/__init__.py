"""
CREATE4: one deterministic address for a contract across many chains, with
per-chain init code committed in a Merkle plan and a fallback for every
chain the plan does not name.

Subpackages:
- crypto: keccak256 and pair hashing
- schemas: errors, input encoding, pydantic models
- merkle: leaf encoding and the commutative Merkle tree
- plan: plan assembly, proofs, verification, gap logic
- deploy: CREATE3 addresses and the verifying factory
"""

__version__ = "0.1.0"
