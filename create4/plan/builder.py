"""
Deployment Plan Assembly & Verification

Provides pure functions to canonicalize chain entries into a committed
deployment plan, query per-chain proofs, and independently re-derive every
commitment of a published plan.

Assembly steps:
1. Normalize each entry's chain id (uint64) and init code (hex bytes)
2. Sort entries ascending by chain id and reject duplicates
3. Point each leaf at its successor, cyclically (last wraps to first)
4. Append the fallback leaf (chainId = nextChainId = 0, flag set)
5. Build the commutative Merkle tree over [sorted leaves..., fallback]
6. Attach each leaf's proof

The root is a function of the leaf multiset; the published leaf order is
chain-id sorted so successor pointers and output are deterministic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence, Union

from create4.crypto.hashing import from_hex, keccak256, to_hex
from create4.merkle.leaf import (
    FALLBACK_PREFIX,
    compute_leaf_hash,
    pack_leaf_prefix,
)
from create4.merkle.merkle_tree import MerkleTree, compute_tree_depth, process_proof
from create4.schemas.encoding import (
    ZERO_SALT,
    bytecode_to_bytes,
    get_salt_hex,
    normalize_chain_id,
)
from create4.schemas.errors import EncodingException, PlanValidationException
from create4.schemas.plan import (
    ChainEntrySpec,
    ChainProof,
    DeploymentPlan,
    LeafRecord,
    PlanSpec,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Leaves
# =============================================================================


@dataclass(frozen=True)
class PlanLeaf:
    """A computed leaf. Immutable once built."""
    chain_id: int
    next_chain_id: int
    is_fallback: bool
    init_code: bytes
    init_code_hash: bytes
    prefix: bytes
    leaf_hash: bytes
    label: Optional[str] = None
    proof: tuple[bytes, ...] = ()

    def to_record(self) -> LeafRecord:
        return LeafRecord(
            chain_id=str(self.chain_id),
            next_chain_id=str(self.next_chain_id),
            label=self.label,
            init_code=to_hex(self.init_code),
            init_code_hash=to_hex(self.init_code_hash),
            prefix=to_hex(self.prefix),
            leaf_hash=to_hex(self.leaf_hash),
            proof=[to_hex(p) for p in self.proof],
        )


def make_leaf(
    chain_id: int,
    next_chain_id: int,
    init_code: bytes,
    *,
    is_fallback: bool = False,
    label: Optional[str] = None,
) -> PlanLeaf:
    """Compute prefix, init code hash and leaf hash for one leaf."""
    prefix = FALLBACK_PREFIX if is_fallback else pack_leaf_prefix(chain_id, next_chain_id, 0)
    init_code_hash = keccak256(init_code)
    return PlanLeaf(
        chain_id=chain_id,
        next_chain_id=next_chain_id,
        is_fallback=is_fallback,
        init_code=init_code,
        init_code_hash=init_code_hash,
        prefix=prefix,
        leaf_hash=compute_leaf_hash(prefix, init_code_hash),
        label=label,
    )


@dataclass(frozen=True)
class BuiltPlan:
    """Root plus sorted chain leaves and the fallback leaf, all with proofs."""
    root: bytes
    leaves: tuple[PlanLeaf, ...]
    fallback: PlanLeaf

    def to_model(
        self,
        salt: str = ZERO_SALT,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> DeploymentPlan:
        return DeploymentPlan(
            root=to_hex(self.root),
            salt=salt,
            leaves=[leaf.to_record() for leaf in self.leaves],
            fallback=self.fallback.to_record(),
            **dict(metadata or {}),
        )


# =============================================================================
# Assembly
# =============================================================================


def _entry_value(entry: Any, snake: str, camel: str) -> Any:
    if isinstance(entry, ChainEntrySpec):
        return getattr(entry, snake)
    if isinstance(entry, Mapping):
        return entry.get(camel, entry.get(snake))
    raise PlanValidationException("chain entries must be objects")


@dataclass(frozen=True)
class _NormalizedEntry:
    chain_id: int
    init_code: bytes
    label: str


def _normalize_entry(entry: Any, index: int) -> _NormalizedEntry:
    raw_chain_id = _entry_value(entry, "chain_id", "chainId")
    raw_init_code = _entry_value(entry, "init_code", "initCode")
    label = _entry_value(entry, "label", "label")

    if raw_chain_id is None:
        raise PlanValidationException(
            f"chain entry at index {index} is missing a chainId", entry_index=index
        )
    if not raw_init_code:
        raise PlanValidationException(
            f"chain entry at index {index} is missing init code", entry_index=index
        )
    if label is not None and not isinstance(label, str):
        raise PlanValidationException(
            f"label for chain entry at index {index} must be a string", entry_index=index
        )

    try:
        chain_id = normalize_chain_id(raw_chain_id, f"chain id for entry {index}")
    except (EncodingException, PlanValidationException) as e:
        raise PlanValidationException(e.message, entry_index=index) from e

    try:
        init_code = bytecode_to_bytes(raw_init_code, f"init code for chain {chain_id}")
    except EncodingException as e:
        raise PlanValidationException(
            e.message, chain_id=chain_id, entry_index=index
        ) from e

    return _NormalizedEntry(
        chain_id=chain_id,
        init_code=init_code,
        label=label or f"chain-{chain_id}",
    )


def build_deployment_plan(
    chain_entries: Sequence[Any],
    fallback_init_code: Any,
) -> BuiltPlan:
    """
    Build a deterministic deployment plan from unordered chain entries.

    Args:
        chain_entries: ChainEntrySpec models or mappings with chainId,
            initCode and optional label (snake_case keys also accepted)
        fallback_init_code: Hex init code for the fallback leaf

    Returns:
        BuiltPlan with root, sorted leaves and fallback, each with its proof

    Raises:
        PlanValidationException: empty entry list, missing fallback code,
            missing/invalid/out-of-range chain id, missing or malformed
            init code, duplicate chain ids
    """
    if not chain_entries:
        raise PlanValidationException("at least one chain entry is required")
    if not fallback_init_code:
        raise PlanValidationException("fallback init code is required")

    normalized = [_normalize_entry(entry, i) for i, entry in enumerate(chain_entries)]
    ordered = sorted(normalized, key=lambda e: e.chain_id)

    for prev, cur in zip(ordered, ordered[1:]):
        if cur.chain_id == prev.chain_id:
            raise PlanValidationException(
                "duplicate chain ids are not allowed", chain_id=cur.chain_id
            )

    try:
        fallback_code = bytecode_to_bytes(fallback_init_code, "fallback init code")
    except EncodingException as e:
        raise PlanValidationException(e.message) from e

    chain_leaves = [
        make_leaf(
            entry.chain_id,
            ordered[(i + 1) % len(ordered)].chain_id,
            entry.init_code,
            label=entry.label,
        )
        for i, entry in enumerate(ordered)
    ]
    fallback_leaf = make_leaf(0, 0, fallback_code, is_fallback=True)

    all_leaves = [*chain_leaves, fallback_leaf]
    tree = MerkleTree([leaf.leaf_hash for leaf in all_leaves])

    with_proofs = [
        replace(leaf, proof=tree.get_proof(i))
        for i, leaf in enumerate(all_leaves)
    ]

    logger.debug(
        f"Built plan with {len(chain_leaves)} chain leaves + fallback, "
        f"depth={tree.depth}, root={to_hex(tree.root)}"
    )

    return BuiltPlan(
        root=tree.root,
        leaves=tuple(with_proofs[:-1]),
        fallback=with_proofs[-1],
    )


def build_plan_from_spec(spec: Any) -> DeploymentPlan:
    """
    Build a deployment plan directly from an input spec and include metadata.

    Args:
        spec: PlanSpec or decoded JSON object

    Returns:
        DeploymentPlan with root, salt (zero salt if absent), leaves,
        fallback, and any name/description/version from the plan spec
    """
    plan_spec = PlanSpec.from_input(spec)
    built = build_deployment_plan(plan_spec.chains, plan_spec.fallback_init_code)
    return built.to_model(
        salt=get_salt_hex(plan_spec.salt),
        metadata=plan_spec.metadata(),
    )


def find_leaf(
    plan: Union[BuiltPlan, DeploymentPlan], chain_id: Any
) -> Union[PlanLeaf, LeafRecord, None]:
    """
    Return the chain leaf for chain_id, or None. Never the fallback.

    Works on both a BuiltPlan (int ids) and a serialized DeploymentPlan
    (decimal string ids); the leaf type matches the plan type.
    """
    desired = normalize_chain_id(chain_id)
    for leaf in plan.leaves:
        if int(leaf.chain_id) == desired:
            return leaf
    return None


def get_chain_proof(spec: Any, chain_id: Any) -> ChainProof:
    """
    Return the inclusion proof for a specific chain id from a plan spec.

    Raises:
        PlanValidationException: the plan has no entry for chain_id
    """
    plan = build_plan_from_spec(spec)
    desired = normalize_chain_id(chain_id)
    leaf = find_leaf(plan, desired)
    if leaf is None:
        raise PlanValidationException(
            f"No chain entry found for id {chain_id}", chain_id=desired
        )
    return ChainProof(
        root=plan.root,
        chain_id=leaf.chain_id,
        next_chain_id=leaf.next_chain_id,
        prefix=leaf.prefix,
        init_code=leaf.init_code,
        init_code_hash=leaf.init_code_hash,
        leaf_hash=leaf.leaf_hash,
        proof=leaf.proof,
        salt=plan.salt,
    )


# =============================================================================
# Independent verification
# =============================================================================


@dataclass
class PlanVerificationReport:
    """Outcome of re-deriving every commitment in a published plan."""
    root: str = ""
    checked_leaves: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "ok": self.ok,
            "checkedLeaves": self.checked_leaves,
            "errors": list(self.errors),
        }


def _check_leaf(
    leaf: LeafRecord,
    root: bytes,
    expected_depth: int,
    is_fallback: bool,
    report: PlanVerificationReport,
) -> bytes:
    name = "fallback" if is_fallback else f"chain {leaf.chain_id}"
    chain_id = int(leaf.chain_id)
    next_chain_id = int(leaf.next_chain_id)

    init_code = from_hex(leaf.init_code, field_name=f"init code of {name}")
    init_code_hash = keccak256(init_code)
    if to_hex(init_code_hash) != leaf.init_code_hash:
        report.errors.append(f"{name}: initCodeHash does not match init code")

    try:
        prefix = pack_leaf_prefix(chain_id, next_chain_id, is_fallback)
    except EncodingException as e:
        report.errors.append(f"{name}: {e.message}")
        prefix = from_hex(leaf.prefix, 32, "prefix")
    if to_hex(prefix) != leaf.prefix:
        report.errors.append(f"{name}: prefix does not match chain ids")

    leaf_hash = compute_leaf_hash(prefix, init_code_hash)
    if to_hex(leaf_hash) != leaf.leaf_hash:
        report.errors.append(f"{name}: leafHash does not match prefix and initCodeHash")

    if len(leaf.proof) != expected_depth:
        report.errors.append(
            f"{name}: proof has {len(leaf.proof)} elements, expected {expected_depth}"
        )
    siblings = [from_hex(p, 32, "proof element") for p in leaf.proof]
    if process_proof(leaf_hash, siblings) != root:
        report.errors.append(f"{name}: proof does not fold to the plan root")

    report.checked_leaves += 1
    return leaf_hash


def verify_plan(plan: DeploymentPlan) -> PlanVerificationReport:
    """
    Re-derive every commitment of a published plan from its init code.

    Checks ordering and successor pointers, each leaf's hash chain, each
    proof against the root, and the root against a freshly built tree.
    Problems are collected rather than raised so one run reports all of them.
    """
    report = PlanVerificationReport(root=plan.root)
    root = from_hex(plan.root, 32, "plan root")

    if not plan.leaves:
        report.errors.append("plan has no chain leaves")
        return report

    chain_ids = [int(leaf.chain_id) for leaf in plan.leaves]
    if any(b <= a for a, b in zip(chain_ids, chain_ids[1:])):
        report.errors.append("chain leaves are not strictly ascending by chain id")
    for i, leaf in enumerate(plan.leaves):
        expected_next = chain_ids[(i + 1) % len(chain_ids)]
        if int(leaf.next_chain_id) != expected_next:
            report.errors.append(
                f"chain {leaf.chain_id}: nextChainId {leaf.next_chain_id} "
                f"should be {expected_next}"
            )

    if plan.fallback.chain_id != "0" or plan.fallback.next_chain_id != "0":
        report.errors.append("fallback leaf must have chainId = nextChainId = 0")

    expected_depth = compute_tree_depth(len(plan.leaves) + 1)
    leaf_hashes = [
        _check_leaf(leaf, root, expected_depth, False, report) for leaf in plan.leaves
    ]
    leaf_hashes.append(_check_leaf(plan.fallback, root, expected_depth, True, report))

    if MerkleTree(leaf_hashes).root != root:
        report.errors.append("root does not match a tree rebuilt from the leaves")

    if report.errors:
        logger.warning(f"Plan {plan.root} failed verification: {len(report.errors)} problem(s)")
    return report


__all__ = [
    "PlanLeaf",
    "BuiltPlan",
    "make_leaf",
    "build_deployment_plan",
    "build_plan_from_spec",
    "find_leaf",
    "get_chain_proof",
    "PlanVerificationReport",
    "verify_plan",
]
