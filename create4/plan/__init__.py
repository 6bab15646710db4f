"""
Deployment plan assembly, proof queries, verification and gap logic.

Usage:
    from create4.plan import build_plan_from_spec, get_chain_proof

    plan = build_plan_from_spec(spec_dict)
    proof = get_chain_proof(spec_dict, 1)
"""
from .builder import (
    PlanLeaf,
    BuiltPlan,
    make_leaf,
    build_deployment_plan,
    build_plan_from_spec,
    find_leaf,
    get_chain_proof,
    PlanVerificationReport,
    verify_plan,
)
from .gap import (
    is_chain_id_in_gap,
    require_chain_id_in_gap,
    describe_gap_range,
)


__all__ = [
    # Assembly
    "PlanLeaf",
    "BuiltPlan",
    "make_leaf",
    "build_deployment_plan",
    "build_plan_from_spec",
    "find_leaf",
    "get_chain_proof",
    # Verification
    "PlanVerificationReport",
    "verify_plan",
    # Gap
    "is_chain_id_in_gap",
    "require_chain_id_in_gap",
    "describe_gap_range",
]
