"""
CLI View Command

Human-readable summary of a plan: root, salt, each leaf with its successor
and gap, and the fallback leaf.

Usage:
    create4-plan view --input spec.json [--proofs]
"""

from __future__ import annotations

from argparse import Namespace

from create4.plan.builder import build_plan_from_spec
from create4.plan.gap import describe_gap_range
from create4.schemas.plan import DeploymentPlan, LeafRecord

from .common import EXIT_SUCCESS, read_spec


def _print_proof(leaf: LeafRecord) -> None:
    if not leaf.proof:
        print("    proof: []")
        return
    print("    proof:")
    for node in leaf.proof:
        print(f"      - {node}")


def print_plan(plan: DeploymentPlan, show_proofs: bool = False) -> None:
    if plan.name:
        print(f"name: {plan.name}")
    if plan.version:
        print(f"version: {plan.version}")
    if plan.description:
        print(f"description: {plan.description}")
    print(f"root: {plan.root}")
    print(f"salt: {plan.salt}")
    print(f"\nleaves ({len(plan.leaves)}):")
    for leaf in plan.leaves:
        label = f" ({leaf.label})" if leaf.label else ""
        print(f"  chain {leaf.chain_id}{label} -> next {leaf.next_chain_id}")
        print(f"    initCodeHash: {leaf.init_code_hash}")
        print(f"    leafHash: {leaf.leaf_hash}")
        print(f"    {describe_gap_range(leaf.chain_id, leaf.next_chain_id)}")
        if show_proofs:
            _print_proof(leaf)

    print("\nfallback:")
    print(f"    initCodeHash: {plan.fallback.init_code_hash}")
    print(f"    leafHash: {plan.fallback.leaf_hash}")
    if show_proofs:
        _print_proof(plan.fallback)


def view_cmd(args: Namespace) -> int:
    spec = read_spec(args)
    plan = build_plan_from_spec(spec)
    print_plan(plan, show_proofs=args.proofs)
    return EXIT_SUCCESS
