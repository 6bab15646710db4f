"""
CLI Proof Command

Print the inclusion proof for one chain id of a plan.

Usage:
    create4-plan proof --input spec.json --chain 10 [--pretty]
"""

from __future__ import annotations

from argparse import Namespace

from create4.plan.builder import get_chain_proof

from .common import EXIT_SUCCESS, emit_json, read_spec, require_option


def proof_cmd(args: Namespace) -> int:
    spec = read_spec(args)
    chain_id = require_option(args, "chain", "proof command requires --chain")
    proof = get_chain_proof(spec, chain_id)
    emit_json(args, proof.to_json_dict())
    return EXIT_SUCCESS
