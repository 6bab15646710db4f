"""
CLI Gap Command

Describe which chain ids may use the fallback through a given leaf, and
optionally test one target.

Usage:
    create4-plan gap --chain 25 --next 1 [--target 120]

Exits 2 when a target is given and falls outside the gap.
"""

from __future__ import annotations

from argparse import Namespace

from create4.plan.gap import describe_gap_range, is_chain_id_in_gap
from create4.schemas.encoding import normalize_chain_id

from .common import (
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    format_json,
    is_pretty,
    require_option,
)


def gap_cmd(args: Namespace) -> int:
    chain_id = normalize_chain_id(require_option(args, "chain", "gap command requires --chain"))
    next_chain_id = normalize_chain_id(
        require_option(args, "next", "gap command requires --next"), "next chain id"
    )
    description = describe_gap_range(chain_id, next_chain_id)

    in_gap = None
    target = None
    if args.target is not None:
        target = normalize_chain_id(args.target, "target chain id")
        in_gap = is_chain_id_in_gap(chain_id, next_chain_id, target)

    if args.json:
        data = {
            "chainId": str(chain_id),
            "nextChainId": str(next_chain_id),
            "description": description,
        }
        if target is not None:
            data["target"] = str(target)
            data["inGap"] = in_gap
        print(format_json(data, is_pretty(args)))
    else:
        print(description)
        if target is not None:
            print(f"target {target}: {'in gap' if in_gap else 'not in gap'}")

    if in_gap is False:
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
