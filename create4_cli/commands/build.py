"""
CLI Build Command

Build a deployment plan (root, salt, leaves with proofs, fallback) from a
plan spec.

Usage:
    create4-plan build --input spec.json [--output plan.json] [--pretty]
"""

from __future__ import annotations

import logging
from argparse import Namespace

from create4.plan.builder import build_plan_from_spec

from .common import EXIT_SUCCESS, emit_json, read_spec


logger = logging.getLogger(__name__)


def build_cmd(args: Namespace) -> int:
    spec = read_spec(args)
    plan = build_plan_from_spec(spec)
    logger.info(f"Built plan {plan.root} with {len(plan.leaves)} chain leaves")
    emit_json(args, plan.to_json_dict())
    return EXIT_SUCCESS
