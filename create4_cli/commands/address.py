"""
CLI Address Command

Compute the deterministic CREATE3 address of a plan for a factory.

Usage:
    create4-plan address --input spec.json --factory 0x... [--salt 0x...]

The factory defaults to CREATE4_FACTORY or `default_factory` from the config
file. The salt defaults to the plan spec's salt, then to zero.
"""

from __future__ import annotations

from argparse import Namespace

from create4.deploy.create3 import compute_plan_deployment

from .common import EXIT_SUCCESS, UsageError, emit_json, read_spec


def address_cmd(args: Namespace) -> int:
    spec = read_spec(args)

    factory = args.factory
    config = getattr(args, "cli_config", None)
    if not factory and config is not None:
        factory = config.default_factory
    if not factory:
        raise UsageError("Missing required --factory parameter")

    deployment = compute_plan_deployment(spec, factory, salt_override=args.salt)
    emit_json(args, deployment.to_json_dict())
    return EXIT_SUCCESS
